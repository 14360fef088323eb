import contextlib
import warnings
from typing import Optional

from routergen.exceptions import _BaseRouterException


class RouterWarning(_BaseRouterException, Warning):
    pass


# print a warning
def router_warn(warning: RouterWarning | str):
    if isinstance(warning, str):
        warning = RouterWarning(warning)
    warnings.warn(warning, stacklevel=2)


@contextlib.contextmanager
def warnings_filter(warnings_control: Optional[str]):
    # note: using warnings.catch_warnings() since it saves and restores
    # the warnings filter
    with warnings.catch_warnings():
        set_warnings_filter(warnings_control)
        yield


def set_warnings_filter(warnings_control: Optional[str]):
    if warnings_control == "error":
        warnings_filter = "error"
    elif warnings_control == "none":
        warnings_filter = "ignore"
    else:
        assert warnings_control is None  # sanity
        warnings_filter = "default"

    if warnings_control is not None:
        # warnings.simplefilter only adds to the warnings filters,
        # so we should clear warnings filter between calls to simplefilter()
        warnings.resetwarnings()

    warnings.simplefilter(warnings_filter, category=RouterWarning)  # type: ignore[arg-type]


class UnreachableModule(RouterWarning):
    """
    Warn if a module exposes no routable function
    """

    pass
