import contextlib
import dataclasses
import os
from dataclasses import dataclass
from typing import Generator, Optional

ROUTERGEN_TRACEBACK_LIMIT: Optional[int]

_tb_limit_str = os.environ.get("ROUTERGEN_TRACEBACK_LIMIT")
if _tb_limit_str is not None:
    ROUTERGEN_TRACEBACK_LIMIT = int(_tb_limit_str)
else:
    ROUTERGEN_TRACEBACK_LIMIT = None


DEFAULT_ROUTER_NAME = "Router"


@dataclass
class Settings:
    router_name: str = DEFAULT_ROUTER_NAME
    can_receive_plain_eth: bool = False
    has_diamond_compat: bool = False
    exclude_coverage_functions: bool = False

    def __post_init__(self):
        # sanity check inputs
        assert isinstance(self.router_name, str)
        assert isinstance(self.can_receive_plain_eth, bool)
        assert isinstance(self.has_diamond_compat, bool)
        assert isinstance(self.exclude_coverage_functions, bool)

    def as_cli(self):
        ret = [f" --name {self.router_name}"]
        if self.can_receive_plain_eth:
            ret.append(" --receive")
        if self.has_diamond_compat:
            ret.append(" --diamond-compat")
        if self.exclude_coverage_functions:
            ret.append(" --exclude-coverage-functions")

        return "".join(ret)

    def as_dict(self):
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data):
        fields = {f.name for f in dataclasses.fields(cls)}
        unknown = set(data) - fields
        if unknown:
            raise ValueError(f"unknown settings: {', '.join(sorted(unknown))}")
        return cls(**data)


_DEBUG = os.environ.get("ROUTERGEN_DEBUG", "0") == "1"


def _is_debug_mode() -> bool:
    return _DEBUG


def _set_debug_mode(dbg: bool = False) -> None:
    global _DEBUG
    _DEBUG = dbg


@contextlib.contextmanager
def debug_mode(dbg: bool = True) -> Generator:
    """
    Toggle debug mode (extra invariant checks) for the duration of this
    context manager
    """
    tmp = _is_debug_mode()
    try:
        _set_debug_mode(dbg)
        yield
    finally:
        _set_debug_mode(tmp)
