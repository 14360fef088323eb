class _BaseRouterException(Exception):
    """
    Base routergen exception class.

    This exception is not raised directly. Other exceptions inherit it in
    order to share message and hint formatting.
    """

    def __init__(self, message="Error Message not found.", hint=None):
        """
        Exception initializer.

        Arguments
        ---------
        message : str
            Error message to display with the exception.
        hint : str | Callable[[], str], optional
            Suggestion appended to the message. May be a callable, in which
            case it is only evaluated when the message is formatted.
        """
        self._message = message
        self._hint = hint
        super().__init__(message)

    @property
    def hint(self):
        # some hints are expensive to compute, so we wait until the last
        # minute when the formatted message is actually requested to compute
        # them.
        if callable(self._hint):
            return self._hint()
        return self._hint

    @property
    def message(self):
        msg = self._message
        if self.hint:
            msg += f"\n\n  (hint: {self.hint})"
        return msg

    def __str__(self):
        return self.message


class RouterException(_BaseRouterException):
    pass


class RouterValidationError(RouterException):
    """The modules given to the router generator are invalid."""


class EmptyModuleList(RouterValidationError):
    """No modules were supplied, so there is nothing to route to."""


class NoRoutableFunctions(RouterValidationError):
    """Modules were supplied but none of them exposes a routable function."""


class DuplicateModuleName(RouterValidationError):
    """Two modules share a name, so their address constants would clash."""


class InvalidAddress(RouterValidationError):
    """A module's deployed address is not a 20 byte hex address."""


class InvalidABIFragment(RouterValidationError):
    """A function entry of a module ABI has malformed parameter types."""


class SelectorCollision(RouterValidationError):
    """
    Two or more functions behind the same router hash to the same 4 byte
    selector.

    The offending selectors are available as ``collisions``, in ascending
    selector order.
    """

    def __init__(self, collisions, hint=None):
        self.collisions = tuple(collisions)
        lines = "\n".join(f"  {s.selector} // {s.module}.{s.name}()" for s in self.collisions)
        message = (
            "The following contracts have repeated function selectors "
            f"behind the same Router:\n{lines}\n"
        )
        super().__init__(message, hint=hint)


class ModuleLoadError(RouterException):
    """A module description file cannot be read."""


class RouterInternalException(_BaseRouterException):
    """
    Base routergen internal exception class.

    This exception is not raised directly, it is subclassed by other internal
    exceptions.

    Internal exceptions are raised as a means of telling the user that the
    generator has panicked, and that filing a bug report would be appropriate.
    """

    def __str__(self):
        return (
            f"{super().__str__()}\n\n"
            "This is an unhandled internal router generator error. "
            "Please create an issue to notify the developers!"
        )


class CodegenPanic(RouterInternalException):
    """Invalid dispatch tree or code generated during codegen phase"""
