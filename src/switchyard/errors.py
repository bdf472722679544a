"""Switchyard exception hierarchy.

Registration errors surface at startup from ``Router.handle``. Parameter
errors are returned to the calling handler, never turned into responses.
"""


class SwitchyardError(Exception):
    """Base for all switchyard-specific errors."""


class ConfigurationError(SwitchyardError):
    """Raised when a route or middleware is registered with invalid input."""


class InvalidPatternError(ConfigurationError, ValueError):
    """The path template is not a valid regular expression."""

    def __init__(self, template: str, reason: str) -> None:
        super().__init__(f"Invalid path pattern {template!r}: {reason}")
        self.template = template
        self.reason = reason


class InvalidHandlerError(ConfigurationError, TypeError):
    """The handler is neither an ASGI app nor a ``(writer, request)`` function."""


class ParamNotFoundError(SwitchyardError, LookupError):
    """No path parameter was captured under the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Path parameter {name!r} not found")
        self.name = name


class ParamParseError(SwitchyardError, ValueError):
    """A path parameter is not a base-10 integer literal."""

    def __init__(self, name: str, value: str) -> None:
        super().__init__(f"Path parameter {name!r} is not an integer: {value!r}")
        self.name = name
        self.value = value


class ParamsUnavailableError(SwitchyardError, RuntimeError):
    """Path parameters were requested for a request that was never routed."""


class DecodeError(SwitchyardError, ValueError):
    """The request body could not be decoded into the requested shape."""
