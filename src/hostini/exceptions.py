"""Hostini exceptions."""

from typing import Any


class HostiniError(Exception):
    """Base class for hostini errors.

    Attributes:
        msg: Human-readable error message
        details: Extra context fields describing the failure

    Example:
        raise HostiniError("Cannot read config", path="/etc/hostini.yml")
        # details: {"path": "/etc/hostini.yml"}
    """

    def __init__(self, msg: str, **details: Any) -> None:
        super().__init__(msg)
        self.msg = msg
        self.details: dict[str, Any] = details

    def __str__(self) -> str:
        return self.msg


class InvalidHostError(HostiniError):
    """Raised when a host is constructed without a name.

    Parsing is all-or-nothing on this condition: the error propagates out
    of ``read`` and no partial inventory is returned.
    """

    def __init__(self, name: Any = None) -> None:
        super().__init__(
            "Host name cannot be None or empty",
            name=name,
        )


class ConfigError(HostiniError):
    """Raised when a configuration file cannot be loaded."""

    def __init__(self, msg: str, path: str | None = None) -> None:
        super().__init__(msg, path=path)
        self.path = path
