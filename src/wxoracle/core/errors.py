from __future__ import annotations


class RegistryError(Exception):
    """Base class for failed registry state transitions."""

    code = "ERR_REGISTRY"


class NotAuthorized(RegistryError):
    """The caller lacks the privilege required for a mutating operation.

    Recoverable: the caller may retry once it has been granted authorization.
    No state is changed when this is raised.
    """

    code = "ERR_NOT_AUTHORIZED"

    def __init__(self, caller: str, action: str) -> None:
        self.caller = caller
        self.action = action
        super().__init__(f"{caller!r} is not authorized to {action}")


class TimestampCollision(RegistryError, ValueError):
    code = "ERR_TIMESTAMP_COLLISION"

    def __init__(self, location: str, timestamp: int) -> None:
        self.location = location
        self.timestamp = timestamp
        super().__init__(f"A record for {location!r} already exists at timestamp {timestamp}")
