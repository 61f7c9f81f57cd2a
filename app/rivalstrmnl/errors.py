"""Error kinds raised by the update pipeline."""
from typing import Optional


class RivalsTrmnlError(Exception):
    """Base class for every error this project raises."""


class ConfigError(RivalsTrmnlError):
    """A mandatory run parameter is missing or unusable."""


class UpstreamError(RivalsTrmnlError):
    """The stats provider failed or returned an unexpected shape."""

    def __init__(self, message: str, endpoint: Optional[str] = None, status: Optional[int] = None):
        super().__init__(message)
        self.endpoint = endpoint
        self.status = status

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.endpoint:
            parts.append(f"endpoint={self.endpoint}")
        if self.status is not None:
            parts.append(f"status={self.status}")
        return " ".join(parts)


class NotFoundError(RivalsTrmnlError):
    """An id is absent from a reference table."""

    def __init__(self, kind: str, ident):
        super().__init__(f"{kind} {ident} not found")
        self.kind = kind
        self.ident = ident


class DownstreamError(RivalsTrmnlError):
    """The display webhook rejected a payload."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status
