"""Exception hierarchy for the listings service."""

from typing import Any


class LimerError(Exception):
    """Base class for errors raised by this package."""


class ContentStoreError(LimerError):
    """The content store could not be reached or returned an unusable response."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class EmailDeliveryError(LimerError):
    """The mail-delivery provider rejected a message or could not be reached."""

    def __init__(self, message: str, *, details: Any = None) -> None:
        super().__init__(message)
        self.details = details
