"""Error taxonomy for the resolution and rendering pipeline.

Every error carries the HTTP status and plain-text message the inbound
endpoint answers with, so callers never have to map them again.
"""

from __future__ import annotations


class StoryfeedError(Exception):
    """Base class for all pipeline errors."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(StoryfeedError):
    """The handle is unknown, or known but not registered with this app."""

    status_code = 404


class ProfileLookupError(StoryfeedError):
    """The identity lookup failed for a reason other than a missing name."""


class FetchError(StoryfeedError):
    """A bucket resource answered with something other than 200 or 404."""

    def __init__(self, message: str, *, resource: str, status: int | None) -> None:
        super().__init__(message)
        self.resource = resource
        self.status = status


class DocumentDecodeError(StoryfeedError):
    """Stored story content does not parse as a document tree."""


class NameNotFoundError(Exception):
    """Raised by identity clients when the naming system has no such name."""

    def __init__(self, handle: str) -> None:
        super().__init__("Name not found")
        self.handle = handle
