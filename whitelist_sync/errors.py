"""
Error taxonomy for remote whitelist synchronization.

Every failure raised while fetching or decoding a whitelist document is a
WhitelistSyncError. The synchronizer catches these at its boundary and turns
them into a failed SyncResult, so none of them reach its callers.
"""

from typing import Optional


class WhitelistSyncError(Exception):
    """Base class for failures during a synchronization run."""


class TransportError(WhitelistSyncError):
    """Raised when the request could not be completed (DNS, refused, timeout...)."""


class HttpError(WhitelistSyncError):
    """Raised when the remote source answers with a non-2xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class EmptyResponseError(WhitelistSyncError):
    """Raised when the remote source answers 2xx with an empty body."""


class DecodeError(WhitelistSyncError):
    """Raised when a response body cannot be turned into a whitelist."""


class MalformedEnvelopeError(DecodeError):
    """The envelope is not a JSON object with a string `content` field."""


class Base64DecodeError(DecodeError):
    """The envelope `content` field is not valid base64."""


class MalformedInnerDocumentError(DecodeError):
    """The base64-decoded envelope content is not a JSON array of strings."""


class MalformedDocumentError(DecodeError):
    """A direct response body is not a JSON array of strings."""
