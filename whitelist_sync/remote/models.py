"""
Data models for remote whitelist documents.

These models represent what the remote source returns, before anything
is committed to the local store.
"""

from dataclasses import dataclass
from enum import Enum


class ResponseFormat(Enum):
    """Wire shape of a remote whitelist response."""

    # Body is the JSON array itself
    DIRECT = "direct"

    # Body is a metadata object whose `content` field holds the
    # base64-encoded JSON array (GitHub contents API)
    ENVELOPE = "envelope"


@dataclass(frozen=True)
class FetchResponse:
    """
    Raw result of a single GET against the remote source.

    Attributes:
        url: URL that was requested
        status_code: HTTP status code
        body: Raw response bytes
    """
    url: str
    status_code: int
    body: bytes = b""

    @property
    def is_success(self) -> bool:
        """Check for a 2xx status."""
        return 200 <= self.status_code < 300

    @property
    def is_empty(self) -> bool:
        return not self.body

    def __repr__(self) -> str:
        return (
            f"FetchResponse(url='{self.url}', status_code={self.status_code}, "
            f"body=<{len(self.body)} bytes>)"
        )


@dataclass(frozen=True)
class RemoteDocument:
    """
    A decoded whitelist document.

    Entries keep the order and duplicates of the wire payload; they are
    only collapsed when folded into a whitelist.
    """
    entries: tuple[str, ...]
    format: ResponseFormat = ResponseFormat.DIRECT

    def to_whitelist(self) -> frozenset[str]:
        """Fold the document into a set of unique entries."""
        return frozenset(self.entries)

    def __len__(self) -> int:
        return len(self.entries)
