"""Remote whitelist transport and response decoding."""

from .client import WhitelistClient
from .decoder import decode, parse_document, select_format
from .models import FetchResponse, RemoteDocument, ResponseFormat

__all__ = [
    "WhitelistClient",
    "decode",
    "parse_document",
    "select_format",
    "FetchResponse",
    "RemoteDocument",
    "ResponseFormat",
]
