"""
Response decoding for remote whitelist documents.

Two wire shapes are accepted:

    Direct:    ["app.one", "app.two"]
    Envelope:  {"content": "WyJhcHAub25lIl0=\\n", ...}

The envelope shape is what the GitHub contents API returns: the file is
base64-encoded inside the `content` field, split into lines. Which shape
to expect is decided from the source URL alone, see select_format().
"""

import base64
import binascii
import json
import logging
from typing import Any

from ..errors import (
    Base64DecodeError,
    DecodeError,
    MalformedDocumentError,
    MalformedEnvelopeError,
    MalformedInnerDocumentError,
)
from .models import RemoteDocument, ResponseFormat

logger = logging.getLogger(__name__)

ENVELOPE_HOST_MARKER = "api.github.com"


def select_format(source_url: str) -> ResponseFormat:
    """
    Decide which wire shape a source URL will answer with.

    Args:
        source_url: URL the body was fetched from

    Returns:
        ResponseFormat.ENVELOPE for GitHub API URLs, DIRECT otherwise
    """
    if ENVELOPE_HOST_MARKER in source_url:
        return ResponseFormat.ENVELOPE
    return ResponseFormat.DIRECT


def parse_document(body: bytes, source_url: str) -> RemoteDocument:
    """
    Parse a response body into a RemoteDocument.

    Args:
        body: Raw response bytes
        source_url: URL the body was fetched from

    Returns:
        RemoteDocument with the entries in wire order

    Raises:
        DecodeError: One of its subclasses, depending on what was malformed
    """
    response_format = select_format(source_url)

    if response_format is ResponseFormat.ENVELOPE:
        entries = _parse_envelope(body)
    else:
        entries = _parse_string_array(body, MalformedDocumentError, "Response body")

    return RemoteDocument(entries=entries, format=response_format)


def decode(body: bytes, source_url: str) -> frozenset[str]:
    """Decode a response body straight to a whitelist set."""
    return parse_document(body, source_url).to_whitelist()


def _parse_envelope(body: bytes) -> tuple[str, ...]:
    envelope = _load_json(body, MalformedEnvelopeError, "Envelope")

    if not isinstance(envelope, dict):
        raise MalformedEnvelopeError(
            f"Envelope must be a JSON object, got {type(envelope).__name__}"
        )

    encoded = envelope.get("content")
    if encoded is None:
        raise MalformedEnvelopeError("No content field in envelope response")
    if not isinstance(encoded, str):
        raise MalformedEnvelopeError(
            f"Envelope content must be a string, got {type(encoded).__name__}"
        )

    # GitHub wraps the base64 payload at 60 columns
    cleaned = encoded.replace("\n", "").replace("\r", "")
    try:
        inner = base64.b64decode(cleaned, validate=True)
    except (binascii.Error, ValueError) as e:
        raise Base64DecodeError(f"Envelope content is not valid base64: {e}") from e

    logger.debug(f"Decoded whitelist content: {inner[:500]!r}")

    return _parse_string_array(inner, MalformedInnerDocumentError, "Envelope content")


def _parse_string_array(
    raw: bytes,
    error_cls: type[DecodeError],
    what: str,
) -> tuple[str, ...]:
    """
    Parse bytes as a JSON array whose items are all strings.

    Args:
        raw: UTF-8 encoded JSON
        error_cls: DecodeError subclass to raise on failure
        what: Label for error messages

    Returns:
        Tuple of entries in wire order
    """
    data = _load_json(raw, error_cls, what)

    if not isinstance(data, list):
        raise error_cls(f"{what} must be a JSON array, got {type(data).__name__}")

    for index, item in enumerate(data):
        if not isinstance(item, str):
            raise error_cls(
                f"{what} item {index} must be a string, got {type(item).__name__}"
            )

    return tuple(data)


def _load_json(raw: bytes, error_cls: type[DecodeError], what: str) -> Any:
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise error_cls(f"{what} is not valid UTF-8: {e}") from e

    try:
        return json.loads(text)
    except ValueError as e:
        raise error_cls(f"{what} is not valid JSON: {e}") from e
