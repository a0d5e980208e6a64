"""
Unit tests for response decoding.
"""

import base64
import json

import pytest

from conftest import DIRECT_URL, ENVELOPE_URL, envelope_body
from whitelist_sync.errors import (
    Base64DecodeError,
    DecodeError,
    MalformedDocumentError,
    MalformedEnvelopeError,
    MalformedInnerDocumentError,
)
from whitelist_sync.remote.decoder import decode, parse_document, select_format
from whitelist_sync.remote.models import ResponseFormat


class TestSelectFormat:
    """Tests for URL-based format selection."""

    def test_github_api_url_is_envelope(self):
        assert select_format(ENVELOPE_URL) is ResponseFormat.ENVELOPE

    def test_other_url_is_direct(self):
        assert select_format(DIRECT_URL) is ResponseFormat.DIRECT

    def test_raw_github_url_is_direct(self):
        """raw.githubusercontent.com serves the file itself."""
        url = "https://raw.githubusercontent.com/example/lists/main/whitelist.json"
        assert select_format(url) is ResponseFormat.DIRECT


class TestDirectFormat:
    """Tests for plain JSON array bodies."""

    def test_decodes_array(self):
        assert decode(b'["app.one","app.two"]', DIRECT_URL) == {"app.one", "app.two"}

    def test_collapses_duplicates(self):
        result = decode(b'["x", "y", "x", "x"]', DIRECT_URL)
        assert result == frozenset({"x", "y"})

    def test_empty_array_is_valid(self):
        assert decode(b"[]", DIRECT_URL) == frozenset()

    def test_parse_document_keeps_wire_order(self):
        document = parse_document(b'["b", "a", "b"]', DIRECT_URL)

        assert document.entries == ("b", "a", "b")
        assert document.format is ResponseFormat.DIRECT
        assert len(document) == 3

    def test_malformed_json(self):
        """Scenario E: malformed body."""
        with pytest.raises(MalformedDocumentError):
            decode(b'["x", ', DIRECT_URL)

    def test_object_is_not_a_document(self):
        with pytest.raises(MalformedDocumentError, match="JSON array"):
            decode(b'{"content": "W10="}', DIRECT_URL)

    def test_non_string_item(self):
        with pytest.raises(MalformedDocumentError, match="item 1"):
            decode(b'["x", 2]', DIRECT_URL)

    def test_invalid_utf8(self):
        with pytest.raises(MalformedDocumentError, match="UTF-8"):
            decode(b'["\xff\xfe"]', DIRECT_URL)

    def test_errors_are_decode_errors(self):
        with pytest.raises(DecodeError):
            decode(b"not json", DIRECT_URL)


class TestEnvelopeFormat:
    """Tests for GitHub contents API bodies."""

    def test_scenario_c(self):
        """base64 of ["a", "b"]."""
        body = b'{"content":"WyJhIiwgImIiXQ=="}'
        assert decode(body, ENVELOPE_URL) == {"a", "b"}

    def test_newline_split_content(self):
        entries = [f"com.example.app{i}" for i in range(20)]
        body = envelope_body(entries, wrap=60)

        assert b"\\n" in body
        assert decode(body, ENVELOPE_URL) == frozenset(entries)

    def test_crlf_split_content(self):
        encoded = base64.b64encode(b'["a", "b", "a"]').decode("ascii")
        content = encoded[:8] + "\r\n" + encoded[8:]
        body = json.dumps({"content": content}).encode()

        assert decode(body, ENVELOPE_URL) == {"a", "b"}

    def test_document_format(self):
        document = parse_document(envelope_body(["x"]), ENVELOPE_URL)
        assert document.format is ResponseFormat.ENVELOPE
        assert document.to_whitelist() == {"x"}

    def test_empty_inner_array(self):
        assert decode(envelope_body([]), ENVELOPE_URL) == frozenset()

    def test_missing_content(self):
        with pytest.raises(MalformedEnvelopeError, match="No content field"):
            decode(b'{"name": "whitelist.json"}', ENVELOPE_URL)

    def test_non_string_content(self):
        with pytest.raises(MalformedEnvelopeError):
            decode(b'{"content": ["a"]}', ENVELOPE_URL)

    def test_envelope_not_an_object(self):
        with pytest.raises(MalformedEnvelopeError):
            decode(b'["a", "b"]', ENVELOPE_URL)

    def test_envelope_not_json(self):
        with pytest.raises(MalformedEnvelopeError):
            decode(b"<html>rate limited</html>", ENVELOPE_URL)

    def test_bad_base64(self):
        with pytest.raises(Base64DecodeError):
            decode(b'{"content": "not*base64!"}', ENVELOPE_URL)

    def test_inner_not_json(self):
        content = base64.b64encode(b"a, b").decode("ascii")
        with pytest.raises(MalformedInnerDocumentError):
            decode(json.dumps({"content": content}).encode(), ENVELOPE_URL)

    def test_inner_not_string_array(self):
        content = base64.b64encode(b'{"a": 1}').decode("ascii")
        with pytest.raises(MalformedInnerDocumentError, match="JSON array"):
            decode(json.dumps({"content": content}).encode(), ENVELOPE_URL)
