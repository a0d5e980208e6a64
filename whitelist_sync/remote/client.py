"""
HTTP transport for remote whitelist documents.

Performs exactly one GET per fetch. Retry and backoff are the caller's
business, so the session is mounted with a zero-retry adapter.
"""

import logging
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .. import __version__
from ..errors import TransportError
from .models import FetchResponse

logger = logging.getLogger(__name__)

USER_AGENT = f"whitelist-sync/{__version__}"


class WhitelistClient:
    """
    Client that fetches raw whitelist documents.

    Handles:
    - Fixed client identification headers
    - Separate connect and read timeouts
    - Mapping transport failures to TransportError

    Non-2xx responses are returned as-is; deciding what they mean is left
    to the synchronizer.

    Usage:
        with WhitelistClient() as client:
            response = client.fetch("https://example.com/whitelist.json")
            if response.is_success:
                ...
    """

    def __init__(
        self,
        connect_timeout: float = 30.0,
        read_timeout: float = 30.0,
        headers: Optional[dict[str, str]] = None,
    ):
        """
        Initialize the client.

        Args:
            connect_timeout: Connection timeout in seconds
            read_timeout: Read timeout in seconds
            headers: Extra headers sent with every request
        """
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout

        self._session = requests.Session()

        # No transport-level retries: one fetch is one request
        adapter = HTTPAdapter(max_retries=Retry(total=0, raise_on_status=False))
        self._session.mount("https://", adapter)
        self._session.mount("http://", adapter)

        self._session.headers.update({
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        })
        if headers:
            self._session.headers.update(headers)

        logger.debug(
            f"Whitelist client initialized "
            f"(connect_timeout={connect_timeout}s, read_timeout={read_timeout}s)"
        )

    def __repr__(self) -> str:
        return (
            f"WhitelistClient(connect_timeout={self.connect_timeout}, "
            f"read_timeout={self.read_timeout})"
        )

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._session.headers)

    def fetch(self, url: str) -> FetchResponse:
        """
        Issue a single GET for a whitelist document.

        Args:
            url: Source URL

        Returns:
            FetchResponse with status code and raw body

        Raises:
            TransportError: If no HTTP response was received
        """
        logger.debug(f"Fetching whitelist from: {url}")

        try:
            response = self._session.get(
                url,
                timeout=(self.connect_timeout, self.read_timeout),
            )
        except requests.exceptions.RequestException as e:
            error_msg = f"Whitelist request failed: {e}"
            logger.error(error_msg)
            raise TransportError(error_msg) from e

        return FetchResponse(
            url=url,
            status_code=response.status_code,
            body=response.content or b"",
        )

    def close(self) -> None:
        """Close the HTTP session."""
        self._session.close()
        logger.debug("Whitelist client session closed")

    def __enter__(self) -> "WhitelistClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
