"""
Pytest configuration and shared fixtures.

Provides fakes for the transport and notification sink, plus a
temp-file backed StateStore.
"""

import base64
import json
import pytest
from pathlib import Path
from typing import Generator, Optional
import tempfile

from whitelist_sync.events.bus import WhitelistEvent
from whitelist_sync.remote.models import FetchResponse
from whitelist_sync.storage.models import SyncConfig
from whitelist_sync.storage.state_store import StateStore
from whitelist_sync.sync.engine import WhitelistSynchronizer


DIRECT_URL = "https://lists.example.com/whitelist.json"
ENVELOPE_URL = "https://api.github.com/repos/example/lists/contents/whitelist.json?ref=main"

FIXED_NOW = 1_767_225_600.0  # 2026-01-01T00:00:00Z


# ============================================================================
# Fakes
# ============================================================================

class FakeTransport:
    """Transport returning canned responses and recording every call."""

    def __init__(self):
        self.status_code = 200
        self.body = b"[]"
        self.error: Optional[Exception] = None
        self.calls: list[str] = []

    def respond(self, body, status_code: int = 200) -> None:
        if not isinstance(body, bytes):
            body = json.dumps(body).encode("utf-8")
        self.body = body
        self.status_code = status_code
        self.error = None

    def fail(self, error: Exception) -> None:
        self.error = error

    def fetch(self, url: str) -> FetchResponse:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return FetchResponse(url=url, status_code=self.status_code, body=self.body)


class RecordingSink:
    """Notification sink that remembers what was published."""

    def __init__(self):
        self.events: list[WhitelistEvent] = []

    def publish(self, event: WhitelistEvent) -> None:
        self.events.append(event)


def envelope_body(entries, wrap: Optional[int] = None) -> bytes:
    """Build a GitHub contents API style body around a JSON array."""
    encoded = base64.b64encode(json.dumps(entries).encode("utf-8")).decode("ascii")
    if wrap:
        encoded = "\n".join(encoded[i:i + wrap] for i in range(0, len(encoded), wrap)) + "\n"
    return json.dumps({
        "name": "whitelist.json",
        "encoding": "base64",
        "content": encoded,
    }).encode("utf-8")


# ============================================================================
# Storage Fixtures
# ============================================================================

@pytest.fixture
def temp_db_path() -> Generator[Path, None, None]:
    """Create a temporary database file path."""
    with tempfile.TemporaryDirectory() as tmp:
        yield Path(tmp) / "whitelist_state.db"


@pytest.fixture
def state_store(temp_db_path: Path) -> StateStore:
    """Create a fresh StateStore with sync enabled for DIRECT_URL."""
    return StateStore(
        temp_db_path,
        defaults=SyncConfig(enabled=True, source_url=DIRECT_URL),
    )


# ============================================================================
# Synchronizer Fixtures
# ============================================================================

@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def synchronizer(
    transport: FakeTransport,
    state_store: StateStore,
    sink: RecordingSink,
) -> WhitelistSynchronizer:
    """Synchronizer wired to fakes and a fixed clock."""
    return WhitelistSynchronizer(
        client=transport,
        whitelist_store=state_store,
        config_store=state_store,
        sink=sink,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def mock_env(monkeypatch, tmp_path):
    """Environment for load_settings()."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("WHITELIST_SOURCE_URL", DIRECT_URL)
    monkeypatch.setenv("WHITELIST_CONNECT_TIMEOUT", "5")
    monkeypatch.setenv("WHITELIST_READ_TIMEOUT", "10")
    monkeypatch.setenv("WHITELIST_ENABLED_DEFAULT", "false")
    monkeypatch.setenv("STORAGE_DATABASE_PATH", "/tmp/whitelist-test.db")
    monkeypatch.setenv("LOG_LEVEL", "debug")
