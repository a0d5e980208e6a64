"""
Collaborator contracts for the synchronizer.

StateStore, WhitelistClient and EventBus satisfy these structurally;
tests substitute lightweight fakes.
"""

from typing import Iterable, Protocol, runtime_checkable

from ..events.bus import WhitelistEvent
from ..remote.models import FetchResponse
from ..storage.models import SyncConfig


@runtime_checkable
class Transport(Protocol):
    """Performs one GET and returns status plus body, or raises TransportError."""

    def fetch(self, url: str) -> FetchResponse:
        ...


@runtime_checkable
class WhitelistStore(Protocol):
    """Holds the current whitelist. set_whitelist() must be a single visible write."""

    def get_whitelist(self) -> frozenset[str]:
        ...

    def set_whitelist(self, entries: Iterable[str]) -> frozenset[str]:
        ...


@runtime_checkable
class ConfigStore(Protocol):
    """
    Loads and persists SyncConfig.

    The single-key setters write only their own field; writers use them
    instead of save_config() so they never clobber each other's keys.
    """

    def load_config(self) -> SyncConfig:
        ...

    def save_config(self, config: SyncConfig) -> SyncConfig:
        ...

    def set_enabled(self, enabled: bool) -> None:
        ...

    def set_source_url(self, source_url: str) -> None:
        ...

    def save_last_update(self, epoch_millis: int) -> None:
        ...


@runtime_checkable
class NotificationSink(Protocol):
    """Accepts zero-payload notifications."""

    def publish(self, event: WhitelistEvent) -> object:
        ...
