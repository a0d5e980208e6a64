"""
Enable/disable/force-update controls for remote whitelist sync.
"""

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from datetime import datetime
from typing import Callable, Optional

from ..config.settings import Settings
from ..events.bus import EventBus
from ..remote.client import WhitelistClient
from ..storage.models import SyncConfig
from ..storage.state_store import StateStore
from .engine import SyncResult, WhitelistSynchronizer
from .interfaces import ConfigStore, NotificationSink

logger = logging.getLogger(__name__)

UpdatePolicy = Callable[[SyncConfig], bool]


def always_update(config: SyncConfig) -> bool:
    """Default update policy: attempt a sync every time one is offered."""
    return True


class RemoteWhitelistController:
    """
    Lifecycle controls around a WhitelistSynchronizer.

    should_update() is a policy hook for callers deciding when to trigger
    a sync (e.g. on every app foreground). The default policy always says
    yes; it does not rate-limit or check freshness. Pass update_policy to
    change that.

    Usage:
        controller = RemoteWhitelistController(synchronizer, store)

        future = controller.enable("https://example.com/whitelist.json")
        result = future.result()   # optional, enable() never blocks

        if controller.should_update():
            controller.force_update()
    """

    def __init__(
        self,
        synchronizer: WhitelistSynchronizer,
        config_store: ConfigStore,
        executor: Optional[Executor] = None,
        update_policy: UpdatePolicy = always_update,
        *,
        owned_client: Optional[WhitelistClient] = None,
    ):
        """
        Initialize the controller.

        Args:
            synchronizer: Synchronizer to drive
            config_store: Where the enable flag and URL are persisted
            executor: Runs background syncs; a single-worker pool is
                created (and owned) when omitted
            update_policy: Callable deciding should_update()
            owned_client: Client closed by close(), for clients this
                controller's factory created
        """
        self.synchronizer = synchronizer
        self.config_store = config_store
        self.update_policy = update_policy

        self._owned_client = owned_client
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix="whitelist-sync",
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        sink: Optional[NotificationSink] = None,
        executor: Optional[Executor] = None,
    ) -> "RemoteWhitelistController":
        """
        Wire client, store and synchronizer from settings.

        Args:
            settings: Loaded settings
            sink: Notification sink, a fresh EventBus when omitted
            executor: Background executor, see __init__
        """
        store = StateStore(
            settings.storage.database_path,
            defaults=SyncConfig(
                enabled=settings.remote.enabled_by_default,
                source_url=settings.remote.source_url,
            ),
        )
        client = WhitelistClient(
            connect_timeout=settings.remote.connect_timeout,
            read_timeout=settings.remote.read_timeout,
        )
        synchronizer = WhitelistSynchronizer(
            client=client,
            whitelist_store=store,
            config_store=store,
            sink=sink if sink is not None else EventBus(),
        )
        return cls(synchronizer, store, executor=executor, owned_client=client)

    @property
    def is_enabled(self) -> bool:
        return self.config_store.load_config().enabled

    @property
    def source_url(self) -> str:
        return self.config_store.load_config().source_url

    @property
    def last_updated(self) -> Optional[datetime]:
        return self.config_store.load_config().last_updated

    def enable(self, url: Optional[str] = None) -> Future:
        """
        Switch remote sync on and schedule one background run.

        Args:
            url: New source URL; the stored one is kept when None

        Returns:
            Future resolving to the run's SyncResult. Callers may ignore it.

        Raises:
            ValueError: If url is given but blank
        """
        if url is not None:
            url = url.strip()
            if not url:
                raise ValueError("Remote whitelist URL must not be empty")
            self.config_store.set_source_url(url)

        self.config_store.set_enabled(True)
        logger.info(f"Remote whitelist enabled ({self.source_url})")

        return self._executor.submit(self.synchronizer.run)

    def disable(self) -> None:
        """Switch remote sync off. The stored whitelist and timestamp are kept."""
        self.config_store.set_enabled(False)
        logger.info("Remote whitelist disabled")

    def force_update(self) -> SyncResult:
        """Run a sync on the calling thread and return its result."""
        return self.synchronizer.run()

    def should_update(self) -> bool:
        return self.update_policy(self.config_store.load_config())

    def close(self) -> None:
        """Shut down the executor and client if this controller created them."""
        if self._owns_executor:
            self._executor.shutdown(wait=True)
        if self._owned_client is not None:
            self._owned_client.close()

    def __enter__(self) -> "RemoteWhitelistController":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
