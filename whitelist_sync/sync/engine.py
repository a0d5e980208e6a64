"""
Diff-gated whitelist synchronizer.

One run fetches the remote document, decodes it, compares it with the
stored whitelist and commits only when the content differs. The outcome
is returned as a value; no exception escapes run().
"""

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Optional

from ..errors import (
    DecodeError,
    EmptyResponseError,
    HttpError,
    TransportError,
)
from ..events.bus import WhitelistEvent
from ..remote.decoder import parse_document
from .diff import WhitelistDiff, compute_diff
from .interfaces import ConfigStore, NotificationSink, Transport, WhitelistStore

logger = logging.getLogger(__name__)


class SyncOutcome(Enum):
    """Result of a single synchronization run."""

    # Content changed and was committed
    UPDATED = auto()

    # Fetch and decode succeeded, content identical to the store
    UNCHANGED = auto()

    # Any step failed, or the feature is disabled
    FAILED = auto()


class SyncErrorKind(Enum):
    """Why a run ended in FAILED."""
    DISABLED = auto()
    TRANSPORT_ERROR = auto()
    HTTP_ERROR = auto()
    EMPTY_RESPONSE = auto()
    DECODE_ERROR = auto()
    UNEXPECTED = auto()


@dataclass(frozen=True)
class SyncResult:
    """
    Everything a caller can learn from one run.

    Truthy when the run succeeded (UPDATED or UNCHANGED).
    """
    outcome: SyncOutcome
    error: Optional[SyncErrorKind] = None
    message: str = ""
    status_code: Optional[int] = None
    diff: Optional[WhitelistDiff] = None
    entry_count: int = 0

    @property
    def succeeded(self) -> bool:
        return self.outcome is not SyncOutcome.FAILED

    def __bool__(self) -> bool:
        return self.succeeded

    def __str__(self) -> str:
        if self.outcome is SyncOutcome.FAILED:
            return f"Sync failed ({self.error.name if self.error else 'UNKNOWN'}): {self.message}"
        return f"Sync {self.outcome.name.lower()}: {self.entry_count} entries"

    @classmethod
    def failed(cls, error: SyncErrorKind, message: str, status_code: Optional[int] = None) -> "SyncResult":
        return cls(
            outcome=SyncOutcome.FAILED,
            error=error,
            message=message,
            status_code=status_code,
        )


class WhitelistSynchronizer:
    """
    Orchestrates fetch → decode → diff → commit.

    Core principles:
    - At most one network call per run, never retried here
    - The store only ever receives a fully decoded set
    - The timestamp and notification follow a commit, and only a commit
    - Compare-and-commit is serialized across threads

    Usage:
        synchronizer = WhitelistSynchronizer(
            client=WhitelistClient(),
            whitelist_store=store,
            config_store=store,
            sink=EventBus(),
        )

        result = synchronizer.run()
        print(result)
    """

    def __init__(
        self,
        client: Transport,
        whitelist_store: WhitelistStore,
        config_store: ConfigStore,
        sink: NotificationSink,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the synchronizer.

        Args:
            client: Transport used for the GET
            whitelist_store: Holder of the current whitelist
            config_store: Holder of SyncConfig
            sink: Receiver of WHITELIST_UPDATED notifications
            clock: Wall-clock source in seconds since the epoch
        """
        self.client = client
        self.whitelist_store = whitelist_store
        self.config_store = config_store
        self.sink = sink
        self.clock = clock

        self._commit_lock = threading.Lock()

    def run(self) -> SyncResult:
        """
        Execute one synchronization run.

        Returns:
            SyncResult; FAILED runs carry the reason in `error`
        """
        try:
            return self._run()
        except Exception as e:
            logger.error(f"Unexpected error while syncing whitelist: {e}", exc_info=True)
            return SyncResult.failed(SyncErrorKind.UNEXPECTED, str(e))

    def _run(self) -> SyncResult:
        config = self.config_store.load_config()

        if not config.enabled:
            logger.debug("Remote whitelist is disabled")
            return SyncResult.failed(SyncErrorKind.DISABLED, "Remote whitelist is disabled")

        source_url = config.source_url
        logger.info(f"Fetching whitelist from: {source_url}")

        try:
            body = self._fetch(source_url)
            document = parse_document(body, source_url)
        except TransportError as e:
            logger.error(f"Network error while fetching whitelist: {e}")
            return SyncResult.failed(SyncErrorKind.TRANSPORT_ERROR, str(e))
        except HttpError as e:
            logger.error(f"Failed to fetch whitelist: {e}")
            return SyncResult.failed(SyncErrorKind.HTTP_ERROR, str(e), status_code=e.status_code)
        except EmptyResponseError as e:
            logger.error(str(e))
            return SyncResult.failed(SyncErrorKind.EMPTY_RESPONSE, str(e))
        except DecodeError as e:
            logger.error(f"Failed to parse remote whitelist ({type(e).__name__}): {e}")
            return SyncResult.failed(SyncErrorKind.DECODE_ERROR, f"{type(e).__name__}: {e}")

        return self._commit(document.to_whitelist())

    def _fetch(self, url: str) -> bytes:
        """
        Fetch the raw document body.

        Raises:
            TransportError: No response received
            HttpError: Non-2xx status
            EmptyResponseError: 2xx with no body
        """
        response = self.client.fetch(url)

        if not response.is_success:
            raise HttpError(f"HTTP {response.status_code}", status_code=response.status_code)

        if response.is_empty:
            raise EmptyResponseError("Empty response from remote whitelist")

        return response.body

    def _commit(self, remote: frozenset[str]) -> SyncResult:
        """
        Compare against the store and commit if different.

        Args:
            remote: Fully decoded remote whitelist

        Returns:
            UPDATED or UNCHANGED result
        """
        with self._commit_lock:
            current = self.whitelist_store.get_whitelist()
            diff = compute_diff(current, remote)

            if not diff.has_changes:
                logger.debug("Whitelist unchanged, skipping update")
                return SyncResult(
                    outcome=SyncOutcome.UNCHANGED,
                    diff=diff,
                    entry_count=len(remote),
                )

            self.whitelist_store.set_whitelist(remote)

            try:
                self.config_store.save_last_update(int(self.clock() * 1000))
            except Exception:
                # Set and timestamp land together or not at all
                self._restore(current)
                raise

        logger.info(
            f"Successfully updated whitelist with {len(remote)} entries "
            f"(changed: +{len(diff.added)} -{len(diff.removed)})"
        )
        logger.debug(f"Whitelist entries: {sorted(remote)[:5]}")

        self._notify()

        return SyncResult(
            outcome=SyncOutcome.UPDATED,
            diff=diff,
            entry_count=len(remote),
        )

    def _restore(self, previous: frozenset[str]) -> None:
        logger.warning(f"Timestamp write failed, restoring previous whitelist ({len(previous)} entries)")
        try:
            self.whitelist_store.set_whitelist(previous)
        except Exception as e:
            logger.error(f"Failed to restore previous whitelist: {e}", exc_info=True)

    def _notify(self) -> None:
        # Commit is final once the store is written
        try:
            self.sink.publish(WhitelistEvent.WHITELIST_UPDATED)
        except Exception as e:
            logger.error(f"Failed to publish whitelist update: {e}", exc_info=True)
