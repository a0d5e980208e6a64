"""
SQLite-based persistent state store.

Holds the current whitelist and the remote sync preferences. The
whitelist is always replaced in a single transaction, so readers never
see a half-written set.
"""

import json
import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, Optional

from .models import SyncConfig

logger = logging.getLogger(__name__)


class StateStoreError(Exception):
    """Raised when state store operations fail."""
    pass


class StateStore:
    """
    SQLite-based persistent state store.

    Features:
    - Whole-set whitelist replacement in one transaction
    - Typed preference storage for SyncConfig
    - Automatic schema migration

    Usage:
        store = StateStore(Path("data/whitelist_state.db"))

        entries = store.get_whitelist()
        store.set_whitelist({"com.example.app"})

        config = store.load_config()
        store.save_config(config.with_changes(enabled=False))
    """

    SCHEMA_VERSION = 1

    CREATE_WHITELIST_TABLE_SQL = """
        CREATE TABLE IF NOT EXISTS whitelist (
            entry TEXT PRIMARY KEY
        )
    """

    CREATE_PREFERENCES_TABLE_SQL = """
        CREATE TABLE IF NOT EXISTS preferences (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        )
    """

    CREATE_METADATA_TABLE_SQL = """
        CREATE TABLE IF NOT EXISTS _metadata (
            key TEXT PRIMARY KEY,
            value TEXT
        )
    """

    def __init__(self, database_path: Path, defaults: Optional[SyncConfig] = None):
        """
        Initialize state store.

        Args:
            database_path: Path to SQLite database file
            defaults: Config returned for preferences that were never saved
        """
        self.database_path = Path(database_path)
        self.defaults = defaults or SyncConfig()

        self.database_path.parent.mkdir(parents=True, exist_ok=True)

        self._initialize_database()

        logger.info(f"State store initialized at {self.database_path}")

    def _initialize_database(self) -> None:
        """Create tables and run migrations."""
        with self._get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute(self.CREATE_METADATA_TABLE_SQL)

            cursor.execute("SELECT value FROM _metadata WHERE key = 'schema_version'")
            row = cursor.fetchone()
            current_version = int(row[0]) if row else 0

            if current_version < self.SCHEMA_VERSION:
                logger.info(f"Upgrading schema from v{current_version} to v{self.SCHEMA_VERSION}")
                cursor.execute(
                    "INSERT OR REPLACE INTO _metadata (key, value) VALUES (?, ?)",
                    ("schema_version", str(self.SCHEMA_VERSION)),
                )

            cursor.execute(self.CREATE_WHITELIST_TABLE_SQL)
            cursor.execute(self.CREATE_PREFERENCES_TABLE_SQL)

            conn.commit()

    @contextmanager
    def _get_connection(self) -> Iterator[sqlite3.Connection]:
        """
        Get a database connection with proper settings.

        Yields:
            SQLite connection with WAL mode enabled
        """
        conn = sqlite3.connect(
            self.database_path,
            timeout=30.0,
            isolation_level="DEFERRED",
        )

        try:
            conn.execute("PRAGMA journal_mode=WAL")
            yield conn
        finally:
            conn.close()

    # ------------------------------------------------------------------
    # Whitelist
    # ------------------------------------------------------------------

    def get_whitelist(self) -> frozenset[str]:
        """
        Get the current whitelist.

        Returns:
            Set of whitelist entries (empty if nothing stored yet)
        """
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT entry FROM whitelist")
            return frozenset(row[0] for row in cursor.fetchall())

    def set_whitelist(self, entries: Iterable[str]) -> frozenset[str]:
        """
        Replace the whole whitelist.

        The delete and inserts share one transaction; on failure the
        previous whitelist stays visible.

        Args:
            entries: New whitelist entries

        Returns:
            The stored set

        Raises:
            StateStoreError: If the write fails
        """
        new_entries = frozenset(entries)

        with self._get_connection() as conn:
            try:
                cursor = conn.cursor()
                cursor.execute("DELETE FROM whitelist")
                cursor.executemany(
                    "INSERT INTO whitelist (entry) VALUES (?)",
                    [(entry,) for entry in sorted(new_entries)],
                )
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise StateStoreError(f"Failed to replace whitelist: {e}") from e

        logger.debug(f"Stored whitelist with {len(new_entries)} entries")
        return new_entries

    def count(self) -> int:
        """Count whitelist entries."""
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(*) FROM whitelist")
            return cursor.fetchone()[0]

    # ------------------------------------------------------------------
    # Preferences
    # ------------------------------------------------------------------

    def load_config(self) -> SyncConfig:
        """
        Load the persisted sync configuration.

        Returns:
            SyncConfig, with defaults for anything never saved
        """
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT key, value FROM preferences")
            data = {key: json.loads(value) for key, value in cursor.fetchall()}

        return SyncConfig.from_dict(data, defaults=self.defaults)

    def save_config(self, config: SyncConfig) -> SyncConfig:
        """
        Persist a sync configuration.

        Args:
            config: Configuration to save

        Returns:
            The saved configuration

        Raises:
            StateStoreError: If the write fails
        """
        with self._get_connection() as conn:
            try:
                conn.executemany(
                    "INSERT OR REPLACE INTO preferences (key, value) VALUES (?, ?)",
                    [(key, json.dumps(value)) for key, value in config.to_dict().items()],
                )
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise StateStoreError(f"Failed to save sync config: {e}") from e

        logger.debug(f"Saved sync config: {config}")
        return config

    def set_enabled(self, enabled: bool) -> None:
        """Persist only the enable flag."""
        self._put_preference("enabled", bool(enabled))

    def set_source_url(self, source_url: str) -> None:
        """Persist only the source URL."""
        self._put_preference("source_url", source_url)

    def save_last_update(self, epoch_millis: int) -> None:
        """Persist only the last-update timestamp."""
        self._put_preference("last_update_epoch_millis", int(epoch_millis))

    def _put_preference(self, key: str, value) -> None:
        """
        Write a single preference row.

        Other preferences are left untouched, so concurrent writers of
        different keys never overwrite each other.

        Raises:
            StateStoreError: If the write fails
        """
        with self._get_connection() as conn:
            try:
                conn.execute(
                    "INSERT OR REPLACE INTO preferences (key, value) VALUES (?, ?)",
                    (key, json.dumps(value)),
                )
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise StateStoreError(f"Failed to save preference {key}: {e}") from e

        logger.debug(f"Saved preference {key}={value!r}")

    def clear(self) -> None:
        """
        Clear the whitelist and all preferences.

        WARNING: This is destructive. Use only for testing or reset.
        """
        with self._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM whitelist")
            cursor.execute("DELETE FROM preferences")
            conn.commit()

        logger.warning("All whitelist state cleared")
