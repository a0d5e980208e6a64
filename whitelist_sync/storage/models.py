"""
Persistent storage models.

SyncConfig is the only record the synchronizer persists besides the
whitelist entries themselves.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional

from ..config.settings import DEFAULT_SOURCE_URL


@dataclass(frozen=True)
class SyncConfig:
    """
    Persisted remote whitelist configuration.

    Attributes:
        enabled: Whether remote synchronization is switched on
        source_url: Where the whitelist document is fetched from
        last_update_epoch_millis: Wall-clock time of the last run that
            changed the whitelist, 0 if it never changed
    """
    enabled: bool = True
    source_url: str = DEFAULT_SOURCE_URL
    last_update_epoch_millis: int = 0

    @property
    def last_updated(self) -> Optional[datetime]:
        """Last change time as an aware UTC datetime, None if never updated."""
        if not self.last_update_epoch_millis:
            return None
        return datetime.fromtimestamp(self.last_update_epoch_millis / 1000, tz=timezone.utc)

    def with_changes(self, **changes) -> "SyncConfig":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "enabled": self.enabled,
            "source_url": self.source_url,
            "last_update_epoch_millis": self.last_update_epoch_millis,
        }

    @classmethod
    def from_dict(cls, data: dict, defaults: Optional["SyncConfig"] = None) -> "SyncConfig":
        """Create from dictionary, taking missing keys from defaults."""
        defaults = defaults or cls()
        return cls(
            enabled=bool(data.get("enabled", defaults.enabled)),
            source_url=data.get("source_url") or defaults.source_url,
            last_update_epoch_millis=int(
                data.get("last_update_epoch_millis", defaults.last_update_epoch_millis)
            ),
        )
