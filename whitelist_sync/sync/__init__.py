"""Synchronizer and lifecycle controls."""

from .engine import SyncErrorKind, SyncOutcome, SyncResult, WhitelistSynchronizer
from .lifecycle import RemoteWhitelistController, always_update

__all__ = [
    "SyncErrorKind",
    "SyncOutcome",
    "SyncResult",
    "WhitelistSynchronizer",
    "RemoteWhitelistController",
    "always_update",
]
