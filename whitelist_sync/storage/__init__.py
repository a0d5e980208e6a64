"""Persistent whitelist and preference storage."""

from .state_store import StateStore, StateStoreError
from .models import SyncConfig

__all__ = ["StateStore", "StateStoreError", "SyncConfig"]
