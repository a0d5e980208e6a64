"""Whitelist change notifications."""

from .bus import EventBus, WhitelistEvent

__all__ = ["EventBus", "WhitelistEvent"]
