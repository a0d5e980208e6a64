"""
Diff detection for the synchronizer.

Compares the remote whitelist against the stored one to decide whether
a commit is needed.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class WhitelistDiff:
    """
    Result of comparing the stored whitelist with a remote one.

    Attributes:
        added: Entries present remotely but not locally
        removed: Entries present locally but not remotely
    """
    added: frozenset[str] = frozenset()
    removed: frozenset[str] = frozenset()

    @property
    def has_changes(self) -> bool:
        """Check if the two sets differ at all."""
        return bool(self.added or self.removed)

    def __repr__(self) -> str:
        return f"WhitelistDiff(+{len(self.added)}, -{len(self.removed)})"


def compute_diff(current: frozenset[str], remote: frozenset[str]) -> WhitelistDiff:
    """
    Compute the difference between the stored and remote whitelists.

    Order never matters: two sets with the same members produce an
    empty diff.

    Args:
        current: Whitelist held by the store
        remote: Whitelist decoded from the remote document

    Returns:
        WhitelistDiff describing what a commit would change
    """
    current = frozenset(current)
    remote = frozenset(remote)
    return WhitelistDiff(
        added=remote - current,
        removed=current - remote,
    )
