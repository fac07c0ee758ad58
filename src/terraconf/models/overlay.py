"""Caller-supplied overlay of excluded and defaulted attributes."""

from dataclasses import dataclass, field
from typing import Any, Optional

# The instance ID only appears in the resource header
ALWAYS_EXCLUDED = frozenset({"id"})


@dataclass
class AttributeOverlay:
    """Exclusions and default values applied on top of resource state.

    Attributes:
        defaults: Top-level attribute name to value used when state has no
                  value for that name (str, bool, int, list or dict)
        excludes: Top-level attribute names never rendered
    """

    defaults: dict[str, Any] = field(default_factory=dict)
    excludes: set[str] = field(default_factory=set)

    def effective_excludes(self) -> frozenset[str]:
        """Return the excluded names plus the always-excluded "id".

        The overlay's own ``excludes`` set is left as the caller built it.
        """
        return frozenset(self.excludes) | ALWAYS_EXCLUDED

    def merge(self, other: Optional["AttributeOverlay"]) -> "AttributeOverlay":
        """Layer another overlay on top of this one.

        Defaults from ``other`` win on conflict, excludes are combined.
        Neither overlay is modified.
        """
        if other is None:
            return AttributeOverlay(dict(self.defaults), set(self.excludes))
        return AttributeOverlay(
            defaults={**self.defaults, **other.defaults},
            excludes=set(self.excludes) | set(other.excludes),
        )
