"""
Change descriptors for rewriting containers.

Callbacks return these in place of a child value to ask the enclosing
container's patch to drop the slot, fan it out into several items, or move
an item to another key.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any

# =============================================================================
# Replacement Values
# =============================================================================


@dataclass(frozen=True)
class Pair:
    """Key/value override used inside a Replace."""

    key: Any
    value: Any


@dataclass(frozen=True)
class Replace:
    """Zero or more items standing in for a single slot."""

    items: tuple[Any, ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)


def replace(*items: Any) -> Replace:
    """Replace a slot with `items`: none removes it, several fan it out."""
    return Replace(items)


def pair(key: Any, value: Any) -> Pair:
    """Place `value` under `key` instead of the slot it came from."""
    return Pair(key, value)


remove: Replace = Replace()

# =============================================================================
# Enter Outcomes
# =============================================================================


class EnterOutcome(Enum):
    """What the walk should do after an enter callback returns."""

    CONTINUE = "continue"
    SKIP_CHILDREN = "skip_children"


skip = EnterOutcome.SKIP_CHILDREN

# Change map handed to merge callbacks when no child changed
NO_CHANGES: MappingProxyType[Any, Any] = MappingProxyType({})
