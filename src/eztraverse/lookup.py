"""
Identity lookup for rewritten trees.

A Lookup records, for every node a traversal touches, its parent at the time
it was visited and the chain of nodes that replaced it. Queries resolve
through that chain, so ancestors always come back as their current
incarnation even after later passes rewrote them.

Nodes are tracked by identity, not equality. Each node gets an integer handle
the first time it is seen; the arena keeps a reference to it so the handle
stays valid for the lifetime of the Lookup.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from eztraverse.nodes import Node

logger = logging.getLogger(__name__)

type AncestorPredicate = Callable[[Any], bool] | type | tuple[type, ...] | str


@dataclass(frozen=True)
class LookupTables:
    """Read-only snapshot of the handle relations."""

    parent: MappingProxyType[int, int]
    current: MappingProxyType[int, int]
    original: MappingProxyType[int, int]


class Lookup:
    """Parent links and replacement history for traversed nodes."""

    def __init__(self) -> None:
        self._nodes: list[Any] = []
        self._handles: dict[int, int] = {}
        self._parent: dict[int, int] = {}
        self._current: dict[int, int] = {}
        self._original: dict[int, int] = {}

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node: Any) -> bool:
        return id(node) in self._handles

    def __repr__(self) -> str:
        return (
            f"Lookup(nodes={len(self._nodes)}, parents={len(self._parent)}, "
            f"replaced={len(self._current)})"
        )

    # =========================================================================
    # Arena
    # =========================================================================

    def handle(self, node: Any) -> int:
        """Return the handle for `node`, allocating one on first sight."""
        key = id(node)
        handle = self._handles.get(key)
        if handle is None:
            handle = len(self._nodes)
            self._nodes.append(node)
            self._handles[key] = handle
        return handle

    def _find(self, node: Any) -> int | None:
        return self._handles.get(id(node))

    def tables(self) -> LookupTables:
        return LookupTables(
            parent=MappingProxyType(dict(self._parent)),
            current=MappingProxyType(dict(self._current)),
            original=MappingProxyType(dict(self._original)),
        )

    # =========================================================================
    # Relations
    # =========================================================================

    def set_parent(self, child: Any, parent: Any) -> None:
        self._parent[self.handle(child)] = self.handle(parent)

    def get_parent(self, child: Any) -> Any | None:
        handle = self._find(child)
        if handle is None or handle not in self._parent:
            return None
        return self._nodes[self._parent[handle]]

    def set_current(self, previous: Any, current: Any) -> None:
        """
        Record that `previous` has been superseded by `current`.

        `current` inherits the original of `previous` and, if `previous` had a
        recorded parent, that parent as well.
        """
        if previous is current:
            return
        before = self.handle(previous)
        after = self.handle(current)
        self._current[before] = after
        # the newest node is never itself superseded
        self._current.pop(after, None)
        self._original[after] = self.handle(self.get_original(previous))
        if before in self._parent:
            self._parent[after] = self._parent[before]
        logger.debug("Replaced %s with %s", type(previous).__name__, type(current).__name__)

    def get_current(self, previous: Any) -> Any:
        """Return the latest replacement of `previous`, or `previous` itself."""
        handle = self._find(previous)
        if handle is None:
            return previous
        while handle in self._current:
            handle = self._current[handle]
        return self._nodes[handle]

    def get_original(self, current: Any) -> Any:
        handle = self._find(current)
        if handle is None or handle not in self._original:
            return current
        return self._nodes[self._original[handle]]

    # =========================================================================
    # Ancestry
    # =========================================================================

    def get_ancestor(self, node: Any, offset: int = 1) -> Any | None:
        """Walk `offset` parents up from `node`; None past the root."""
        for _ in range(offset):
            parent = self.get_parent(node)
            if parent is None:
                return None
            node = self.get_current(parent)
        return self.get_current(node)

    def get_ancestors(self, node: Any) -> Iterator[Any]:
        """Yield the current ancestors of `node`, nearest first."""
        parent = self.get_parent(node)
        while parent is not None:
            ancestor = self.get_current(parent)
            yield ancestor
            parent = self.get_parent(ancestor)

    def find_ancestor(self, node: Any, predicate: AncestorPredicate) -> Any | None:
        """
        Return the nearest ancestor matching `predicate`.

        `predicate` may be a callable, a type or tuple of types, or the tag of
        a registered Node class.
        """
        match predicate:
            case str():
                cls = Node.lookup_tag(predicate)
                test = lambda a: isinstance(a, cls)  # noqa: E731
            case type() | tuple():
                test = lambda a: isinstance(a, predicate)  # noqa: E731
            case _:
                test = predicate
        for ancestor in self.get_ancestors(node):
            if test(ancestor):
                return ancestor
        return None
