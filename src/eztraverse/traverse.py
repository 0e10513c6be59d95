"""
Depth-first traversal with copy-on-write rebuilding.

traverse() walks a tree of records, sequences and mappings, calling the
visitor's enter/merge/leave callbacks on the nodes its filter accepts, and
rebuilds only the containers whose children changed. Untouched subtrees are
returned by identity, and the input tree is never mutated.

Recursion depth equals tree depth; very deep trees can exhaust the
interpreter's recursion limit.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, fields
from typing import Any

from eztraverse.adapters import AdapterHandle, default_filter, default_skip, resolve_adapter
from eztraverse.changes import NO_CHANGES, EnterOutcome
from eztraverse.errors import InvalidVisitorError
from eztraverse.lookup import Lookup

logger = logging.getLogger(__name__)

type Enter = Callable[[Any, list[Any], list[Any]], EnterOutcome | None]
type Merge = Callable[[Any, Mapping[Any, Any], AdapterHandle, list[Any], list[Any]], Any]
type Leave = Callable[[Any, list[Any], list[Any]], Any]
type Predicate = Callable[[Any], bool]

# =============================================================================
# Visitor Configuration
# =============================================================================


@dataclass(frozen=True)
class Visitor:
    """Callbacks and options for a traversal."""

    enter: Enter | None = None
    merge: Merge | None = None
    leave: Leave | None = None
    skip: Predicate = default_skip
    filter: Predicate = default_filter
    lookup: Lookup | None = None

    def __post_init__(self):
        # None selects the default predicate
        if self.skip is None:
            object.__setattr__(self, "skip", default_skip)
        if self.filter is None:
            object.__setattr__(self, "filter", default_filter)
        for name in ("enter", "merge", "leave", "skip", "filter"):
            value = getattr(self, name)
            if value is not None and not callable(value):
                msg = f"Visitor option '{name}' must be callable, got {type(value).__name__}"
                raise InvalidVisitorError(msg)
        if self.lookup is not None and not isinstance(self.lookup, Lookup):
            msg = f"Visitor option 'lookup' must be a Lookup, got {type(self.lookup).__name__}"
            raise InvalidVisitorError(msg)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> Visitor:
        """Build a Visitor from a plain mapping of options."""
        known = {f.name for f in fields(cls)}
        if unknown := sorted(set(config) - known):
            msg = f"Unknown visitor options: {', '.join(unknown)}"
            raise InvalidVisitorError(msg)
        # None means "use the default" for the predicates
        options = {k: v for k, v in config.items() if v is not None}
        return cls(**options)


def _as_visitor(visitor: Visitor | Mapping[str, Any] | None) -> Visitor:
    if visitor is None:
        return Visitor()
    if isinstance(visitor, Visitor):
        return visitor
    if isinstance(visitor, Mapping):
        return Visitor.from_config(visitor)
    msg = f"Expected a Visitor or mapping, got {type(visitor).__name__}"
    raise InvalidVisitorError(msg)


# =============================================================================
# Traversal
# =============================================================================


def traverse(
    node: Any,
    visitor: Visitor | Mapping[str, Any] | None = None,
    ancestors: list[Any] | None = None,
    path: list[Any] | None = None,
) -> Any:
    """
    Walk `node` and return the rewritten tree.

    `ancestors` and `path` are the accumulators threaded through the walk;
    pass them only to resume a sub-traversal with pre-seeded context.
    """
    visitor = _as_visitor(visitor)
    if ancestors is None:
        ancestors = []
    if path is None:
        path = []
    lookup = visitor.lookup

    if lookup is not None and ancestors and resolve_adapter(node) is not None:
        lookup.set_parent(node, ancestors[-1])
    if node is None or visitor.skip(node):
        return node

    callback = visitor.filter(node)

    outcome = None
    if callback and visitor.enter is not None:
        outcome = visitor.enter(node, ancestors, path)
    if outcome is EnterOutcome.SKIP_CHILDREN:
        logger.debug("Skipping children of %s at %s", type(node).__name__, path)
    else:
        node = traverse_children(
            node, visitor, ancestors, path, visitor.merge if callback else None
        )

    result = None
    if callback and visitor.leave is not None:
        result = visitor.leave(node, ancestors, path)
    if result is None:
        return node
    if lookup is not None and result is not node:
        lookup.set_current(node, result)
    return result


def traverse_children(
    container: Any,
    visitor: Visitor,
    ancestors: list[Any],
    path: list[Any],
    merge: Merge | None = None,
) -> Any:
    """Traverse each child of `container` and rebuild it if any changed."""
    adapter = resolve_adapter(container)
    if adapter is None:
        return container
    original = container

    changes: dict[Any, Any] | None = None
    ancestors.append(container)
    for key in adapter.keys(container):
        path.append(key)
        child = adapter.get_value(container, key)
        result = traverse(child, visitor, ancestors, path)
        if result is not child:
            if changes is None:
                changes = {}
            changes[key] = result
        path.pop()
    ancestors.pop()

    if merge is not None:
        merged = merge(container, changes or NO_CHANGES, AdapterHandle(adapter), ancestors, path)
        if merged is None and changes:
            merged = adapter.patch(container, changes)
        if merged is not None:
            container = merged
    elif changes:
        container = adapter.patch(container, changes)

    if container is not original:
        logger.debug("Rebuilt %s at %s", type(original).__name__, path)
        if visitor.lookup is not None:
            visitor.lookup.set_current(original, container)
    return container
