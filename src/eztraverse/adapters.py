"""
Container adapters.

An adapter is the shape-specific strategy the traversal engine uses to list
a composite node's keys, read one child, and build a patched copy from a map
of per-key changes. There is one adapter per composite NodeKind; everything
else is an opaque leaf.
"""

from __future__ import annotations

import copy
import dataclasses
from collections.abc import Iterator, Mapping
from enum import Enum
from types import SimpleNamespace
from typing import Any, ClassVar

from eztraverse.changes import Pair, Replace
from eztraverse.errors import UnsupportedContainerError

# =============================================================================
# Node Kinds
# =============================================================================


class NodeKind(Enum):
    """Shape of a node as seen by the traversal engine."""

    RECORD = "record"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    OPAQUE = "opaque"


UNORDERED: tuple[type, ...] = (set, frozenset)


def _is_record(node: Any) -> bool:
    if isinstance(node, SimpleNamespace):
        return True
    return dataclasses.is_dataclass(node) and not isinstance(node, type)


def node_kind(node: Any) -> NodeKind:
    """
    Classify `node`; sequences win over mappings, mappings over records.

    Plain dicts are mappings, not records, so the default filter walks them
    without calling back; pass a filter that accepts dicts to visit them.
    """
    if isinstance(node, (list, tuple)):
        return NodeKind.SEQUENCE
    if isinstance(node, dict):
        return NodeKind.MAPPING
    if _is_record(node):
        return NodeKind.RECORD
    return NodeKind.OPAQUE


# =============================================================================
# Adapter Base
# =============================================================================


class ContainerAdapter:
    """Base for container adapters, registered per NodeKind."""

    kind: ClassVar[NodeKind]
    _registry: ClassVar[dict[NodeKind, ContainerAdapter]] = {}

    def __init_subclass__(cls, kind: NodeKind | None = None, **kwargs):
        super().__init_subclass__(**kwargs)
        if kind is None:
            return
        if kind is NodeKind.OPAQUE:
            msg = "Opaque nodes cannot have an adapter"
            raise ValueError(msg)
        if existing := ContainerAdapter._registry.get(kind):
            msg = f"Kind '{kind.value}' already handled by {type(existing).__name__}"
            raise ValueError(msg)
        cls.kind = kind
        ContainerAdapter._registry[kind] = cls()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} kind={self.kind.value}>"

    def keys(self, container: Any) -> Iterator[Any]:
        raise NotImplementedError

    def get_value(self, container: Any, key: Any) -> Any:
        raise NotImplementedError

    def patch(self, container: Any, changes: Mapping[Any, Any]) -> Any:
        raise NotImplementedError


def _expand_keyed(entries: Iterator[tuple[Any, Any]]) -> dict[Any, Any]:
    """Flatten Replace values into key/value entries, honoring Pair retargets."""
    values: dict[Any, Any] = {}
    for key, value in entries:
        if isinstance(value, Replace):
            for item in value.items:
                if isinstance(item, Pair):
                    values[item.key] = item.value
                else:
                    values[key] = item
        else:
            values[key] = value
    return values


# =============================================================================
# Concrete Adapters
# =============================================================================


class RecordAdapter(ContainerAdapter, kind=NodeKind.RECORD):
    """Dataclass instances and SimpleNamespace objects."""

    def keys(self, container: Any) -> Iterator[str]:
        for name in self._fields(container):
            if not name.startswith("_"):
                yield name

    def get_value(self, container: Any, key: str) -> Any:
        return getattr(container, key)

    def patch(self, container: Any, changes: Mapping[str, Any]) -> Any:
        if not changes:
            return container
        merged = {name: getattr(container, name) for name in self._fields(container)}
        merged.update(changes)
        # init=False fields are recomputed by the constructor
        return type(container)(**_expand_keyed(iter(merged.items())))

    @staticmethod
    def _fields(container: Any) -> list[str]:
        if isinstance(container, SimpleNamespace):
            return list(vars(container))
        return [f.name for f in dataclasses.fields(container) if f.init]


class SequenceAdapter(ContainerAdapter, kind=NodeKind.SEQUENCE):
    """Lists and tuples; changes are applied by position."""

    def keys(self, container: Any) -> Iterator[int]:
        return iter(range(len(container)))

    def get_value(self, container: Any, key: int) -> Any:
        return container[key]

    def patch(self, container: Any, changes: Mapping[int, Any]) -> Any:
        if not changes:
            return container
        items: list[Any] = []
        for index, value in enumerate(container):
            value = changes.get(index, value)
            if isinstance(value, Replace):
                # Pair keys mean nothing positionally
                items.extend(
                    item.value if isinstance(item, Pair) else item for item in value.items
                )
            else:
                items.append(value)
        if isinstance(container, list):
            return items
        if hasattr(container, "_make"):
            return container._make(items)
        return tuple(items)


class MappingAdapter(ContainerAdapter, kind=NodeKind.MAPPING):
    """Dicts and dict subclasses; output keeps insertion order."""

    def keys(self, container: Any) -> Iterator[Any]:
        return iter(list(container))

    def get_value(self, container: Any, key: Any) -> Any:
        return container[key]

    def patch(self, container: Any, changes: Mapping[Any, Any]) -> Any:
        if not changes:
            return container
        merged = dict(container)
        merged.update(changes)
        fresh = copy.copy(container)
        fresh.clear()
        fresh.update(_expand_keyed(iter(merged.items())))
        return fresh


# =============================================================================
# Dispatch
# =============================================================================


def resolve_adapter(node: Any) -> ContainerAdapter | None:
    """Return the adapter governing `node`, or None for opaque values."""
    if node is None:
        return None
    kind = node_kind(node)
    if kind is NodeKind.OPAQUE:
        return None
    return ContainerAdapter._registry[kind]


def get_value(container: Any, key: Any) -> Any:
    """Read one child of a composite node."""
    adapter = resolve_adapter(container)
    if adapter is None:
        msg = f"No adapter for {type(container).__name__} value: {container!r}"
        raise UnsupportedContainerError(msg)
    return adapter.get_value(container, key)


def default_skip(node: Any) -> bool:
    """Unordered collections are neither descended into nor visited."""
    return isinstance(node, UNORDERED)


def default_filter(node: Any) -> bool:
    """Only records receive enter/merge/leave callbacks."""
    return node_kind(node) is NodeKind.RECORD


class AdapterHandle:
    """Patch access handed to merge callbacks."""

    __slots__ = ("_adapter",)

    def __init__(self, adapter: ContainerAdapter):
        self._adapter = adapter

    def patch(self, container: Any, changes: Mapping[Any, Any]) -> Any:
        return self._adapter.patch(container, changes)
