"""eztraverse - Shape-blind tree traversal and immutable rewriting for Python 3.12+."""

from eztraverse.adapters import (
    AdapterHandle,
    # Adapters
    ContainerAdapter,
    MappingAdapter,
    NodeKind,
    RecordAdapter,
    SequenceAdapter,
    default_filter,
    default_skip,
    get_value,
    node_kind,
    resolve_adapter,
)
from eztraverse.changes import (
    NO_CHANGES,
    EnterOutcome,
    Pair,
    # Change descriptors
    Replace,
    pair,
    remove,
    replace,
    skip,
)
from eztraverse.errors import (
    InvalidVisitorError,
    TraversalError,
    UnsupportedContainerError,
)
from eztraverse.lookup import (
    # Identity tracking
    Lookup,
    LookupTables,
)
from eztraverse.nodes import Node
from eztraverse.traverse import (
    # Traversal
    Visitor,
    traverse,
    traverse_children,
)

__version__ = "0.1.0"

__all__ = [
    "NO_CHANGES",
    "AdapterHandle",
    # Adapters
    "ContainerAdapter",
    "EnterOutcome",
    "InvalidVisitorError",
    # Identity tracking
    "Lookup",
    "LookupTables",
    "MappingAdapter",
    "Node",
    "NodeKind",
    "Pair",
    "RecordAdapter",
    # Change descriptors
    "Replace",
    "SequenceAdapter",
    "TraversalError",
    "UnsupportedContainerError",
    # Traversal
    "Visitor",
    "default_filter",
    "default_skip",
    "get_value",
    "node_kind",
    "pair",
    "remove",
    "replace",
    "resolve_adapter",
    "skip",
    "traverse",
    "traverse_children",
]
