"""
Typed record nodes.

Subclasses of Node become frozen dataclasses registered under a tag. The
traversal engine treats them as records: public fields are children, fields
whose names start with an underscore are bookkeeping and are never walked.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import dataclass_transform, ClassVar


@dataclass_transform(frozen_default=True)
class Node:
    """Base for tree nodes."""

    _tag: ClassVar[str]
    _registry: ClassVar[dict[str, type[Node]]] = {}

    def __init_subclass__(cls, tag: str | None = None, frozen: bool = True, **kwargs):
        super().__init_subclass__(**kwargs)
        dataclass(frozen=frozen, eq=True, repr=True)(cls)
        cls._tag = tag or cls.__name__.lower()

        if existing := Node._registry.get(cls._tag):
            if existing is not cls:
                msg = (
                    f"Tag '{cls._tag}' already registered to {existing}. "
                    f"Choose a different tag."
                )
                raise ValueError(msg)

        Node._registry[cls._tag] = cls

    @staticmethod
    def registered() -> dict[str, type[Node]]:
        """Return a copy of the tag registry."""
        return dict(Node._registry)

    @staticmethod
    def lookup_tag(tag: str) -> type[Node]:
        """Return the node class registered under `tag`."""
        try:
            return Node._registry[tag]
        except KeyError:
            msg = f"No node registered under tag '{tag}'"
            raise ValueError(msg) from None
