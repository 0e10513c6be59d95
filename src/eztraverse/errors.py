"""Exceptions raised by the traversal engine."""

from __future__ import annotations


class TraversalError(Exception):
    """Base for errors raised by eztraverse itself."""


class UnsupportedContainerError(TraversalError, TypeError):
    """An adapter operation was requested on a node with no adapter."""


class InvalidVisitorError(TraversalError, TypeError):
    """A visitor configuration could not be built."""
