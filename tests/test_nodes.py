"""Tests for eztraverse.nodes module."""

import pytest

from eztraverse.nodes import Node


class Num(Node, tag="nodes_num"):
    value: int


class Named(Node):
    name: str


class TestNodeRegistration:
    """Test node class registration."""

    def test_explicit_tag(self):
        """Test that the given tag is used."""
        assert Num._tag == "nodes_num"
        assert Node.lookup_tag("nodes_num") is Num

    def test_default_tag(self):
        """Test that the tag defaults to the lowercased class name."""
        assert Named._tag == "named"
        assert Node.registered()["named"] is Named

    def test_registered_is_copy(self):
        """Test that the registry copy cannot alter registration."""
        Node.registered().clear()
        assert Node.lookup_tag("nodes_num") is Num

    def test_duplicate_tag_rejected(self):
        """Test that reusing a tag raises ValueError."""
        with pytest.raises(ValueError, match="already registered"):
            class Other(Node, tag="nodes_num"):
                value: int

    def test_unknown_tag(self):
        """Test that looking up an unknown tag raises ValueError."""
        with pytest.raises(ValueError):
            Node.lookup_tag("nodes_missing")


class TestNodeInstances:
    """Test node instances."""

    def test_frozen(self):
        """Test that nodes are immutable."""
        n = Num(1)
        with pytest.raises((AttributeError, TypeError)):
            n.value = 2

    def test_equality(self):
        """Test structural equality."""
        assert Num(1) == Num(1)
        assert Num(1) is not Num(1)
