"""Tests for eztraverse.adapters module."""

from collections import OrderedDict, defaultdict, namedtuple
from dataclasses import dataclass, field
from types import SimpleNamespace

import pytest

from eztraverse.adapters import (
    AdapterHandle,
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
from eztraverse.changes import pair, remove, replace
from eztraverse.errors import UnsupportedContainerError, TraversalError


@dataclass(frozen=True)
class Point:
    x: int
    y: int
    _span: tuple = field(default=(0, 0), compare=False)


@dataclass
class Slots:
    f: int = 0
    g: int = 0


Pt = namedtuple("Pt", "x y")


class TestNodeKind:
    """Test shape inspection."""

    @pytest.mark.parametrize("value,kind", [
        ([1, 2], NodeKind.SEQUENCE),
        ((1, 2), NodeKind.SEQUENCE),
        (Pt(1, 2), NodeKind.SEQUENCE),
        ({"a": 1}, NodeKind.MAPPING),
        (OrderedDict(a=1), NodeKind.MAPPING),
        (Point(1, 2), NodeKind.RECORD),
        (SimpleNamespace(a=1), NodeKind.RECORD),
        ({1, 2}, NodeKind.OPAQUE),
        (frozenset(), NodeKind.OPAQUE),
        ("abc", NodeKind.OPAQUE),
        (b"abc", NodeKind.OPAQUE),
        (42, NodeKind.OPAQUE),
        (None, NodeKind.OPAQUE),
        (Point, NodeKind.OPAQUE),
    ])
    def test_node_kind(self, value, kind):
        """Test that each shape maps to its kind."""
        assert node_kind(value) is kind

    def test_resolve_adapter_for_composites(self):
        """Test that each composite kind resolves to its adapter."""
        assert isinstance(resolve_adapter([]), SequenceAdapter)
        assert isinstance(resolve_adapter({}), MappingAdapter)
        assert isinstance(resolve_adapter(Point(1, 2)), RecordAdapter)

    def test_resolve_adapter_for_opaque(self):
        """Test that opaque values have no adapter."""
        assert resolve_adapter(None) is None
        assert resolve_adapter(3.5) is None
        assert resolve_adapter({1}) is None
        assert resolve_adapter("text") is None


class TestAdapterRegistry:
    """Test adapter registration."""

    def test_duplicate_kind_rejected(self):
        """Test that a second adapter for a kind is rejected."""
        with pytest.raises(ValueError, match="already handled"):
            class OtherRecords(ContainerAdapter, kind=NodeKind.RECORD):
                pass

    def test_opaque_kind_rejected(self):
        """Test that opaque values cannot get an adapter."""
        with pytest.raises(ValueError, match="Opaque"):
            class Leaves(ContainerAdapter, kind=NodeKind.OPAQUE):
                pass

    def test_adapter_repr(self):
        """Test adapter repr names its kind."""
        assert "kind=sequence" in repr(resolve_adapter([]))


class TestRecordAdapter:
    """Test patching records."""

    adapter = RecordAdapter()

    def test_keys_skip_private_fields(self):
        """Test that underscore fields are not listed."""
        assert list(self.adapter.keys(Point(1, 2))) == ["x", "y"]
        ns = SimpleNamespace(a=1, _meta="m", b=2)
        assert list(self.adapter.keys(ns)) == ["a", "b"]

    def test_patch_preserves_type_and_private_fields(self):
        """Test that patch rebuilds the same class and keeps bookkeeping."""
        original = Point(1, 2, _span=(3, 4))
        patched = self.adapter.patch(original, {"x": 10})
        assert type(patched) is Point
        assert patched.x == 10
        assert patched.y == 2
        assert patched._span == (3, 4)
        assert original.x == 1

    def test_patch_without_changes_returns_original(self):
        """Test that an empty change map is a no-op."""
        original = Point(1, 2)
        assert self.adapter.patch(original, {}) is original

    def test_remove_deletes_key(self):
        """Test that remove drops the attribute."""
        patched = self.adapter.patch(SimpleNamespace(f=1, h=2), {"f": remove})
        assert vars(patched) == {"h": 2}

    def test_pair_renames_key(self):
        """Test that a Pair moves the value to another key."""
        patched = self.adapter.patch(SimpleNamespace(f=1), {"f": replace(pair("g", 5))})
        assert vars(patched) == {"g": 5}

    def test_pair_renames_dataclass_field(self):
        """Test renaming onto an earlier dataclass field."""
        patched = self.adapter.patch(Slots(f=1, g=2), {"g": replace(pair("f", 7))})
        assert patched == Slots(f=7, g=0)

    def test_later_slot_wins_on_collision(self):
        """Test that a key written later in field order overrides a rename."""
        patched = self.adapter.patch(Slots(f=1, g=2), {"f": replace(pair("g", 7))})
        assert patched == Slots(f=0, g=2)

    def test_bare_items_stay_on_slot(self):
        """Test that bare Replace items keep the original key."""
        patched = self.adapter.patch(SimpleNamespace(f=1), {"f": replace(9)})
        assert vars(patched) == {"f": 9}

    def test_replace_mixes_bare_and_pairs(self):
        """Test a Replace that keeps the slot and adds a new key."""
        patched = self.adapter.patch(
            SimpleNamespace(f=1, z=0), {"f": replace(2, pair("extra", 3))}
        )
        assert vars(patched) == {"f": 2, "extra": 3, "z": 0}


class TestSequenceAdapter:
    """Test patching sequences."""

    adapter = SequenceAdapter()

    def test_keys_are_indices(self):
        """Test that keys are positions."""
        assert list(self.adapter.keys(["a", "b", "c"])) == [0, 1, 2]

    def test_fan_out(self):
        """Test that one slot can become several."""
        patched = self.adapter.patch(["a", "b", "c"], {1: replace("x", "y")})
        assert patched == ["a", "x", "y", "c"]

    def test_removal_shifts_positions(self):
        """Test that removed slots close up."""
        assert self.adapter.patch([1, 2, 3], {0: remove, 2: 30}) == [2, 30]

    def test_pair_key_ignored(self):
        """Test that Pair contributes only its value positionally."""
        assert self.adapter.patch([1, 2], {0: replace(pair("k", 7))}) == [7, 2]

    def test_tuple_stays_tuple(self):
        """Test that tuples are rebuilt as tuples."""
        assert self.adapter.patch((1, 2), {1: 5}) == (1, 5)

    def test_namedtuple_rebuilt(self):
        """Test that namedtuples keep their class."""
        patched = self.adapter.patch(Pt(1, 2), {0: 9})
        assert patched == Pt(9, 2)
        assert type(patched) is Pt

    def test_input_untouched(self):
        """Test that patching never mutates the input."""
        original = [1, 2, 3]
        self.adapter.patch(original, {1: remove})
        assert original == [1, 2, 3]


class TestMappingAdapter:
    """Test patching mappings."""

    adapter = MappingAdapter()

    def test_rename_keeps_position(self):
        """Test that a renamed key stays in its slot's position."""
        patched = self.adapter.patch({"a": 1, "b": 2, "c": 3}, {"b": replace(pair("B", 20))})
        assert list(patched.items()) == [("a", 1), ("B", 20), ("c", 3)]

    def test_remove_and_insert(self):
        """Test removing one key while inserting another."""
        patched = self.adapter.patch({"a": 1, "b": 2}, {"a": remove, "b": replace(2, pair(5, "five"))})
        assert patched == {"b": 2, 5: "five"}

    def test_subclass_preserved(self):
        """Test that dict subclasses keep their type and factory."""
        original = defaultdict(list, a=[1])
        patched = self.adapter.patch(original, {"a": [2]})
        assert type(patched) is defaultdict
        assert patched.default_factory is list
        assert patched == {"a": [2]}
        assert original == {"a": [1]}


class TestDispatch:
    """Test get_value and the default predicates."""

    def test_get_value(self):
        """Test reading children of each shape."""
        assert get_value([4, 5], 1) == 5
        assert get_value({"k": "v"}, "k") == "v"
        assert get_value(Point(1, 2), "y") == 2

    def test_get_value_on_opaque_fails(self):
        """Test that reading from a leaf fails fast."""
        with pytest.raises(UnsupportedContainerError):
            get_value(42, "x")
        with pytest.raises(TypeError):
            get_value(None, 0)
        with pytest.raises(TraversalError):
            get_value({1, 2}, 0)

    def test_default_skip(self):
        """Test that only unordered collections are skipped."""
        assert default_skip({1})
        assert default_skip(frozenset())
        assert not default_skip([1])
        assert not default_skip({"a": 1})

    def test_default_filter(self):
        """Test that only records pass the default filter."""
        assert default_filter(Point(1, 2))
        assert default_filter(SimpleNamespace())
        assert not default_filter([])
        assert not default_filter({})
        assert not default_filter(1)

    def test_adapter_handle_delegates(self):
        """Test that AdapterHandle patches through its adapter."""
        handle = AdapterHandle(SequenceAdapter())
        assert handle.patch([1, 2], {0: remove}) == [2]
