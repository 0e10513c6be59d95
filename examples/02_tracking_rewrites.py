"""
Tracking Rewrites Example
=========================

This example runs two rewrite passes over the same tree and uses a shared
Lookup to answer questions about the result. It covers:

1. Recording parents while walking plain dicts and lists
2. Mapping a rewritten node back to the node it came from
3. Finding the enclosing function of any node, in its current form
4. Renaming mapping keys with `replace(pair(...))`
"""

from eztraverse import Lookup, Visitor, pair, replace, traverse


# ============================================================================
# Step 1: A Tree Made of Plain Data
# ============================================================================
# Dicts are walked but not visited by default, so the filter is widened to
# let the callbacks see every dict that carries a "kind".


def has_kind(node):
    return isinstance(node, dict) and "kind" in node


TREE = {
    "kind": "module",
    "body": [
        {
            "kind": "function",
            "name": "main",
            "body": [{"kind": "call", "target": "print", "args": ["hi"]}],
        },
    ],
}


# ============================================================================
# Step 2: Two Passes, One Lookup
# ============================================================================


def rename_calls(node, ancestors, path):
    """Pass 1: print() becomes log()."""
    if node["kind"] == "call" and node["target"] == "print":
        return {**node, "target": "log"}
    return None


def rename_args_key(node, changes, handle, ancestors, path):
    """Pass 2: the "args" key of calls becomes "arguments"."""
    if node["kind"] == "call":
        return handle.patch(node, {**changes, "args": replace(pair("arguments", node["args"]))})
    return None


def example_two_passes():
    lookup = Lookup()
    original_call = TREE["body"][0]["body"][0]

    first = traverse(TREE, Visitor(leave=rename_calls, filter=has_kind, lookup=lookup))
    second = traverse(first, Visitor(merge=rename_args_key, filter=has_kind, lookup=lookup))

    call = second["body"][0]["body"][0]
    print(f"Original call: {original_call}")
    print(f"Current call:  {call}")
    print()

    assert call == {"kind": "call", "target": "log", "arguments": ["hi"]}
    assert lookup.get_original(call) is original_call
    assert lookup.get_current(original_call) is call

    function = lookup.find_ancestor(original_call, has_kind)
    print(f"Enclosing function (current): {function['name']}")
    assert function is second["body"][0]
    assert lookup.get_ancestor(call, 4) is second


if __name__ == "__main__":
    example_two_passes()
