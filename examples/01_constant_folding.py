"""
Constant Folding Example
========================

This example folds constant sub-expressions in a small calculator tree
using eztraverse. It covers:

1. Defining tree nodes with the Node base class
2. Rewriting nodes bottom-up with a leave callback
3. Structural sharing: untouched subtrees are reused, the input is untouched
4. Removing list items with `remove` and fanning them out with `replace`

The calculator supports:
- Constants and variables
- Binary operations: +, -, *, /
"""

from typing import Literal

from eztraverse import Node, Visitor, remove, replace, traverse


# ============================================================================
# Step 1: Define Tree Nodes
# ============================================================================
# Tags are derived from class names unless given explicitly.


class Const(Node, tag="calc_const"):
    """A constant numeric value."""

    value: float


class Var(Node, tag="calc_var"):
    """A variable reference (e.g., 'x', 'y')."""

    name: str


class BinOp(Node, tag="calc_binop"):
    """Binary operation: +, -, *, /"""

    op: Literal["+", "-", "*", "/"]
    left: Node
    right: Node


class Program(Node, tag="calc_program"):
    """A list of expressions evaluated in order."""

    body: list[Node]


OPS = {
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "*": lambda a, b: a * b,
    "/": lambda a, b: a / b,
}


# ============================================================================
# Step 2: Fold Constants
# ============================================================================
# leave() sees each node after its children were rewritten, so a BinOp whose
# operands both folded to constants can itself become a constant.


def fold(node, ancestors, path):
    match node:
        case BinOp(op="/", right=Const(value=0)):
            return None
        case BinOp(op=op, left=Const(value=a), right=Const(value=b)):
            return Const(OPS[op](a, b))
    return None


def example_folding():
    """Fold (2 * 3) + x into 6 + x."""

    shared = Var(name="x")
    expr = BinOp(
        op="+",
        left=BinOp(op="*", left=Const(2.0), right=Const(3.0)),
        right=shared,
    )

    folded = traverse(expr, Visitor(leave=fold))

    print(f"Before: {expr}")
    print(f"After:  {folded}")
    print()

    assert folded == BinOp(op="+", left=Const(6.0), right=shared)
    assert folded.right is shared  # Unchanged subtree reused
    assert expr.left == BinOp(op="*", left=Const(2.0), right=Const(3.0))


# ============================================================================
# Step 3: Removing and Expanding Statements
# ============================================================================
# Returning `remove` drops a list item; `replace(a, b)` splices in several.


def example_statements():
    """Drop bare constants and duplicate variable reads."""

    program = Program(body=[Const(1.0), Var("x"), Var("y")])

    def leave(node, ancestors, path):
        if isinstance(node, Const) and path[-2:-1] == ["body"]:
            return remove
        if isinstance(node, Var) and node.name == "y":
            return replace(node, Var("y2"))
        return None

    result = traverse(program, Visitor(leave=leave))

    print(f"Program: {program.body}")
    print(f"Result:  {result.body}")
    print()

    assert result.body == [Var("x"), Var("y"), Var("y2")]


if __name__ == "__main__":
    example_folding()
    example_statements()
