# helper module which builds the binary search tree for function selection
import math
from dataclasses import dataclass, field
from typing import Iterator

from routergen.exceptions import CodegenPanic
from routergen.module import FunctionSelector

# largest number of cases in a single `switch` block. past this, the
# selectors are split in two behind an `if lt(sig, ...)` guard.
MAX_LEAF_SIZE = 9


@dataclass
class DispatchNode:
    selectors: list[FunctionSelector] = field(default_factory=list)
    children: list["DispatchNode"] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return len(self.children) == 0

    @property
    def left(self) -> "DispatchNode":
        return self.children[0]

    @property
    def right(self) -> "DispatchNode":
        return self.children[1]


def _binary_split(node: DispatchNode, max_leaf_size: int) -> DispatchNode:
    n = len(node.selectors)
    if n > max_leaf_size:
        # ceil so the left half is never smaller than the right one
        mid = math.ceil(n / 2)

        left = _binary_split(DispatchNode(node.selectors[:mid]), max_leaf_size)
        right = _binary_split(DispatchNode(node.selectors[mid:]), max_leaf_size)

        node.children = [left, right]
        node.selectors = []

    return node


def build_dispatch_tree(
    selectors: list[FunctionSelector], max_leaf_size: int = MAX_LEAF_SIZE
) -> DispatchNode:
    """
    Partition a sorted list of selectors into a binary tree whose leaves
    hold at most ``max_leaf_size`` selectors each.

    The input must already be sorted by selector value; the split never
    reorders anything, so leaves read left to right give back the input.
    """
    assert max_leaf_size > 0
    return _binary_split(DispatchNode(list(selectors)), max_leaf_size)


def leaves(node: DispatchNode) -> Iterator[DispatchNode]:
    # left to right
    if node.is_leaf:
        yield node
        return
    for child in node.children:
        yield from leaves(child)


def min_selector(node: DispatchNode) -> FunctionSelector:
    # the smallest selector under `node` is the first one of its leftmost leaf
    while not node.is_leaf:
        node = node.left
    if len(node.selectors) == 0:
        raise CodegenPanic("empty leaf in dispatch tree")
    return node.selectors[0]


def depth(node: DispatchNode) -> int:
    if node.is_leaf:
        return 0
    return 1 + max(depth(c) for c in node.children)


def check_tree(node: DispatchNode, max_leaf_size: int = MAX_LEAF_SIZE) -> None:
    """
    Sanity check the shape of a dispatch tree, raising CodegenPanic if a
    leaf is empty or too big, an internal node holds selectors or does not
    have exactly two children, or the leaves are out of order.
    """
    prev = None
    for leaf in _walk_checked(node, max_leaf_size):
        for s in leaf.selectors:
            if prev is not None and s.method_id <= prev.method_id:
                raise CodegenPanic(f"dispatch tree out of order: {prev!r} before {s!r}")
            prev = s


def _walk_checked(node: DispatchNode, max_leaf_size: int) -> Iterator[DispatchNode]:
    if node.is_leaf:
        if not 0 < len(node.selectors) <= max_leaf_size:
            raise CodegenPanic(f"bad leaf size {len(node.selectors)} (max {max_leaf_size})")
        yield node
        return

    if len(node.selectors) != 0:
        raise CodegenPanic("internal dispatch node holds selectors")
    if len(node.children) != 2:
        raise CodegenPanic(f"internal dispatch node has {len(node.children)} children")

    for child in node.children:
        yield from _walk_checked(child, max_leaf_size)
