"""
Ordered structure of the segments currently crossed by the sweep line.

The sweep keeps its active segments sorted bottom-to-top by their
y-value at the current sweep x.  Because that x keeps moving, a plain
sorted container with fixed keys cannot be used: the comparison must be
re-evaluated at the x where an insertion happens.  Between insertions
the relative order of two segments only changes when they cross, and
the driver records that by swapping their slots explicitly.

The structure is a treap (a randomised balanced binary search tree)
with parent links and subtree sizes.  Position in the in-order
traversal *is* the y-order; no key is stored on the nodes.  This gives
expected O(log n) for:

- ``insert`` – descend comparing ``value_at(x)`` against each node,
- ``remove`` – rotate the node down to a leaf and detach it,
- ``neighbor_before`` / ``neighbor_after`` – in-order predecessor and
  successor via parent links,
- ``position`` – rank from subtree sizes,
- ``swap_positions`` – O(1), exchanges the payloads of two nodes.

Each segment's node is found through a dictionary keyed on the
segment's ingestion ``key``.
"""

from __future__ import annotations

import logging
import random
from typing import Dict, Iterator, List, Optional

from .segments import Segment

logger = logging.getLogger(__name__)


class _Node:
    __slots__ = ("segment", "priority", "left", "right", "parent", "size")

    def __init__(self, segment: Segment, priority: float) -> None:
        self.segment = segment
        self.priority = priority
        self.left: Optional[_Node] = None
        self.right: Optional[_Node] = None
        self.parent: Optional[_Node] = None
        self.size = 1


def _size(node: Optional[_Node]) -> int:
    return node.size if node is not None else 0


def _update(node: _Node) -> None:
    node.size = 1 + _size(node.left) + _size(node.right)


def _rank(node: _Node) -> int:
    rank = _size(node.left)
    while node.parent is not None:
        if node is node.parent.right:
            rank += _size(node.parent.left) + 1
        node = node.parent
    return rank


class StatusStructure:
    """Active segments ordered by y at the sweep line.

    Args:
        seed: Optional seed for the node priorities, for reproducible
            tree shapes.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self._root: Optional[_Node] = None
        self._nodes: Dict[int, _Node] = {}
        self._rng = random.Random(seed)

    # ------------------------------------------------------------------
    # Queries

    def __len__(self) -> int:
        return _size(self._root)

    def __contains__(self, segment: object) -> bool:
        if not isinstance(segment, Segment):
            return False
        node = self._nodes.get(segment.key)
        return node is not None and node.segment is segment

    def __iter__(self) -> Iterator[Segment]:
        stack: List[_Node] = []
        node = self._root
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            yield node.segment
            node = node.right

    def segments(self) -> List[Segment]:
        """Return the active segments bottom-to-top."""
        return list(self)

    def _node_for(self, segment: Optional[Segment]) -> Optional[_Node]:
        if segment is None:
            return None
        node = self._nodes.get(segment.key)
        if node is None or node.segment is not segment:
            return None
        return node

    def position(self, segment: Segment) -> Optional[int]:
        """Return the zero-based rank of *segment*, or ``None`` if absent."""
        node = self._node_for(segment)
        if node is None:
            return None
        return _rank(node)

    def neighbor_before(self, segment: Optional[Segment]) -> Optional[Segment]:
        """Return the segment directly below *segment*, or ``None``."""
        node = self._node_for(segment)
        if node is None:
            return None
        if node.left is not None:
            node = node.left
            while node.right is not None:
                node = node.right
            return node.segment
        while node.parent is not None and node is node.parent.left:
            node = node.parent
        return node.parent.segment if node.parent is not None else None

    def neighbor_after(self, segment: Optional[Segment]) -> Optional[Segment]:
        """Return the segment directly above *segment*, or ``None``."""
        node = self._node_for(segment)
        if node is None:
            return None
        if node.right is not None:
            node = node.right
            while node.left is not None:
                node = node.left
            return node.segment
        while node.parent is not None and node is node.parent.right:
            node = node.parent
        return node.parent.segment if node.parent is not None else None

    def is_ordered_at(self, x: float, tol: float = 1e-9) -> bool:
        """Return True if adjacent segments are non-decreasing in y at *x*."""
        previous: Optional[Segment] = None
        for segment in self:
            if previous is not None and previous.value_at(x) > segment.value_at(x) + tol:
                return False
            previous = segment
        return True

    # ------------------------------------------------------------------
    # Mutation

    def _rotate_up(self, node: _Node) -> None:
        parent = node.parent
        if parent is None:
            raise RuntimeError("cannot rotate the root node")
        grand = parent.parent
        if parent.left is node:
            parent.left = node.right
            if node.right is not None:
                node.right.parent = parent
            node.right = parent
        else:
            parent.right = node.left
            if node.left is not None:
                node.left.parent = parent
            node.left = parent
        parent.parent = node
        node.parent = grand
        if grand is None:
            self._root = node
        elif grand.left is parent:
            grand.left = node
        else:
            grand.right = node
        _update(parent)
        _update(node)

    def insert(self, segment: Segment, x: float) -> int:
        """Insert *segment* in y-order at sweep position *x*.

        Segments with equal y at *x* are ordered by slope, so the one
        that is lower immediately to the right of *x* comes first.  An
        exact tie on both goes after the existing entry.

        Returns:
            The rank at which the segment was inserted.

        Raises:
            ValueError: if the segment is already active.
        """
        if segment.key in self._nodes:
            raise ValueError(f"{segment!r} is already in the status structure")
        key = (segment.value_at(x), segment.slope)
        node = _Node(segment, self._rng.random())
        self._nodes[segment.key] = node

        if self._root is None:
            self._root = node
            return 0

        cur = self._root
        while True:
            other = cur.segment
            if key < (other.value_at(x), other.slope):
                if cur.left is None:
                    cur.left = node
                    break
                cur = cur.left
            else:
                if cur.right is None:
                    cur.right = node
                    break
                cur = cur.right
        node.parent = cur
        walk: Optional[_Node] = cur
        while walk is not None:
            walk.size += 1
            walk = walk.parent
        while node.parent is not None and node.priority < node.parent.priority:
            self._rotate_up(node)
        return _rank(node)

    def remove(self, segment: Segment) -> bool:
        """Remove *segment*; returns False (and logs) if it was not active."""
        node = self._node_for(segment)
        if node is None:
            logger.warning("[Status] remove: %r is not active", segment)
            return False
        while node.left is not None or node.right is not None:
            if node.right is None or (node.left is not None and node.left.priority < node.right.priority):
                child = node.left
            else:
                child = node.right
            self._rotate_up(child)  # type: ignore[arg-type]
        parent = node.parent
        if parent is None:
            self._root = None
        elif parent.left is node:
            parent.left = None
        else:
            parent.right = None
        node.parent = None
        while parent is not None:
            parent.size -= 1
            parent = parent.parent
        del self._nodes[segment.key]
        return True

    def swap_positions(self, a: Segment, b: Segment) -> bool:
        """Exchange the slots of *a* and *b*; their neighbours stay put.

        Returns False (and logs) if either segment is not active.
        """
        node_a = self._node_for(a)
        node_b = self._node_for(b)
        if node_a is None or node_b is None:
            logger.warning("[Status] swap: %r or %r is not active", a, b)
            return False
        node_a.segment, node_b.segment = b, a
        self._nodes[a.key] = node_b
        self._nodes[b.key] = node_a
        return True
