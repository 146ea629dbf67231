"""
Layout Engine

Computes positions for the boxes of a pedigree tree.

Uses the tidy tree algorithm of Reingold and Tilford, in the linear time
variant of Buchheim, Jünger and Leipert, with a fixed node size and one
separation factor for all neighbours. Every generation therefore lines up on
a regular grid. The generic (breadth, depth) result is mapped onto chart
coordinates by the orientation.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .hierarchy import HierarchyNode, Payload
from .orientation import Orientation

logger = logging.getLogger(__name__)


@dataclass
class LayoutConfig:
    """Configuration for the layout engine."""
    # Distance between neighbouring nodes, in node widths
    separation: float = 1.0


@dataclass
class PositionedNode:
    """A hierarchy node with its chart position (box center)."""
    id: int
    x: float
    y: float
    depth: int
    node: HierarchyNode
    parents: List["PositionedNode"] = field(default_factory=list)

    @property
    def data(self) -> Payload:
        return self.node.payload

    @property
    def is_placeholder(self) -> bool:
        return self.node.is_placeholder


@dataclass
class Link:
    """Connection from a person (source) to one of its parents (target)."""
    source: PositionedNode
    target: Optional[PositionedNode]
    # Boxes stacked before the source, only used when target is None
    stack: Tuple[PositionedNode, ...] = ()


@dataclass
class LayoutResult:
    """Positioned nodes in pre-order (root first) and their links."""
    nodes: List[PositionedNode] = field(default_factory=list)
    links: List[Link] = field(default_factory=list)

    @property
    def root(self) -> Optional[PositionedNode]:
        return self.nodes[0] if self.nodes else None

    def bounds(self, box_width: float, box_height: float) -> Tuple[float, float, float, float]:
        """Return (min_x, min_y, max_x, max_y) covering all boxes."""
        if not self.nodes:
            return 0.0, 0.0, 0.0, 0.0
        half_w = box_width / 2
        half_h = box_height / 2
        return (
            min(node.x for node in self.nodes) - half_w,
            min(node.y for node in self.nodes) - half_h,
            max(node.x for node in self.nodes) + half_w,
            max(node.y for node in self.nodes) + half_h,
        )


class _TreeNode:
    """Working state of one node during the tidy tree walks."""

    def __init__(self, node: Optional[HierarchyNode], index: int):
        self.node = node
        self.index = index
        self.parent: Optional["_TreeNode"] = None
        self.children: List["_TreeNode"] = []
        self.default_ancestor: Optional["_TreeNode"] = None
        self.ancestor = self
        self.prelim = 0.0
        self.mod = 0.0
        self.change = 0.0
        self.shift = 0.0
        self.thread: Optional["_TreeNode"] = None
        self.x = 0.0

    def next_left(self) -> Optional["_TreeNode"]:
        return self.children[0] if self.children else self.thread

    def next_right(self) -> Optional["_TreeNode"]:
        return self.children[-1] if self.children else self.thread


class TreeLayoutEngine:
    """Positions a HierarchyNode tree for a given orientation."""

    def __init__(self, config: Optional[LayoutConfig] = None):
        self.config = config or LayoutConfig()

    def layout(self, root: Optional[HierarchyNode], orientation: Orientation) -> LayoutResult:
        """Compute positions and links for a tree.

        The result is built from scratch on every call; the hierarchy is
        left untouched.
        """
        if root is None:
            return LayoutResult()

        tree = self._wrap(root)
        self._walk(tree)

        node_width = orientation.node_width()
        node_height = orientation.node_height()

        result = LayoutResult()
        self._collect(tree, node_width, node_height, orientation, result)

        logger.debug(
            "Laid out %d nodes and %d links (%s, node size %sx%s)",
            len(result.nodes), len(result.links),
            orientation.layout.value, node_width, node_height,
        )
        return result

    def _separation(self, a: _TreeNode, b: _TreeNode) -> float:
        return self.config.separation

    def _wrap(self, root: HierarchyNode) -> _TreeNode:
        """Mirror the hierarchy into working nodes below a virtual root."""
        tree = _TreeNode(root, 0)
        stack = [tree]
        while stack:
            current = stack.pop()
            for i, parent in enumerate(current.node.parents):
                child = _TreeNode(parent, i)
                child.parent = current
                current.children.append(child)
                stack.append(child)

        virtual = _TreeNode(None, 0)
        virtual.children = [tree]
        tree.parent = virtual
        return tree

    def _walk(self, tree: _TreeNode) -> None:
        for node in self._post_order(tree):
            self._first_walk(node)

        tree.parent.mod = -tree.prelim

        for node in self._pre_order(tree):
            node.x = node.prelim + node.parent.mod
            node.mod += node.parent.mod

    def _pre_order(self, tree: _TreeNode) -> List[_TreeNode]:
        order = []
        stack = [tree]
        while stack:
            node = stack.pop()
            order.append(node)
            stack.extend(reversed(node.children))
        return order

    def _post_order(self, tree: _TreeNode) -> List[_TreeNode]:
        return list(reversed(self._pre_order_right_first(tree)))

    def _pre_order_right_first(self, tree: _TreeNode) -> List[_TreeNode]:
        order = []
        stack = [tree]
        while stack:
            node = stack.pop()
            order.append(node)
            stack.extend(node.children)
        return order

    def _first_walk(self, v: _TreeNode) -> None:
        siblings = v.parent.children
        w = siblings[v.index - 1] if v.index else None

        if v.children:
            self._execute_shifts(v)
            midpoint = (v.children[0].prelim + v.children[-1].prelim) / 2
            if w is not None:
                v.prelim = w.prelim + self._separation(v, w)
                v.mod = v.prelim - midpoint
            else:
                v.prelim = midpoint
        elif w is not None:
            v.prelim = w.prelim + self._separation(v, w)

        v.parent.default_ancestor = self._apportion(
            v, w, v.parent.default_ancestor or siblings[0]
        )

    def _apportion(
        self, v: _TreeNode, w: Optional[_TreeNode], ancestor: _TreeNode
    ) -> _TreeNode:
        if w is None:
            return ancestor

        v_inner_right = v
        v_outer_right = v
        v_inner_left = w
        v_outer_left = v.parent.children[0]
        s_inner_right = v_inner_right.mod
        s_outer_right = v_outer_right.mod
        s_inner_left = v_inner_left.mod
        s_outer_left = v_outer_left.mod

        v_inner_left = v_inner_left.next_right()
        v_inner_right = v_inner_right.next_left()
        while v_inner_left is not None and v_inner_right is not None:
            v_outer_left = v_outer_left.next_left()
            v_outer_right = v_outer_right.next_right()
            v_outer_right.ancestor = v

            shift = (
                v_inner_left.prelim + s_inner_left
                - v_inner_right.prelim - s_inner_right
                + self._separation(v_inner_left, v_inner_right)
            )
            if shift > 0:
                self._move_subtree(self._next_ancestor(v_inner_left, v, ancestor), v, shift)
                s_inner_right += shift
                s_outer_right += shift

            s_inner_left += v_inner_left.mod
            s_inner_right += v_inner_right.mod
            s_outer_left += v_outer_left.mod
            s_outer_right += v_outer_right.mod

            v_inner_left = v_inner_left.next_right()
            v_inner_right = v_inner_right.next_left()

        if v_inner_left is not None and v_outer_right.next_right() is None:
            v_outer_right.thread = v_inner_left
            v_outer_right.mod += s_inner_left - s_outer_right

        if v_inner_right is not None and v_outer_left.next_left() is None:
            v_outer_left.thread = v_inner_right
            v_outer_left.mod += s_inner_right - s_outer_left
            ancestor = v

        return ancestor

    def _next_ancestor(
        self, v_inner_left: _TreeNode, v: _TreeNode, ancestor: _TreeNode
    ) -> _TreeNode:
        if v_inner_left.ancestor.parent is v.parent:
            return v_inner_left.ancestor
        return ancestor

    def _move_subtree(self, wm: _TreeNode, wp: _TreeNode, shift: float) -> None:
        change = shift / (wp.index - wm.index)
        wp.change -= change
        wp.shift += shift
        wm.change += change
        wp.prelim += shift
        wp.mod += shift

    def _execute_shifts(self, v: _TreeNode) -> None:
        shift = 0.0
        change = 0.0
        for w in reversed(v.children):
            w.prelim += shift
            w.mod += shift
            change += w.change
            shift += w.shift + change

    def _collect(
        self,
        tree: _TreeNode,
        node_width: float,
        node_height: float,
        orientation: Orientation,
        result: LayoutResult,
    ) -> None:
        """Emit positioned nodes (pre-order) and their links."""
        positioned = {}

        for current in self._pre_order(tree):
            hierarchy_node = current.node
            x, y = orientation.norm(current.x * node_width, hierarchy_node.depth * node_height)
            node = PositionedNode(
                id=hierarchy_node.id,
                x=x,
                y=y,
                depth=hierarchy_node.depth,
                node=hierarchy_node,
            )
            positioned[id(hierarchy_node)] = node
            result.nodes.append(node)

            if current.parent.node is not None:
                descendant = positioned[id(current.parent.node)]
                descendant.parents.append(node)
                result.links.append(Link(source=descendant, target=node))
