"""
Hierarchy Builder

Expands a sparse ancestor record tree into the tree of nodes the layout
engine positions, filling in placeholder boxes when empty boxes are shown.
"""

import itertools
import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Union

from .records import SEX_FEMALE, SEX_MALE, PersonRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Placeholder:
    """A synthetic ancestor standing in for a missing record."""
    generation: int
    sex: str  # slot: "M" = father, "F" = mother


Payload = Union[PersonRecord, Placeholder]


@dataclass
class HierarchyNode:
    """A node of the pedigree tree. Parents are ordered father first."""
    id: int
    payload: Payload
    depth: int
    parents: List["HierarchyNode"] = field(default_factory=list)

    @property
    def is_placeholder(self) -> bool:
        return isinstance(self.payload, Placeholder)

    @property
    def generation(self) -> int:
        return self.payload.generation

    @property
    def sex(self) -> str:
        return self.payload.sex

    def walk(self) -> Iterator["HierarchyNode"]:
        """Yield this node and all its ancestors in pre-order."""
        yield self
        for parent in self.parents:
            yield from parent.walk()

    def height(self) -> int:
        """Number of generations spanned by this subtree."""
        if not self.parents:
            return 1
        return 1 + max(parent.height() for parent in self.parents)


class HierarchyBuilder:
    """Builds HierarchyNode trees from PersonRecord trees."""

    def __init__(self, show_empty_boxes: bool = False):
        self.show_empty_boxes = show_empty_boxes

    def build(self, root: Optional[PersonRecord]) -> Optional[HierarchyNode]:
        """Build the node tree for a root record.

        Returns None when there is no root record. Node IDs are assigned in
        pre-order and are only meaningful within this build.
        """
        if root is None:
            return None

        max_generations = root.max_generation()
        ids = itertools.count()
        tree = self._build_node(root, 0, max_generations, ids)

        nodes = list(tree.walk())
        logger.debug(
            "Built hierarchy: %d nodes (%d placeholders), %d generations",
            len(nodes),
            sum(1 for node in nodes if node.is_placeholder),
            max_generations,
        )
        return tree

    def _build_node(
        self,
        payload: Payload,
        depth: int,
        max_generations: int,
        ids: Iterator[int],
    ) -> HierarchyNode:
        node = HierarchyNode(id=next(ids), payload=payload, depth=depth)
        for parent in self._resolve_parents(payload, max_generations):
            node.parents.append(self._build_node(parent, depth + 1, max_generations, ids))
        return node

    def _resolve_parents(self, payload: Payload, max_generations: int) -> List[Payload]:
        """Return the parent slots of a node, father first."""
        parents: Sequence[Payload] = () if isinstance(payload, Placeholder) else payload.parents

        if not self.show_empty_boxes:
            return list(parents)

        generation = payload.generation + 1

        if not parents:
            if payload.generation < max_generations:
                return [Placeholder(generation, SEX_MALE), Placeholder(generation, SEX_FEMALE)]
            return []

        if len(parents) == 1:
            # Unknown sex keeps the father slot
            if parents[0].sex == SEX_FEMALE:
                return [Placeholder(generation, SEX_MALE), parents[0]]
            return [parents[0], Placeholder(generation, SEX_FEMALE)]

        return list(parents)
