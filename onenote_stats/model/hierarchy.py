"""Hierarchy model mirroring the notebook tree returned by a provider.

Nodes live in an arena owned by ``HierarchyTree`` and refer to each other
by index only.  The parent link is a lookup, never an ownership edge.
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from enum import Enum


class NodeKind(Enum):
    """Kinds of node found in a OneNote hierarchy."""

    NOTEBOOKS = "Notebooks"
    NOTEBOOK = "Notebook"
    SECTION_GROUP = "SectionGroup"
    SECTION = "Section"
    PAGE = "Page"


class HierarchyScope(Enum):
    """How deep a provider descends below the requested container."""

    NOTEBOOKS = "hsNotebooks"
    SECTIONS = "hsSections"
    PAGES = "hsPages"


# Deepest kind that each scope still includes
_SCOPE_DEPTH: dict[HierarchyScope, tuple[NodeKind, ...]] = {
    HierarchyScope.NOTEBOOKS: (NodeKind.NOTEBOOKS, NodeKind.NOTEBOOK),
    HierarchyScope.SECTIONS: (
        NodeKind.NOTEBOOKS,
        NodeKind.NOTEBOOK,
        NodeKind.SECTION_GROUP,
        NodeKind.SECTION,
    ),
    HierarchyScope.PAGES: tuple(NodeKind),
}


def scope_includes(scope: HierarchyScope, kind: NodeKind) -> bool:
    """Return True if nodes of ``kind`` belong in a tree of ``scope``."""
    return kind in _SCOPE_DEPTH[scope]


@dataclass
class HierarchyNode:
    """A single node of the hierarchy.

    ``attributes`` carries the provider's raw string attributes
    (``ID``, ``name``, ``dateTime``, ``pageLevel`` ...).
    """

    index: int
    kind: NodeKind
    attributes: dict[str, str] = field(default_factory=dict)
    parent_index: int | None = None
    child_indexes: list[int] = field(default_factory=list)

    @property
    def name(self) -> str | None:
        return self.attributes.get("name")

    @property
    def node_id(self) -> str | None:
        return self.attributes.get("ID")


class HierarchyTree:
    """Arena of ``HierarchyNode`` objects forming a single rooted tree."""

    def __init__(self) -> None:
        self._nodes: list[HierarchyNode] = []

    def __len__(self) -> int:
        return len(self._nodes)

    def add(
        self,
        kind: NodeKind,
        attributes: dict[str, str] | None = None,
        parent: HierarchyNode | None = None,
    ) -> HierarchyNode:
        """Append a node under ``parent`` (or as the root) and return it."""
        if parent is None and self._nodes:
            raise ValueError("tree already has a root")
        if parent is not None and (
            parent.index >= len(self._nodes) or self._nodes[parent.index] is not parent
        ):
            raise ValueError("parent does not belong to this tree")

        node = HierarchyNode(
            index=len(self._nodes),
            kind=kind,
            attributes=dict(attributes or {}),
            parent_index=None if parent is None else parent.index,
        )
        self._nodes.append(node)
        if parent is not None:
            parent.child_indexes.append(node.index)
        return node

    @property
    def root(self) -> HierarchyNode:
        if not self._nodes:
            raise ValueError("tree is empty")
        return self._nodes[0]

    def parent_of(self, node: HierarchyNode) -> HierarchyNode | None:
        if node.parent_index is None:
            return None
        return self._nodes[node.parent_index]

    def children_of(self, node: HierarchyNode) -> list[HierarchyNode]:
        return [self._nodes[i] for i in node.child_indexes]

    def ancestors(self, node: HierarchyNode) -> Iterator[HierarchyNode]:
        """Yield the ancestors of ``node``, nearest first, ending at the root."""
        current = self.parent_of(node)
        while current is not None:
            yield current
            current = self.parent_of(current)

    def walk(
        self,
        prune: Callable[[HierarchyNode], bool] | None = None,
    ) -> Iterator[HierarchyNode]:
        """Pre-order depth-first walk in document order.

        When ``prune(node)`` is true the node and its whole subtree are
        skipped.  Uses an explicit stack, so arbitrarily deep trees are fine.
        """
        if not self._nodes:
            return
        stack = [self._nodes[0]]
        while stack:
            node = stack.pop()
            if prune is not None and prune(node):
                continue
            yield node
            stack.extend(
                self._nodes[i] for i in reversed(node.child_indexes)
            )
