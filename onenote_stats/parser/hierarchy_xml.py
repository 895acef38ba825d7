"""Hierarchy provider backed by OneNote hierarchy XML.

Reads the XML the OneNote desktop application returns from
``GetHierarchy`` (or a saved copy of it) and turns it into a
``HierarchyTree``.
"""

import logging
from pathlib import Path

from lxml import etree

from onenote_stats.errors import MalformedDataError, NotFoundError
from onenote_stats.model.hierarchy import (
    HierarchyNode,
    HierarchyScope,
    HierarchyTree,
    NodeKind,
    scope_includes,
)

logger = logging.getLogger(__name__)

ONENOTE_NAMESPACE = "http://schemas.microsoft.com/office/onenote/2013/onenote"

_KIND_BY_TAG: dict[str, NodeKind] = {kind.value: kind for kind in NodeKind}


def _kind_of(element: etree._Element) -> NodeKind | None:
    """Map an element to a node kind by local name, ignoring namespaces."""
    if not isinstance(element.tag, str):
        return None  # comments, processing instructions
    return _KIND_BY_TAG.get(etree.QName(element).localname)


class XmlHierarchyProvider:
    """Serves notebook trees out of a OneNote hierarchy XML document."""

    def __init__(self, root: etree._Element) -> None:
        self.root = root

    @classmethod
    def from_file(cls, path: str | Path) -> "XmlHierarchyProvider":
        path = Path(path)
        logger.info("Loading hierarchy XML from %s", path)
        try:
            data = path.read_bytes()
        except FileNotFoundError as e:
            raise NotFoundError(f"Hierarchy source not found: {path}") from e
        return cls.from_bytes(data)

    @classmethod
    def from_bytes(cls, data: bytes | str) -> "XmlHierarchyProvider":
        if isinstance(data, str):
            data = data.encode("utf-8")
        parser = etree.XMLParser(resolve_entities=False, no_network=True)
        try:
            root = etree.fromstring(data, parser)
        except etree.XMLSyntaxError as e:
            raise MalformedDataError(f"Invalid hierarchy XML: {e}") from e
        if _kind_of(root) is None:
            raise MalformedDataError(
                f"Unexpected hierarchy root element: {etree.QName(root).localname}"
            )
        return cls(root)

    def _notebook_elements(self) -> list[etree._Element]:
        return [el for el in self.root.iter() if _kind_of(el) is NodeKind.NOTEBOOK]

    def get_notebook_id(self, nickname: str) -> str:
        """Return the ``ID`` of the notebook whose nickname is ``nickname``.

        Notebooks without a ``nickname`` attribute are matched on ``name``.
        """
        for element in self._notebook_elements():
            label = element.get("nickname", element.get("name"))
            if label != nickname:
                continue
            notebook_id = element.get("ID")
            if notebook_id is None:
                raise MalformedDataError(f'Notebook "{nickname}" has no ID attribute')
            return notebook_id
        raise NotFoundError(f'Can not find "{nickname}" as notebook name.')

    def get_tree(
        self, container_id: str | None, scope: HierarchyScope
    ) -> HierarchyTree:
        """Build the tree below ``container_id`` down to ``scope``.

        With no container, the root is a nameless notebook list holding
        every notebook in the document.
        """
        tree = HierarchyTree()
        if container_id is None:
            top = tree.add(NodeKind.NOTEBOOKS)
            for element in self._notebook_elements():
                self._build(tree, element, top, scope)
            return tree

        container = self._find_container(container_id)
        self._build(tree, container, None, scope)
        return tree

    def _find_container(self, container_id: str) -> etree._Element:
        for element in self.root.iter():
            if _kind_of(element) is not None and element.get("ID") == container_id:
                return element
        raise NotFoundError(f"No hierarchy node has ID {container_id!r}")

    def _build(
        self,
        tree: HierarchyTree,
        element: etree._Element,
        parent: HierarchyNode | None,
        scope: HierarchyScope,
    ) -> None:
        stack: list[tuple[etree._Element, HierarchyNode | None]] = [(element, parent)]
        while stack:
            current, owner = stack.pop()
            kind = _kind_of(current)
            if kind is None or not scope_includes(scope, kind):
                continue
            node = tree.add(kind, {k: str(v) for k, v in current.attrib.items()}, owner)
            stack.extend((child, node) for child in reversed(current))
