"""Counts and page listing for a notebook hierarchy.

Every query skips the recycle bin: a section group named
``OneNote_RecycleBin`` and everything nested beneath it.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from onenote_stats.errors import MalformedDataError
from onenote_stats.model.hierarchy import (
    HierarchyNode,
    HierarchyScope,
    HierarchyTree,
    NodeKind,
)
from onenote_stats.model.page import PageRecord
from onenote_stats.stats.location import PathResolver

logger = logging.getLogger(__name__)

RECYCLE_BIN_NAME = "OneNote_RecycleBin"

# Attributes every page node must carry
_REQUIRED_PAGE_ATTRIBUTES = ("ID", "name", "dateTime", "lastModifiedTime", "pageLevel")


class HierarchyProvider(Protocol):
    """Source of notebook hierarchies (XML export, local folder, ...)."""

    def get_notebook_id(self, nickname: str) -> str:
        ...

    def get_tree(
        self, container_id: str | None, scope: HierarchyScope
    ) -> HierarchyTree:
        ...


@dataclass(frozen=True)
class NotebookSummary:
    """Aggregate counts for one notebook."""

    name: str
    section_group_count: int
    section_count: int
    page_count: int


def is_recycle_bin(node: HierarchyNode) -> bool:
    """Return True for the recycle-bin section group."""
    return node.kind is NodeKind.SECTION_GROUP and node.name == RECYCLE_BIN_NAME


def parse_timestamp(value: str) -> datetime:
    """Parse a provider timestamp such as ``2024-01-02T10:30:00.000Z``.

    The wall-clock value is kept as provided; no timezone conversion
    is applied.
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError as e:
        raise MalformedDataError(f"Invalid timestamp: {value!r}") from e


class HierarchyAnalyzer:
    """Answers count queries and flattens the pages of a notebook tree."""

    def __init__(
        self, tree: HierarchyTree, resolver: PathResolver | None = None
    ) -> None:
        self.tree = tree
        self.resolver = resolver or PathResolver(tree)

    @classmethod
    def from_provider(
        cls,
        provider: HierarchyProvider,
        nickname: str,
        resolver_separator: str | None = None,
    ) -> "HierarchyAnalyzer":
        """Fetch the page-level tree of ``nickname`` and wrap it."""
        notebook_id = provider.get_notebook_id(nickname)
        logger.info("Notebook '%s' resolved to %s", nickname, notebook_id)
        tree = provider.get_tree(notebook_id, HierarchyScope.PAGES)
        logger.debug("Fetched hierarchy with %d node(s)", len(tree))
        if resolver_separator is None:
            return cls(tree)
        return cls(tree, PathResolver(tree, resolver_separator))

    def _nodes_of_kind(self, kind: NodeKind) -> list[HierarchyNode]:
        return [n for n in self.tree.walk(prune=is_recycle_bin) if n.kind is kind]

    def section_group_count(self) -> int:
        return len(self._nodes_of_kind(NodeKind.SECTION_GROUP))

    def section_count(self) -> int:
        return len(self._nodes_of_kind(NodeKind.SECTION))

    def page_count(self) -> int:
        return len(self._nodes_of_kind(NodeKind.PAGE))

    def summary(self) -> NotebookSummary:
        return NotebookSummary(
            name=self.tree.root.name or "",
            section_group_count=self.section_group_count(),
            section_count=self.section_count(),
            page_count=self.page_count(),
        )

    def extract_pages(self) -> list[PageRecord]:
        """Build one ``PageRecord`` per page, in document order.

        Raises ``MalformedDataError`` if any page lacks a required
        attribute; no partial list is returned.
        """
        records = [
            self._build_record(node)
            for node in self._nodes_of_kind(NodeKind.PAGE)
        ]
        logger.info("Extracted %d page record(s)", len(records))
        return records

    def _build_record(self, node: HierarchyNode) -> PageRecord:
        attrs = node.attributes
        missing = [a for a in _REQUIRED_PAGE_ATTRIBUTES if attrs.get(a) is None]
        if missing:
            raise MalformedDataError(
                f"Page {self.resolver.full_path(node) or '#' + str(node.index)}"
                f" (ID {attrs.get('ID')}) is missing attribute(s): {', '.join(missing)}"
            )

        return PageRecord(
            page_id=attrs["ID"],
            name=attrs["name"],
            creation_time=parse_timestamp(attrs["dateTime"]),
            last_modified_time=parse_timestamp(attrs["lastModifiedTime"]),
            level=_parse_level(attrs["pageLevel"], attrs["ID"]),
            is_currently_viewed=attrs.get("isCurrentlyViewed"),
            location=self.resolver.location_path(node),
        )


def _parse_level(value: str, page_id: str) -> int:
    """Parse a ``pageLevel`` attribute as a non-negative integer."""
    try:
        level = int(value.strip())
    except ValueError as e:
        raise MalformedDataError(
            f"Page {page_id} has invalid pageLevel {value!r}"
        ) from e
    if level < 0:
        raise MalformedDataError(f"Page {page_id} has negative pageLevel {level}")
    return level
