"""Hierarchy provider backed by local notebook folders.

A notebook stored on disk is a directory: each ``.one`` file is a
section and each subdirectory is a section group, including the
``OneNote_RecycleBin`` folder.  Pages are read with ``OneStoreParser``.
"""

import logging
from pathlib import Path

from onenote_stats.errors import NotFoundError
from onenote_stats.model.hierarchy import (
    HierarchyNode,
    HierarchyScope,
    HierarchyTree,
    NodeKind,
    scope_includes,
)
from onenote_stats.parser.one_store import OneStoreParser
from onenote_stats.utils import deduplicate_sections, section_name_from_filename

logger = logging.getLogger(__name__)


class NotebookDirectoryProvider:
    """Serves notebook trees from a base directory of notebook folders."""

    def __init__(self, base_dir: str | Path) -> None:
        self.base_dir = Path(base_dir).resolve()

    def _notebook_dirs(self) -> list[Path]:
        return sorted(p for p in self.base_dir.iterdir() if p.is_dir())

    def get_notebook_id(self, nickname: str) -> str:
        """Return the path of the notebook folder named ``nickname``."""
        for notebook_dir in self._notebook_dirs():
            if notebook_dir.name == nickname:
                return str(notebook_dir)
        raise NotFoundError(f'Can not find "{nickname}" as notebook name.')

    def get_tree(
        self, container_id: str | None, scope: HierarchyScope
    ) -> HierarchyTree:
        tree = HierarchyTree()
        if container_id is None:
            top = tree.add(NodeKind.NOTEBOOKS)
            for notebook_dir in self._notebook_dirs():
                self._add_folder(tree, notebook_dir, NodeKind.NOTEBOOK, top, scope)
            return tree

        container = Path(container_id)
        if container.is_dir():
            kind = (
                NodeKind.NOTEBOOK
                if container.parent == self.base_dir
                else NodeKind.SECTION_GROUP
            )
            self._add_folder(tree, container, kind, None, scope)
        elif container.is_file() and container.suffix.lower() == ".one":
            self._add_section(tree, container, None, scope)
        else:
            raise NotFoundError(f"No notebook, section group or section at {container}")
        return tree

    def _add_folder(
        self,
        tree: HierarchyTree,
        folder: Path,
        kind: NodeKind,
        parent: HierarchyNode | None,
        scope: HierarchyScope,
    ) -> None:
        stack = [(folder, kind, parent)]
        while stack:
            current, current_kind, owner = stack.pop()
            attrs = {"ID": str(current), "name": current.name, "path": str(current)}
            if current_kind is NodeKind.NOTEBOOK:
                attrs["nickname"] = current.name
            node = tree.add(current_kind, attrs, owner)
            if not scope_includes(scope, NodeKind.SECTION):
                continue

            section_files = deduplicate_sections(
                [p for p in current.glob("*.one") if p.is_file()]
            )
            for section_file in section_files:
                self._add_section(tree, section_file, node, scope)

            subfolders = sorted(p for p in current.iterdir() if p.is_dir())
            stack.extend(
                (sub, NodeKind.SECTION_GROUP, node) for sub in reversed(subfolders)
            )

    def _add_section(
        self,
        tree: HierarchyTree,
        section_file: Path,
        parent: HierarchyNode | None,
        scope: HierarchyScope,
    ) -> None:
        """Add a section node, and its pages when ``scope`` reaches them.

        The section is named after its stored display name when the file
        is parsed, otherwise after the file name.
        """
        parsed = None
        if scope_includes(scope, NodeKind.PAGE):
            parsed = OneStoreParser(section_file).parse()

        name = section_name_from_filename(section_file.name)
        if parsed is not None and parsed.display_name:
            name = parsed.display_name
        section = tree.add(
            NodeKind.SECTION,
            {"ID": str(section_file), "name": name, "path": str(section_file)},
            parent,
        )
        if parsed is None:
            return

        for page in parsed.pages:
            attributes = {
                "ID": page.guid,
                "name": page.title or "Untitled",
                "pageLevel": str(page.level),
            }
            if page.creation_time:
                attributes["dateTime"] = page.creation_time
            if page.last_modified:
                attributes["lastModifiedTime"] = page.last_modified
            tree.add(NodeKind.PAGE, attributes, section)
