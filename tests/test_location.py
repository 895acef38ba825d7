"""Tests for onenote_stats.stats.location module."""

from onenote_stats.model.hierarchy import HierarchyTree, NodeKind
from onenote_stats.stats.location import DEFAULT_SEPARATOR, PathResolver

from helpers import add_page, notebook_tree

SEP = DEFAULT_SEPARATOR


class TestLocationPath:
    """Tests for PathResolver.location_path."""

    def test_root_is_empty(self):
        tree, root = notebook_tree("NB")
        assert PathResolver(tree).location_path(root) == ""

    def test_page_excludes_own_name(self):
        tree, root = notebook_tree("NB")
        section = tree.add(NodeKind.SECTION, {"name": "S1"}, root)
        page = add_page(tree, section, "p-1", "P1")
        assert PathResolver(tree).location_path(page) == f"{SEP}NB{SEP}S1"

    def test_section_group_segments(self):
        tree, root = notebook_tree("NB")
        group = tree.add(NodeKind.SECTION_GROUP, {"name": "G"}, root)
        inner = tree.add(NodeKind.SECTION_GROUP, {"name": "H"}, group)
        section = tree.add(NodeKind.SECTION, {"name": "S"}, inner)
        page = add_page(tree, section, "p-1", "P")
        assert PathResolver(tree).location_path(page) == f"{SEP}NB{SEP}G{SEP}H{SEP}S"

    def test_nameless_ancestor_contributes_nothing(self):
        tree = HierarchyTree()
        top = tree.add(NodeKind.NOTEBOOKS)
        nb = tree.add(NodeKind.NOTEBOOK, {"name": "NB"}, top)
        section = tree.add(NodeKind.SECTION, {"name": "S"}, nb)
        resolver = PathResolver(tree)
        assert resolver.location_path(section) == f"{SEP}NB"
        assert resolver.location_path(top) == ""

    def test_repeatable(self):
        tree, root = notebook_tree("NB")
        section = tree.add(NodeKind.SECTION, {"name": "S"}, root)
        page = add_page(tree, section, "p-1", "P")
        resolver = PathResolver(tree)
        assert resolver.location_path(page) == resolver.location_path(page)

    def test_custom_separator(self):
        tree, root = notebook_tree("NB")
        section = tree.add(NodeKind.SECTION, {"name": "S"}, root)
        page = add_page(tree, section, "p-1", "P")
        assert PathResolver(tree, "/").location_path(page) == "/NB/S"

    def test_very_deep_nesting(self):
        tree, node = notebook_tree("NB")
        for _ in range(3000):
            node = tree.add(NodeKind.SECTION_GROUP, {"name": "g"}, node)
        path = PathResolver(tree, "/").location_path(node)
        assert path.count("/") == 3000


class TestFullPath:
    """Tests for PathResolver.full_path."""

    def test_includes_own_name(self):
        tree, root = notebook_tree("NB")
        section = tree.add(NodeKind.SECTION, {"name": "S1"}, root)
        page = add_page(tree, section, "p-1", "P1")
        assert PathResolver(tree).full_path(page) == f"{SEP}NB{SEP}S1{SEP}P1"

    def test_root(self):
        tree, root = notebook_tree("NB")
        assert PathResolver(tree).full_path(root) == f"{SEP}NB"
