"""Resolves the human-readable location of a node in the hierarchy."""

from onenote_stats.model.hierarchy import HierarchyNode, HierarchyTree

# OneNote is a Windows application; its location strings use backslashes.
DEFAULT_SEPARATOR = "\\"


class PathResolver:
    """Builds ``<sep>Notebook<sep>Group<sep>Section`` style paths.

    Each named ancestor contributes one ``separator + name`` segment,
    root first.  Nameless nodes (such as the provider's notebook list)
    contribute nothing.
    """

    def __init__(self, tree: HierarchyTree, separator: str = DEFAULT_SEPARATOR) -> None:
        self.tree = tree
        self.separator = separator

    def location_path(self, node: HierarchyNode) -> str:
        """Return where ``node`` lives, excluding the node's own name.

        The root has no ancestors and yields an empty string.
        """
        names = [
            ancestor.name
            for ancestor in self.tree.ancestors(node)
            if ancestor.name is not None
        ]
        names.reverse()
        return "".join(self.separator + name for name in names)

    def full_path(self, node: HierarchyNode) -> str:
        """Return the location of ``node`` followed by its own name."""
        path = self.location_path(node)
        if node.name is not None:
            path += self.separator + node.name
        return path
