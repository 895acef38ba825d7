"""Tree builders shared by the tests."""

from onenote_stats.model.hierarchy import HierarchyNode, HierarchyTree, NodeKind


def page_attrs(
    page_id: str,
    name: str,
    date_time: str = "2024-01-01T09:00:00",
    last_modified: str = "2024-01-02T10:30:00",
    level: str = "0",
    **extra: str,
) -> dict[str, str]:
    attrs = {
        "ID": page_id,
        "name": name,
        "dateTime": date_time,
        "lastModifiedTime": last_modified,
        "pageLevel": level,
    }
    attrs.update(extra)
    return attrs


def add_page(
    tree: HierarchyTree, parent: HierarchyNode, page_id: str, name: str, **kwargs
) -> HierarchyNode:
    return tree.add(NodeKind.PAGE, page_attrs(page_id, name, **kwargs), parent)


def notebook_tree(name: str = "Work") -> tuple[HierarchyTree, HierarchyNode]:
    tree = HierarchyTree()
    root = tree.add(NodeKind.NOTEBOOK, {"ID": "nb-1", "name": name, "nickname": name})
    return tree, root
