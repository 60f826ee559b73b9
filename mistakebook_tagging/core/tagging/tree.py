"""
In-memory view of a subject's tag tree, and leaf collection over it.

The tree is built once from flat (id, name, parent_id, order) rows, so
walking it costs no further queries. Traversal uses an explicit work-list,
which keeps it independent of Python's recursion limit however deep a
curriculum gets.
"""
from __future__ import annotations

from typing import Iterable, Iterator, Mapping

from attrs import define, field


@define(eq=False)
class TreeNode:
    """
    A tag and its children, in sibling order.
    """
    id: int
    name: str
    order: int = 0
    parent_id: int | None = None
    is_system: bool = True
    children: list[TreeNode] = field(factory=list)

    @property
    def is_leaf(self) -> bool:
        return not self.children


def _sibling_key(node: TreeNode) -> tuple[int, int]:
    return (node.order, node.id)


def collect_leaves(node: TreeNode) -> Iterator[str]:
    """
    Yield the names of all leaf descendants of `node`, depth-first, in
    sibling order. A node without children is its own (only) leaf.

    Names are yielded as often as they occur: two branches may legitimately
    hold leaves with the same name, and callers that need unique names
    deduplicate themselves. Each call returns a fresh iterator.
    """
    stack = [node]
    while stack:
        current = stack.pop()
        if current.is_leaf:
            yield current.name
        else:
            # Reversed so the first sibling is popped first.
            stack.extend(reversed(current.children))


class TagTree:
    """
    Tag rows arranged into parent/child links.

    Rows whose parent is not among the given rows are treated as roots, so a
    filtered row set (e.g. system tags only) still forms a valid forest.
    """

    def __init__(self, rows: Iterable[Mapping]):
        self.nodes: dict[int, TreeNode] = {}
        for row in rows:
            node = TreeNode(
                id=row["id"],
                name=row["name"],
                order=row.get("order", 0),
                parent_id=row.get("parent_id"),
                is_system=row.get("is_system", True),
            )
            self.nodes[node.id] = node

        self.roots: list[TreeNode] = []
        for node in self.nodes.values():
            parent = self.nodes.get(node.parent_id) if node.parent_id is not None else None
            if parent is None:
                self.roots.append(node)
            else:
                parent.children.append(node)

        self.roots.sort(key=_sibling_key)
        for node in self.nodes.values():
            node.children.sort(key=_sibling_key)

    def __contains__(self, tag_id: int) -> bool:
        return tag_id in self.nodes

    def get(self, tag_id: int) -> TreeNode | None:
        return self.nodes.get(tag_id)

    def find_root(self, name: str) -> TreeNode | None:
        """
        First root whose name is exactly `name`.
        """
        return next((root for root in self.roots if root.name == name), None)

    def leaves(self, tag_id: int) -> list[str]:
        """
        Leaf names under the given tag; empty if the tag is not in the tree.
        """
        node = self.nodes.get(tag_id)
        if node is None:
            return []
        return list(collect_leaves(node))

    def all_leaves(self) -> list[str]:
        """
        Leaf names under every root, in tree order.
        """
        result: list[str] = []
        for root in self.roots:
            result.extend(collect_leaves(root))
        return result
