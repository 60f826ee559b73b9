"""
Data models used by mistakebook-tagging
"""
from __future__ import annotations

from typing import TypedDict

from attrs import frozen


@frozen
class UpsertResult:
    """
    Outcome of writing one system tag at its structural position.

    At most one of was_created / was_updated is set; neither means the stored
    tag already matched.
    """
    id: int
    was_created: bool = False
    was_updated: bool = False


class TagTreeNode(TypedDict):
    """
    One node of a subject's tag tree, as returned by `api.get_tag_tree()`.

    Instances are plain dictionaries rather than objects of this class.
    """
    id: int
    name: str
    order: int
    is_system: bool
    children: list[TagTreeNode]
