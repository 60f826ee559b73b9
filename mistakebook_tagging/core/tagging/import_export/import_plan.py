"""
Classes and functions to create a curriculum import plan and execute it.
"""
from __future__ import annotations

import logging
from typing import Iterator

from attrs import define, field

from .. import api as tagging_api
from ..models import CurriculumImportTask, KnowledgeTag
from .actions import ImportAction, WithoutChanges, available_actions
from .exceptions import ImportActionError

log = logging.getLogger(__name__)


@define
class SectionSpec:
    name: str
    tags: list[str] = field(factory=list)


@define
class ChapterSpec:
    """
    A chapter holds either tags directly (flat shape) or sections (sectioned
    shape); `sections` is None in the flat shape.
    """
    name: str
    tags: list[str] = field(factory=list)
    sections: list[SectionSpec] | None = None


@define
class GradeSpec:
    name: str
    order: int
    chapters: list[ChapterSpec] = field(factory=list)


@define
class CurriculumSpec:
    """
    The declarative curriculum of one subject:
    grade/semester -> chapters -> [sections ->] tags
    """
    subject: str
    grades: list[GradeSpec] = field(factory=list)
    sectioned: bool = False

    def iter_nodes(self) -> Iterator[NodeItem]:
        """
        Yields one NodeItem per tag to write, parents before children.

        Grades keep their rank as order; every other level is numbered by its
        1-based position among its siblings. A section is just one optional
        extra level between a chapter and its tags.
        """
        for grade in self.grades:
            grade_item = NodeItem(name=grade.name, order=grade.order, kind=NodeItem.GRADE)
            yield grade_item
            for chapter_index, chapter in enumerate(grade.chapters, start=1):
                chapter_item = NodeItem(
                    name=chapter.name, order=chapter_index, kind=NodeItem.CHAPTER, parent=grade_item,
                )
                yield chapter_item
                if chapter.sections is None:
                    groups = [(None, chapter.tags)]
                else:
                    groups = [(section.name, section.tags) for section in chapter.sections]
                for section_index, (section_name, tags) in enumerate(groups, start=1):
                    parent = chapter_item
                    if section_name is not None:
                        parent = NodeItem(
                            name=section_name, order=section_index, kind=NodeItem.SECTION, parent=chapter_item,
                        )
                        yield parent
                    for tag_index, tag_name in enumerate(tags, start=1):
                        yield NodeItem(name=tag_name, order=tag_index, kind=NodeItem.TAG, parent=parent)


@define(eq=False)
class NodeItem:
    """
    Tag representation on the curriculum import plan

    `tag_id` is the id of the stored tag at this structural position: found
    while planning, or assigned when the node is created on execution.
    """

    GRADE = "grade"
    CHAPTER = "chapter"
    SECTION = "section"
    TAG = "tag"

    name: str
    order: int
    kind: str
    parent: NodeItem | None = None
    tag_id: int | None = None
    stored_name: str | None = None

    @property
    def parent_tag_id(self) -> int | None:
        return self.parent.tag_id if self.parent else None

    def same_position(self, other: NodeItem) -> bool:
        return self.parent is other.parent and self.order == other.order

    def __str__(self):
        """
        User-facing string representation of a NodeItem.
        """
        return f"<{self.__class__.__name__}> ({self.kind} #{self.order} / {self.name})"


class CurriculumImportPlan:
    """
    Class with functions to build an import plan and execute the plan
    """

    actions: list[ImportAction]
    errors: list[ImportActionError]
    indexed_actions: dict
    subject: str
    replace: bool
    delete_count: int

    def __init__(self, subject: str):
        self.actions = []
        self.errors = []
        self.subject = subject
        self.replace = False
        self.delete_count = 0
        self._init_indexed_actions()

    def _init_indexed_actions(self):
        """
        Initialize the `indexed_actions` dict
        """
        self.indexed_actions = {}
        for action in available_actions:
            self.indexed_actions[action.name] = []

    def _build_action(self, action_cls: type[ImportAction], item: NodeItem):
        """
        Build an action with `item`.

        Run action validation and adds the errors to the errors lists
        Add to the action list and the indexed actions
        """
        action = action_cls(self.subject, item, len(self.actions) + 1)
        self.errors.extend(action.validate(self.indexed_actions))
        self.actions.append(action)
        self.indexed_actions[action.name].append(action)

    def _lookup(self, item: NodeItem):
        """
        Finds the stored system tag at the item's structural position.

        Children of nodes that don't exist yet can't exist either.
        """
        if item.parent is not None and item.parent.tag_id is None:
            return
        stored = KnowledgeTag.objects.filter(
            subject=self.subject,
            parent_id=item.parent_tag_id,
            is_system=True,
            order=item.order,
        ).first()
        if stored:
            item.tag_id = stored.id
            item.stored_name = stored.name

    def generate_actions(self, spec: CurriculumSpec, replace=False):
        """
        Reads each node of `spec` top-down and generates the corresponding
        actions.

        If `replace` is True, all system tags of the subject are deleted
        before execution, so every node becomes a creation.
        """
        self.actions.clear()
        self.errors.clear()
        self._init_indexed_actions()
        self.replace = replace
        self.delete_count = tagging_api.get_system_tags(self.subject).count() if replace else 0

        for item in spec.iter_nodes():
            if not replace:
                self._lookup(item)

            has_action = False
            for action_cls in available_actions:
                if action_cls.applies_for(self.subject, item):
                    self._build_action(action_cls, item)
                    has_action = True
                    break

            if not has_action:
                self._build_action(WithoutChanges, item)

    def plan(self) -> str:
        """
        Returns an string with the plan and errors
        """
        result = (
            f"Import plan for {self.subject}\n"
            "--------------------------------\n"
        )
        if self.replace:
            result += (
                f"Delete {self.delete_count} system tags "
                "(custom tags under them are kept as roots)\n"
            )
        for action in self.actions:
            result += f"#{action.index}: {str(action)}\n"

        if self.errors:
            result += "\nOutput errors\n" "--------------------------------\n"
            for error in self.errors:
                result += f"{str(error)}\n"

        return result

    def execute(self, task: CurriculumImportTask | None = None):
        """
        Executes each action

        Each action commits on its own. The first failure stops the execution
        and propagates; everything written before it stays, and re-running the
        same import continues from there.

        If task is set, creates logs for each action
        """
        if self.errors:
            return
        if self.replace:
            deleted, detached = tagging_api.delete_system_tags(self.subject)
            if task:
                task.log_replace(deleted, detached)
        for action in self.actions:
            if task:
                task.add_log(f"#{action.index}: {str(action)} [Started]")
            action.execute()
            if task:
                task.add_log("Success")
        log.info("Executed %s import actions for %s", len(self.actions), self.subject)
