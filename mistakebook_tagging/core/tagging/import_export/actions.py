"""
Actions for curriculum import
"""
from __future__ import annotations

import typing

from django.utils.translation import gettext as _

from .. import api as tagging_api
from ..models.utils import RESERVED_TAG_CHARS
from .exceptions import ImportActionConflict, ImportActionError

if typing.TYPE_CHECKING:
    from .import_plan import NodeItem


class ImportAction:
    """
    Base class to create actions

    Each action writes one node of the curriculum at its structural position
    (subject, parent, order).

    To create an Action you need to implement the following:

    Given a NodeItem, the action to be performed is deduced by comparing it
    with the system tag stored at the same position (found while planning).
    Ex. The create action is inferred if no tag is stored at that position.
    This check is done in `applies_for`

    Then each action validates if the change is consistent with previous
    actions. Ex. Verify that two nodes don't claim the same position.
    This checks is done in `validate`

    Then the actions are executed. Ex. Create the tag on the database
    This is done in `execute`
    """

    name = "import_action"

    def __init__(self, subject: str, item: NodeItem, index: int):
        self.subject = subject
        self.item = item
        self.index = index

    def __repr__(self) -> str:
        return str(_("Action {name} (index={index},name={item_name})").format(
            name=self.name, index=self.index, item_name=self.item.name,
        ))

    def __str__(self) -> str:
        return self.__repr__()

    @classmethod
    def applies_for(cls, subject: str, item: NodeItem) -> bool:
        """
        Implement this to meet the conditions that a `NodeItem` needs
        to have for this action. If this function returns `True` for `item`
        then the action is created.
        """
        raise NotImplementedError

    def validate(self, indexed_actions) -> list[ImportActionError]:
        """
        Implement this to find inconsistencies with previous actions.
        """
        raise NotImplementedError

    def execute(self) -> None:
        """
        Implement this to execute the action.
        """
        raise NotImplementedError

    def _upsert(self) -> None:
        result = tagging_api.upsert_system_tag(
            self.subject,
            self.item.name,
            self.item.parent_tag_id,
            self.item.order,
        )
        self.item.tag_id = result.id

    def _validate_position(self, indexed_actions) -> ImportActionError | None:
        """
        Check that no previous action writes the same structural position
        """
        for actions in indexed_actions.values():
            for action in actions:
                if action.item.same_position(self.item):
                    return ImportActionConflict(
                        action=self,
                        conflict_action_index=action.index,
                        message=_("Duplicated position {order} under the same parent.").format(
                            order=self.item.order,
                        ),
                    )
        return None

    def _validate_name(self) -> ImportActionError | None:
        name = self.item.name.strip()
        if not name:
            return ImportActionError(action=self, message=_("Tag name is empty."))
        for char in RESERVED_TAG_CHARS:
            if char in name:
                return ImportActionError(
                    action=self,
                    message=_("Tag name contains a reserved character ({char!r}).").format(char=char),
                )
        return None

    def _validate_write(self, indexed_actions) -> list[ImportActionError]:
        errors = []
        for error in (self._validate_position(indexed_actions), self._validate_name()):
            if error:
                errors.append(error)
        return errors


class CreateTag(ImportAction):
    """
    Action for create a system tag

    Action created if no system tag is stored at the node's position

    Validations:
    - Position duplicates with previous actions.
    - Empty or reserved-character names.
    """

    name = "create"

    def __str__(self) -> str:
        return str(
            _(
                "Create a new {kind} '{name}' (order={order}, parent={parent})."
            ).format(
                kind=self.item.kind,
                name=self.item.name,
                order=self.item.order,
                parent=self.item.parent.name if self.item.parent else None,
            )
        )

    @classmethod
    def applies_for(cls, subject: str, item: NodeItem) -> bool:
        """
        This action applies whenever the position is empty
        """
        return item.tag_id is None

    def validate(self, indexed_actions) -> list[ImportActionError]:
        return self._validate_write(indexed_actions)

    def execute(self) -> None:
        """
        Creates the tag, and records its id for the children's actions
        """
        self._upsert()


class RenameTag(ImportAction):
    """
    Action for rename a system tag

    Action created if the tag stored at the node's position has another name.
    The tag keeps its id, so links from notebook items stay valid.

    Validations:
    - Position duplicates with previous actions.
    - Empty or reserved-character names.
    """

    name = "rename"

    def __str__(self) -> str:
        return str(
            _("Rename {kind} (id={id}) from '{old_name}' to '{new_name}'").format(
                kind=self.item.kind,
                id=self.item.tag_id,
                old_name=self.item.stored_name,
                new_name=self.item.name,
            )
        )

    @classmethod
    def applies_for(cls, subject: str, item: NodeItem) -> bool:
        """
        This action applies whenever there is a change on the tag name
        """
        return item.tag_id is not None and item.stored_name != item.name.strip()

    def validate(self, indexed_actions) -> list[ImportActionError]:
        return self._validate_write(indexed_actions)

    def execute(self) -> None:
        self._upsert()


class WithoutChanges(ImportAction):
    """
    Action when there is no change on the Tag

    Validations:
    - Position duplicates with previous actions. A node renamed earlier in the
      plan may already have claimed this stored tag.
    """

    name = "without_changes"

    def __str__(self) -> str:
        return str(_("No changes needed for {item}").format(item=self.item))

    @classmethod
    def applies_for(cls, subject: str, item: NodeItem) -> bool:
        """
        This action is the fallback, created by the plan when no other applies
        """
        return False

    def validate(self, indexed_actions) -> list[ImportActionError]:
        error = self._validate_position(indexed_actions)
        return [error] if error else []

    def execute(self) -> None:
        """
        Do nothing
        """


# Register actions here in the order in which you want to check.
available_actions = [
    RenameTag,
    CreateTag,
    WithoutChanges,
]
