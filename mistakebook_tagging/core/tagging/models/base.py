"""
Tagging app base data models
"""
from __future__ import annotations

import logging
from typing import List

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q
from django.utils.functional import cached_property
from django.utils.translation import gettext_lazy as _
from typing_extensions import TypeAlias

from mistakebook.lib.fields import exact_char_field

from .utils import RESERVED_TAG_CHARS

log = logging.getLogger(__name__)

# Ancestry of a given tag; the KnowledgeTag.name fields of a given tag and its parents, starting from the root.
Lineage: TypeAlias = List[str]


class Subject(models.TextChoices):
    """
    Subjects that own a curriculum tree. The value is the stable key stored on
    each tag; the label is the native display name.
    """
    MATH = "math", _("數學")
    PHYSICS = "physics", _("物理")
    CHEMISTRY = "chemistry", _("化學")
    BIOLOGY = "biology", _("生物")
    ENGLISH = "english", _("英語")
    CHINESE = "chinese", _("國文")
    HISTORY = "history", _("歷史")
    GEOGRAPHY = "geography", _("地理")
    POLITICS = "politics", _("公民")
    OTHER = "other", _("其他")


class KnowledgeTag(models.Model):
    """
    A single node of a subject's knowledge tree.

    System tags are authored by a curriculum import and form the tree
    grade/semester -> chapter -> [section] -> knowledge point. Root system tags
    (no parent) are the grade/semester nodes.

    Among system tags, (subject, parent, order) is the structural identity of a
    node: re-importing a curriculum finds the node in the same position and
    renames it if its wording changed, instead of creating a duplicate. The
    name is not part of the identity. Moving a node to another position is
    therefore indistinguishable from replacing it; curriculum edits must keep
    sibling positions stable for tags to survive a re-import.

    Custom tags (is_system=False) are created from legacy data or AI output and
    are identified by (subject, name). They may hang under a system root or
    have no parent at all, and are never deleted automatically.
    """

    id = models.BigAutoField(primary_key=True)
    name = exact_char_field(
        max_length=255,
        help_text=_("Display name of the tag. May be corrected in place without changing the tag's identity."),
    )
    subject = models.CharField(
        max_length=32,
        choices=Subject.choices,
        help_text=_("Key of the subject whose knowledge tree this tag belongs to."),
    )
    parent = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        default=None,
        on_delete=models.CASCADE,
        related_name="children",
        help_text=_(
            "Tag that lives one level up from the current tag, forming a hierarchy. Empty for grade/semester roots."
        ),
    )
    is_system = models.BooleanField(
        default=False,
        help_text=_("Curriculum-authored tag. Custom tags created from user or AI input leave this unset."),
    )
    order = models.PositiveIntegerField(
        default=0,
        help_text=_("1-based position among siblings. Part of the structural identity of system tags."),
    )
    created = models.DateTimeField(auto_now_add=True)
    modified = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["order", "id"]
        indexes = [
            models.Index(fields=["subject", "parent", "order"], name="mb_tagging_position_idx"),
            models.Index(fields=["subject", "name"], name="mb_tagging_name_idx"),
        ]
        constraints = [
            # Roots have a NULL parent, which SQL treats as distinct values, so
            # uniqueness of root positions is enforced by upsert_system_tag.
            models.UniqueConstraint(
                fields=["subject", "parent", "order"],
                condition=Q(is_system=True),
                name="mb_tagging_system_structural_key",
            ),
        ]

    def __repr__(self):
        """
        Developer-facing representation of a KnowledgeTag.
        """
        return str(self)

    def __str__(self):
        """
        User-facing string representation of a KnowledgeTag.
        """
        return f"<{self.__class__.__name__}> ({self.id}) {self.name}"

    def display_str(self):
        """
        String representation of a KnowledgeTag used on import logs.
        """
        return f"<{self.__class__.__name__}> ({self.subject} / {self.name})"

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def get_lineage(self) -> Lineage:
        """
        Queries and returns the lineage of the current tag as a list of names.

        The root name is first, followed by its child's, and on down to self.name.
        """
        lineage: Lineage = [self.name]
        next_ancestor = self.get_next_ancestor()
        while next_ancestor:
            lineage.insert(0, next_ancestor.name)
            next_ancestor = next_ancestor.get_next_ancestor()
        return lineage

    def get_next_ancestor(self) -> KnowledgeTag | None:
        """
        Fetch the parent of this tag, preloading the grandparent and
        great-grandparent in the same query.
        """
        if self.parent_id is None:
            return None
        if not KnowledgeTag.parent.is_cached(self):  # pylint: disable=no-member
            self.parent = KnowledgeTag.objects.select_related("parent", "parent__parent").get(pk=self.parent_id)
        return self.parent

    @cached_property
    def depth(self) -> int:
        """
        How many ancestors this tag has. Zero for grade/semester roots.
        """
        return len(self.get_lineage()) - 1

    def clean(self):
        """
        Validate this tag before saving
        """
        # Don't allow leading or trailing whitespace:
        self.name = self.name.strip()
        if not self.name:
            raise ValidationError(_("Tag names cannot be empty."))

        for reserved_char in RESERVED_TAG_CHARS:
            if reserved_char in self.name:
                raise ValidationError(f"Tags cannot contain a '{reserved_char}' character.")

        if self.parent is not None:
            if self.parent.subject != self.subject:
                raise ValidationError(_("A tag must belong to the same subject as its parent."))
            if self.is_system and not self.parent.is_system:
                raise ValidationError(_("System tags can only be placed under other system tags."))
