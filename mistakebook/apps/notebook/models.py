"""
Notebook models.

An ErrorItem is one question a student got wrong. Older items only carry their
knowledge points as loose text (`knowledge_points`) and their grade as free
text (`grade_semester`); `tags` holds the links into the knowledge tag tree
once the item has been tagged or migrated.
"""
from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from mistakebook_tagging.core.tagging.models import KnowledgeTag, Subject


class ErrorItem(models.Model):
    """
    A question the student got wrong, with its review state.

    `review_stage` counts the consecutive successful reviews and selects the
    next interval (see mistakebook.lib.scheduling). Mastered items leave the
    review queue.
    """

    id = models.BigAutoField(primary_key=True)
    notebook = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text=_("Name of the notebook holding this item, e.g. '數學錯題本'."),
    )
    subject = models.CharField(
        max_length=32,
        choices=Subject.choices,
        null=True,
        blank=True,
        help_text=_("Subject key. Inferred from the notebook name when empty."),
    )
    question_text = models.TextField(blank=True, default="")
    grade_semester = models.CharField(
        max_length=64,
        blank=True,
        default="",
        help_text=_("Grade and semester the question belongs to, as free text (e.g. '國一上', 'Grade 7')."),
    )
    knowledge_points = models.TextField(
        null=True,
        blank=True,
        help_text=_("Legacy knowledge points: a JSON list or a comma-separated string."),
    )
    tags = models.ManyToManyField(
        KnowledgeTag,
        related_name="error_items",
        blank=True,
    )
    review_stage = models.PositiveIntegerField(default=0)
    next_review_at = models.DateTimeField(null=True, blank=True)
    mastered = models.BooleanField(default=False)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
    )
    created = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created", "-id"]
        indexes = [
            models.Index(fields=["mastered", "next_review_at"], name="mb_notebook_due_idx"),
        ]

    def __str__(self):
        return f"<{self.__class__.__name__}> ({self.id}) {self.notebook}"
