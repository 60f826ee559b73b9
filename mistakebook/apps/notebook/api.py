"""
Notebook API

Creation, tagging and review bookkeeping of ErrorItems. Callers should use
these functions instead of writing the models directly. No permissions are
enforced here.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable

from attrs import define
from django.db.models import QuerySet
from django.utils import timezone

from mistakebook.lib.scheduling import calculate_next_review_date
from mistakebook_tagging.core.tagging import api as tagging_api
from mistakebook_tagging.core.tagging.legacy import parse_knowledge_points
from mistakebook_tagging.core.tagging.models import KnowledgeTag, Subject
from mistakebook_tagging.core.tagging.subjects import infer_subject_from_name

from .models import ErrorItem

log = logging.getLogger(__name__)

__all__ = [
    "MigrationResult",
    "complete_review",
    "create_error_item",
    "get_due_items",
    "get_item_subject",
    "mark_mastered",
    "migrate_legacy_knowledge_points",
    "tag_error_item",
]


@define
class MigrationResult:
    """
    Counts reported by `migrate_legacy_knowledge_points`.
    """
    processed: int = 0
    skipped: int = 0
    tags_created: int = 0
    links_created: int = 0


def get_item_subject(item: ErrorItem) -> str:
    """
    Subject key of the item: its own, else the one its notebook name implies,
    else "other".
    """
    return item.subject or infer_subject_from_name(item.notebook) or Subject.OTHER.value


def create_error_item(
    *,
    notebook: str = "",
    subject: str | None = None,
    question_text: str = "",
    grade_semester: str = "",
    knowledge_points: str | None = None,
    created_by: int | None = None,
    now: datetime | None = None,
) -> ErrorItem:
    """
    Create a new ErrorItem, due for its first review one day from `now`.
    """
    return ErrorItem.objects.create(
        notebook=notebook,
        subject=subject or infer_subject_from_name(notebook),
        question_text=question_text,
        grade_semester=grade_semester,
        knowledge_points=knowledge_points,
        created_by_id=created_by,
        review_stage=0,
        next_review_at=calculate_next_review_date(0, now),
    )


def tag_error_item(item: ErrorItem, tag_names: Iterable[str]) -> list[KnowledgeTag]:
    """
    Replace the item's tags with the tags called `tag_names`.

    Unknown names become custom tags under the root of the item's grade.
    Raises ValueError, without changing anything, if more names are given than
    one item may carry.
    """
    names = list(dict.fromkeys(name.strip() for name in tag_names if name and name.strip()))
    tagging_api.validate_tag_count(len(names))

    resolved = tagging_api.resolve_tag_names(get_item_subject(item), names, item.grade_semester)
    tags = [tag for tag, _created in resolved]
    item.tags.set(tags)
    return tags


def migrate_legacy_knowledge_points(items: Iterable[ErrorItem] | None = None) -> MigrationResult:
    """
    Link the legacy knowledge points of `items` (default: every item that has
    any) to knowledge tags.

    Tags the subject doesn't have yet are created as custom tags, under the
    grade root matching the item's grade text when one is found. Text that
    can't be parsed counts as no tags. Existing links are kept, so running the
    migration again only adds what is missing.
    """
    if items is None:
        items = ErrorItem.objects.filter(knowledge_points__isnull=False).exclude(knowledge_points="")

    result = MigrationResult()
    for item in items:
        result.processed += 1
        names = parse_knowledge_points(item.knowledge_points)
        if not names:
            result.skipped += 1
            continue

        resolved = tagging_api.resolve_tag_names(get_item_subject(item), names, item.grade_semester)
        result.tags_created += sum(1 for _tag, created in resolved if created)

        linked = set(item.tags.values_list("id", flat=True))
        new_tags = [tag for tag, _created in resolved if tag.id not in linked]
        if new_tags:
            item.tags.add(*new_tags)
            result.links_created += len(new_tags)

    log.info(
        "Migrated legacy knowledge points: %s items, %s skipped, %s tags created, %s links created",
        result.processed, result.skipped, result.tags_created, result.links_created,
    )
    return result


def complete_review(item: ErrorItem, remembered: bool = True, now: datetime | None = None) -> ErrorItem:
    """
    Record a review of the item.

    A remembered item moves to the next stage, a forgotten one starts over at
    stage 0; either way the next review is scheduled from the new stage.
    """
    item.review_stage = item.review_stage + 1 if remembered else 0
    item.next_review_at = calculate_next_review_date(item.review_stage, now)
    item.save(update_fields=["review_stage", "next_review_at"])
    return item


def mark_mastered(item: ErrorItem) -> ErrorItem:
    """
    Take the item out of the review queue.
    """
    item.mastered = True
    item.save(update_fields=["mastered"])
    return item


def get_due_items(now: datetime | None = None) -> QuerySet[ErrorItem]:
    """
    Items to review at `now`, most overdue first.
    """
    if now is None:
        now = timezone.now()
    return ErrorItem.objects.filter(mastered=False, next_review_at__lte=now).order_by("next_review_at", "id")
