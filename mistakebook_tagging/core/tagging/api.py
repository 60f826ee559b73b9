""""
Tagging API

Anyone using the mistakebook_tagging app should use these APIs instead of
creating or modifying the models directly, since there might be other related
model changes that you may not know about.

No permissions are enforced by these methods -- these must be enforced by the
callers.

Please look at the models/base.py file for more information about the kinds of
data stored in this app.
"""
from __future__ import annotations

import logging
from datetime import date

from django.db import transaction
from django.db.models import QuerySet
from django.utils.translation import gettext as _

from mistakebook.lib.progression import EducationStage, calculate_grade_number

from .data import TagTreeNode, UpsertResult
from .models import KnowledgeTag
from .recognition import GradeResolution, GradeResolver
from .selection import CumulativeTagSelector
from .tree import TagTree, TreeNode

log = logging.getLogger(__name__)

# Export this as part of the API
TagDoesNotExist = KnowledgeTag.DoesNotExist


def upsert_system_tag(subject: str, name: str, parent_id: int | None, order: int) -> UpsertResult:
    """
    Make the system tag at structural position (subject, parent_id, order)
    carry `name`.

    An existing tag in that position is renamed in place, keeping its id; an
    empty position gets a new tag. Each call is its own unit of work: store
    errors propagate to the caller and nothing is retried here.
    """
    name = name.strip()
    existing = KnowledgeTag.objects.filter(
        subject=subject,
        parent_id=parent_id,
        is_system=True,
        order=order,
    ).first()

    if existing is None:
        tag = KnowledgeTag(
            name=name,
            subject=subject,
            parent_id=parent_id,
            is_system=True,
            order=order,
        )
        tag.full_clean()
        tag.save()
        log.info("Created %s tag %r (parent=%s, order=%s)", subject, name, parent_id, order)
        return UpsertResult(id=tag.id, was_created=True)

    if existing.name != name:
        old_name = existing.name
        existing.name = name
        existing.full_clean()
        existing.save(update_fields=["name", "modified"])
        log.info("Renamed %s tag %s: %r -> %r", subject, existing.id, old_name, name)
        return UpsertResult(id=existing.id, was_updated=True)

    log.debug("No changes for %s tag %s %r", subject, existing.id, name)
    return UpsertResult(id=existing.id)


def get_root_tags(subject: str, system_only: bool = True) -> QuerySet[KnowledgeTag]:
    """
    Returns the grade/semester root tags of the subject, in rank order.

    Pass system_only=False to include custom tags that have no parent.
    """
    qs = KnowledgeTag.objects.filter(subject=subject, parent=None)
    if system_only:
        qs = qs.filter(is_system=True)
    return qs.order_by("order", "id")


def get_children_tags(tag: KnowledgeTag) -> QuerySet[KnowledgeTag]:
    """
    Returns the direct children of the given tag, in sibling order.
    """
    return tag.children.order_by("order", "id")


def get_system_tags(subject: str) -> QuerySet[KnowledgeTag]:
    return KnowledgeTag.objects.filter(subject=subject, is_system=True)


def get_leaf_tag_names(subject: str) -> list[str]:
    """
    Names of all system tags of the subject that have no children, ordered by
    sibling position.
    """
    return list(
        KnowledgeTag.objects
        .filter(subject=subject, is_system=True, children__isnull=True)
        .order_by("order", "id")
        .values_list("name", flat=True)
    )


def build_tag_tree(subject: str, include_custom: bool = False) -> TagTree:
    """
    Loads the subject's tags in one query and links them into a TagTree.
    """
    qs = KnowledgeTag.objects.filter(subject=subject)
    if not include_custom:
        qs = qs.filter(is_system=True)
    return TagTree(qs.values("id", "name", "parent_id", "order", "is_system"))


def _tree_node_data(node: TreeNode) -> TagTreeNode:
    """
    Serializes a TreeNode and its descendants without recursion.
    """
    root: TagTreeNode = {
        "id": node.id, "name": node.name, "order": node.order, "is_system": node.is_system, "children": [],
    }
    stack = [(node, root)]
    while stack:
        current, data = stack.pop()
        for child in current.children:
            child_data: TagTreeNode = {
                "id": child.id, "name": child.name, "order": child.order, "is_system": child.is_system,
                "children": [],
            }
            data["children"].append(child_data)
            stack.append((child, child_data))
    return root


def get_tag_tree(subject: str, include_custom: bool = True) -> list[TagTreeNode]:
    """
    Returns the subject's tags as nested dicts, e.g. to drive grade / chapter
    filters. Custom tags are included unless include_custom=False.
    """
    tree = build_tag_tree(subject, include_custom=include_custom)
    return [_tree_node_data(root) for root in tree.roots]


def get_leaf_names(tag: KnowledgeTag) -> list[str]:
    """
    Leaf names under the given tag, e.g. the knowledge points of a chapter.
    A tag without children returns its own name.
    """
    tree = build_tag_tree(tag.subject, include_custom=not tag.is_system)
    return tree.leaves(tag.id)


def delete_system_tags(subject: str) -> tuple[int, int]:
    """
    Deletes every system tag of the subject, before the curriculum is rebuilt.

    Custom tags are never deleted automatically: any custom tag hanging under
    a system tag is first detached into a parentless root.

    Returns (system tags deleted, custom tags detached).
    """
    with transaction.atomic():
        detached = KnowledgeTag.objects.filter(
            subject=subject, is_system=False, parent__is_system=True,
        ).update(parent=None)
        system_tags = KnowledgeTag.objects.filter(subject=subject, is_system=True)
        deleted = system_tags.count()
        system_tags.delete()
    log.info("Deleted %s %s system tags, detached %s custom tags", deleted, subject, detached)
    return deleted, detached


def find_tag_by_name(subject: str, name: str) -> KnowledgeTag | None:
    """
    The tag of the subject called `name`, preferring system tags over custom
    ones, or None.
    """
    return (
        KnowledgeTag.objects
        .filter(subject=subject, name=name.strip())
        .order_by("-is_system", "id")
        .first()
    )


def find_custom_tag(subject: str, name: str) -> KnowledgeTag | None:
    return KnowledgeTag.objects.filter(subject=subject, name=name.strip(), is_system=False).order_by("id").first()


def get_or_create_custom_tag(
    subject: str,
    name: str,
    parent_id: int | None = None,
) -> tuple[KnowledgeTag, bool]:
    """
    Returns the custom tag identified by (subject, name), creating it under
    `parent_id` (or as a root) if it doesn't exist yet.

    An existing custom tag keeps its current parent.
    """
    existing = find_custom_tag(subject, name)
    if existing:
        return existing, False
    tag = KnowledgeTag(name=name, subject=subject, parent_id=parent_id, is_system=False)
    tag.full_clean()
    tag.save()
    log.info("Created custom %s tag %r (parent=%s)", subject, tag.name, parent_id)
    return tag, True


def resolve_grade(grade_semester: str | None, subject: str) -> GradeResolution:
    """
    Matches a free-text grade/semester description to one of the subject's
    grade/semester root tags. See recognition.py for the heuristics.
    """
    roots = get_root_tags(subject).values_list("id", "name")
    return GradeResolver(roots).resolve(grade_semester)


def find_parent_tag_id_for_grade(grade_semester: str | None, subject: str) -> int | None:
    """
    Id of the root tag matching `grade_semester`, or None if unresolved.
    """
    resolution = resolve_grade(grade_semester, subject)
    return resolution.tag_id if resolution.resolved else None


def resolve_tag_names(
    subject: str,
    names: list[str],
    grade_semester: str | None = None,
) -> list[tuple[KnowledgeTag, bool]]:
    """
    Returns a tag for each name, creating custom tags for unknown names.

    Existing tags (system first) are matched by exact name. New custom tags
    are placed under the root matching `grade_semester`; if the grade cannot be
    resolved they are created without a parent.

    Returns (tag, created) pairs in the order of `names`, without duplicates.
    """
    results: list[tuple[KnowledgeTag, bool]] = []
    seen: set[int] = set()
    parent_id: int | None = None
    parent_resolved = False
    for name in names:
        name = name.strip()
        if not name:
            continue
        tag = find_tag_by_name(subject, name)
        created = False
        if tag is None:
            if not parent_resolved:
                resolution = resolve_grade(grade_semester, subject)
                if resolution.resolved:
                    parent_id = resolution.tag_id
                else:
                    log.warning(
                        "Grade %r not resolved for %s (%s); custom tags will have no parent",
                        grade_semester, subject, resolution.reason.value,
                    )
                parent_resolved = True
            tag, created = get_or_create_custom_tag(subject, name, parent_id)
        if tag.id not in seen:
            seen.add(tag.id)
            results.append((tag, created))
    return results


def get_tags_for_grade(subject: str, grade: int | None) -> list[str]:
    """
    Unique knowledge point names a student in `grade` may have covered: the
    leaves under this grade's and every earlier grade's roots within the same
    stage. An unknown grade (None) returns the leaves of every grade.
    """
    return CumulativeTagSelector(build_tag_tree(subject)).tags_for_grade(grade)


def get_candidate_tags(
    subject: str,
    education_stage: EducationStage | str | None,
    enrollment_year: int | None,
    as_of: date | None = None,
) -> list[str]:
    """
    Candidate knowledge points for analyzing a question of a given student.
    """
    grade = calculate_grade_number(education_stage, enrollment_year, as_of)
    return get_tags_for_grade(subject, grade)


def validate_tag_count(count: int) -> None:
    """
    Raises ValueError if more tags are proposed for one item than allowed.
    """
    from .conf import get_setting  # pylint: disable=import-outside-toplevel

    limit = get_setting("MAX_TAGS_PER_ITEM")
    if count > limit:
        raise ValueError(
            _("Cannot link more than {limit} knowledge points to one question.").format(limit=limit)
        )
