"""
Recognition of free-text grade/semester descriptions.

Legacy mistake records carry their grade as loose text ("初一，上期",
"Grade 7, 1st Semester", "七年級上" ...). When their knowledge points are
migrated into the tag tree, we look for the grade/semester root tag the
record most likely belongs to. This is a best-effort heuristic: ambiguous or
unseen input is Unresolved, and callers attach the tag without a parent.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Union

from attrs import frozen
from typing_extensions import TypeAlias

log = logging.getLogger(__name__)

# Historical spellings -> canonical grade token (the prefix of the root tag
# names, e.g. "國一" for the roots "國一上" / "國一下").
GRADE_LEVEL_SPELLINGS: dict[str, str] = {
    "一年级": "一年級", "一年級": "一年級", "Grade 1": "一年級",
    "二年级": "二年級", "二年級": "二年級", "Grade 2": "二年級",
    "三年级": "三年級", "三年級": "三年級", "Grade 3": "三年級",
    "四年级": "四年級", "四年級": "四年級", "Grade 4": "四年級",
    "五年级": "五年級", "五年級": "五年級", "Grade 5": "五年級",
    "六年级": "六年級", "六年級": "六年級", "Grade 6": "六年級",
    "初一": "國一", "国一": "國一", "國一": "國一", "七年级": "國一", "七年級": "國一", "Grade 7": "國一",
    "國中一年級": "國一", "Junior High Grade 1": "國一",
    "初二": "國二", "国二": "國二", "國二": "國二", "八年级": "國二", "八年級": "國二", "Grade 8": "國二",
    "國中二年級": "國二", "Junior High Grade 2": "國二",
    "初三": "國三", "国三": "國三", "國三": "國三", "九年级": "國三", "九年級": "國三", "Grade 9": "國三",
    "國中三年級": "國三", "Junior High Grade 3": "國三",
    "高一": "高一", "Grade 10": "高一", "Senior 1": "高一", "高中一年級": "高一", "Senior High Grade 1": "高一",
    "高二": "高二", "Grade 11": "高二", "Senior 2": "高二", "高中二年級": "高二", "Senior High Grade 2": "高二",
    "高三": "高三", "Grade 12": "高三", "Senior 3": "高三", "高中三年級": "高三", "Senior High Grade 3": "高三",
}

# Longest spellings are tried first, so "Grade 10" is never read as "Grade 1"
# and "國中一年級" wins over "一年級".
_SPELLINGS_BY_LENGTH = sorted(GRADE_LEVEL_SPELLINGS, key=len, reverse=True)

FIRST_SEMESTER = "上"
SECOND_SEMESTER = "下"

_FIRST_SEMESTER_MARKERS = (FIRST_SEMESTER, "1st", "first")
_SECOND_SEMESTER_MARKERS = (SECOND_SEMESTER, "2nd", "second")


class UnresolvedReason(Enum):
    EMPTY_INPUT = "empty_input"
    NO_ROOT_TAGS = "no_root_tags"
    UNRECOGNIZED_GRADE = "unrecognized_grade"
    NO_MATCHING_ROOT = "no_matching_root"


@frozen
class Resolved:
    """
    The grade/semester root tag a description was matched to.
    """
    tag_id: int
    name: str

    @property
    def resolved(self) -> bool:
        return True


@frozen
class Unresolved:
    """
    No root tag could be chosen for a description.
    """
    reason: UnresolvedReason

    @property
    def resolved(self) -> bool:
        return False


GradeResolution: TypeAlias = Union[Resolved, Unresolved]


def normalize_grade_level(text: str) -> str | None:
    """
    Canonical grade token mentioned in `text`, or None.
    """
    for spelling in _SPELLINGS_BY_LENGTH:
        if spelling in text:
            return GRADE_LEVEL_SPELLINGS[spelling]
    return None


def detect_semester(text: str) -> str | None:
    """
    Semester marker ("上" / "下") mentioned in `text`, or None.
    """
    lowered = text.lower()
    if any(marker in lowered for marker in _FIRST_SEMESTER_MARKERS):
        return FIRST_SEMESTER
    if any(marker in lowered for marker in _SECOND_SEMESTER_MARKERS):
        return SECOND_SEMESTER
    return None


def candidate_root_names(text: str) -> list[str]:
    """
    Root names to try for `text`, most specific first: grade plus semester
    (when a semester is mentioned), then the grade alone. Some subjects have
    grade roots without semesters (e.g. "高三").
    """
    grade = normalize_grade_level(text)
    if grade is None:
        return []
    candidates = []
    semester = detect_semester(text)
    if semester:
        candidates.append(f"{grade}{semester}")
    candidates.append(grade)
    return candidates


class GradeResolver:
    """
    Matches free-text grade descriptions against a subject's root tags.

    `roots` are (id, name) pairs of the subject's system root tags.
    """

    def __init__(self, roots: Iterable[tuple[int, str]]):
        self.roots = list(roots)

    def _find(self, name: str) -> Resolved | None:
        for tag_id, root_name in self.roots:
            if root_name == name:
                return Resolved(tag_id=tag_id, name=root_name)
        return None

    def resolve(self, text: str | None) -> GradeResolution:
        if not text or not text.strip():
            return Unresolved(UnresolvedReason.EMPTY_INPUT)
        if not self.roots:
            return Unresolved(UnresolvedReason.NO_ROOT_TAGS)

        text = text.strip()
        exact = self._find(text)
        if exact:
            return exact

        candidates = candidate_root_names(text)
        if not candidates:
            log.debug("Unrecognized grade level in %r", text)
            return Unresolved(UnresolvedReason.UNRECOGNIZED_GRADE)

        for candidate in candidates:
            match = self._find(candidate)
            if match:
                return match

        log.debug("No root tag among %s for %r", candidates, text)
        return Unresolved(UnresolvedReason.NO_MATCHING_ROOT)
