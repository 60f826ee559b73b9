"""
Subject inference from user-facing notebook names.
"""
from __future__ import annotations

from .models import Subject

# Checked in order; the first subject with a matching keyword wins.
SUBJECT_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    (Subject.MATH, ("math", "數學", "数学")),
    (Subject.PHYSICS, ("physics", "物理")),
    (Subject.CHEMISTRY, ("chemistry", "化學", "化学")),
    (Subject.BIOLOGY, ("biology", "生物")),
    (Subject.ENGLISH, ("english", "英語", "英语", "英文")),
    (Subject.CHINESE, ("chinese", "國文", "語文", "语文")),
    (Subject.HISTORY, ("history", "歷史", "历史")),
    (Subject.GEOGRAPHY, ("geography", "地理")),
    (Subject.POLITICS, ("politics", "公民", "政治")),
]


def infer_subject_from_name(name: str | None) -> str | None:
    """
    Subject key for a notebook name like "數學錯題本" or "Physics mistakes".

    Returns None when no subject keyword is present.
    """
    if not name:
        return None
    lowered = name.lower()
    for subject, keywords in SUBJECT_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return subject.value
    return None
