"""
Spaced-repetition review schedule.

A mistake is reviewed after 1, 2, 4, 7 and 15 days, then every 30 days. The
review stage is the number of successful reviews so far and indexes the
interval table; stages past the end keep the last (largest) interval.
"""
from __future__ import annotations

from datetime import datetime, timedelta

from django.utils import timezone

REVIEW_INTERVALS = (1, 2, 4, 7, 15, 30)

_STAGE_DESCRIPTIONS = {
    "zh": (
        "第一次複習 (1 天)",
        "第二次複習 (2 天)",
        "第三次複習 (4 天)",
        "第四次複習 (7 天)",
        "第五次複習 (15 天)",
        "定期維護複習 (30 天)",
    ),
    "en": (
        "1st review (1 day)",
        "2nd review (2 days)",
        "3rd review (4 days)",
        "4th review (7 days)",
        "5th review (15 days)",
        "Maintenance review (30 days)",
    ),
}


def review_interval(stage: int) -> timedelta:
    """
    Interval before the next review for `stage`.
    """
    if stage < 0:
        stage = 0
    index = min(stage, len(REVIEW_INTERVALS) - 1)
    return timedelta(days=REVIEW_INTERVALS[index])


def calculate_next_review_date(stage: int, now: datetime | None = None) -> datetime:
    """
    When an item at `stage` is next due. `now` defaults to the current time.
    """
    if now is None:
        now = timezone.now()
    return now + review_interval(stage)


def get_review_stage_description(stage: int, language: str = "zh") -> str:
    descriptions = _STAGE_DESCRIPTIONS.get(language, _STAGE_DESCRIPTIONS["en"])
    return descriptions[min(max(stage, 0), len(descriptions) - 1)]
