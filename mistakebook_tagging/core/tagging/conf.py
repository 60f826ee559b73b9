"""
Settings for the tagging app.

Projects override any of these through the MISTAKEBOOK_TAGGING dict in their
Django settings; missing keys fall back to the defaults below.
"""
from __future__ import annotations

from typing import Any

from django.conf import settings

DEFAULTS: dict[str, Any] = {
    # Grade number -> names of that grade's grade/semester root tags, in order.
    "GRADE_SEMESTER_NAMES": {
        1: ["一年級上", "一年級下"],
        2: ["二年級上", "二年級下"],
        3: ["三年級上", "三年級下"],
        4: ["四年級上", "四年級下"],
        5: ["五年級上", "五年級下"],
        6: ["六年級上", "六年級下"],
        7: ["國一上", "國一下"],
        8: ["國二上", "國二下"],
        9: ["國三上", "國三下"],
        10: ["高一上", "高一下"],
        11: ["高二上", "高二下"],
        12: ["高三上", "高三下"],
    },
    # Inclusive (first, last) grade numbers of each cumulative schooling stage.
    "STAGES": [(1, 6), (7, 9), (10, 12)],
    # Rank given to grade/semester roots that a curriculum's grade_order omits.
    "DEFAULT_GRADE_ORDER": 99,
    # Most tags that may be linked to one analyzed question.
    "MAX_TAGS_PER_ITEM": 5,
}


def get_setting(name: str) -> Any:
    """
    Return the configured value of a tagging setting.
    """
    overrides = getattr(settings, "MISTAKEBOOK_TAGGING", {}) or {}
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
