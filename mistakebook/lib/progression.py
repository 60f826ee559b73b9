"""
Grade progression: which grade and semester a student is in on a given date.

Everything here is a function of its arguments, except that a missing date
means today in the current Django time zone. Unknown stages, dates before
enrollment and dates after graduation are all valid inputs that produce a
label; nothing in this module raises for domain input.

The school year starts in September. A date in September or later belongs to
the academic year that starts in that calendar year; earlier dates belong to
the academic year that started the previous calendar year. Enrollment is
assumed to happen in September of the enrollment year.

Semesters follow the academic period rather than the in-session calendar:
September through January is the first semester (so the winter break counts
as first semester) and February through August is the second semester (so the
summer break counts as second semester).
"""
from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from django.utils import timezone

ACADEMIC_YEAR_START_MONTH = 9
SECOND_SEMESTER_START_MONTH = 2


class EducationStage(str, Enum):
    """
    Multi-year schooling phases with their own grade name tables.
    """

    PRIMARY = "primary"
    JUNIOR_HIGH = "junior_high"
    SENIOR_HIGH = "senior_high"
    UNIVERSITY = "university"


class Language(str, Enum):
    """
    Label languages. ZH is the native form, EN the fallback.
    """

    ZH = "zh"
    EN = "en"


class Semester(Enum):
    FIRST = 1
    SECOND = 2


GRADE_NAMES: dict[Language, dict[str, list[str]]] = {
    Language.ZH: {
        EducationStage.PRIMARY.value: ["一年級", "二年級", "三年級", "四年級", "五年級", "六年級"],
        EducationStage.JUNIOR_HIGH.value: ["國一", "國二", "國三"],
        EducationStage.SENIOR_HIGH.value: ["高一", "高二", "高三"],
        EducationStage.UNIVERSITY.value: ["大一", "大二", "大三", "大四"],
    },
    Language.EN: {
        EducationStage.PRIMARY.value: ["Grade 1", "Grade 2", "Grade 3", "Grade 4", "Grade 5", "Grade 6"],
        EducationStage.JUNIOR_HIGH.value: ["Junior High Grade 1", "Junior High Grade 2", "Junior High Grade 3"],
        EducationStage.SENIOR_HIGH.value: ["Senior High Grade 1", "Senior High Grade 2", "Senior High Grade 3"],
        EducationStage.UNIVERSITY.value: ["Freshman", "Sophomore", "Junior", "Senior"],
    },
}

PRE_ENROLLMENT_LABELS = {
    Language.ZH: "學前",
    Language.EN: "Pre-school",
}

GRADUATED_LABELS = {
    Language.ZH: "已畢業",
    Language.EN: "Graduated",
}

# Native labels append a single character to the grade name ("國一上").
SEMESTER_SUFFIXES = {
    Semester.FIRST: "上",
    Semester.SECOND: "下",
}

# Fallback labels append a comma-separated phrase ("Grade 1, 1st Semester").
SEMESTER_PHRASES = {
    Semester.FIRST: "1st Semester",
    Semester.SECOND: "2nd Semester",
}

# First "grade number" of each stage, as used by the curriculum tag tables
# (junior high year 1 is grade 7, senior high year 1 is grade 10).
GRADE_NUMBER_OFFSETS = {
    EducationStage.JUNIOR_HIGH.value: 6,
    EducationStage.SENIOR_HIGH.value: 9,
}


def _to_date(as_of: date | datetime | None) -> date:
    """
    Calendar date of `as_of` in the current Django time zone. Aware datetimes
    are converted first; naive ones and plain dates are taken as they are.
    """
    if as_of is None:
        as_of = timezone.now()
    if isinstance(as_of, datetime):
        if timezone.is_aware(as_of):
            return timezone.localdate(as_of)
        return as_of.date()
    return as_of


def _language(language: Language | str) -> Language:
    """
    Anything that isn't the native language falls back to English.
    """
    return Language.ZH if language == Language.ZH else Language.EN


def _stage_key(stage: EducationStage | str | None) -> str:
    if isinstance(stage, EducationStage):
        return stage.value
    return stage or ""


def academic_year(as_of: date) -> int:
    """
    Calendar year in which the academic year containing `as_of` started.
    """
    if as_of.month >= ACADEMIC_YEAR_START_MONTH:
        return as_of.year
    return as_of.year - 1


def semester_for(as_of: date) -> Semester:
    """
    Academic semester for `as_of`; see the module docstring for the breaks.
    """
    if as_of.month >= ACADEMIC_YEAR_START_MONTH or as_of.month < SECOND_SEMESTER_START_MONTH:
        return Semester.FIRST
    return Semester.SECOND


def grade_level(enrollment_year: int, as_of: date) -> int:
    """
    1-based year within the stage. Zero or less means not yet enrolled; it
    may also exceed the number of years in the stage (graduated).
    """
    return academic_year(as_of) - enrollment_year + 1


def calculate_grade(
    education_stage: EducationStage | str | None,
    enrollment_year: int,
    as_of: date | datetime | None = None,
    language: Language | str = Language.EN,
) -> str:
    """
    Human-readable grade/semester label, e.g. "國一上" or
    "Junior High Grade 1, 1st Semester".

    Unrecognized stages have no grade names, so they always take the
    "graduated" branch. The graduated label still carries the semester
    ("已畢業上", "Graduated, 1st Semester") because existing stored labels use
    that form. The pre-enrollment label carries it too ("學前下").
    """
    as_of = _to_date(as_of)
    lang = _language(language)
    level = grade_level(enrollment_year, as_of)
    semester = semester_for(as_of)
    grades = GRADE_NAMES[lang].get(_stage_key(education_stage), [])

    if 0 < level <= len(grades):
        grade_name = grades[level - 1]
    elif level > len(grades):
        grade_name = GRADUATED_LABELS[lang]
    else:
        grade_name = PRE_ENROLLMENT_LABELS[lang]

    if lang == Language.ZH:
        return f"{grade_name}{SEMESTER_SUFFIXES[semester]}"
    return f"{grade_name}, {SEMESTER_PHRASES[semester]}"


def calculate_grade_number(
    education_stage: EducationStage | str | None,
    enrollment_year: int | None,
    as_of: date | datetime | None = None,
) -> int | None:
    """
    Curriculum grade number (7-9 for junior high, 10-12 for senior high).

    Returns None when the enrollment year is unknown, the stage has no
    curriculum grade numbers, or the student is outside the stage.
    """
    if not enrollment_year:
        return None
    stage = _stage_key(education_stage)
    offset = GRADE_NUMBER_OFFSETS.get(stage)
    if offset is None:
        return None
    level = grade_level(enrollment_year, _to_date(as_of))
    if 0 < level <= len(GRADE_NAMES[Language.EN][stage]):
        return offset + level
    return None
