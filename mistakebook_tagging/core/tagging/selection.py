"""
Cumulative selection of knowledge tags by grade.

Within a schooling stage, curriculum exposure accumulates: a student in the
second year of junior high has seen the first and second year's material, but
none of senior high's. The selector turns a grade number into the list of leaf
tag names the student may have met, to be offered as candidates to the
question analysis.
"""
from __future__ import annotations

from .conf import get_setting
from .tree import TagTree


def stage_for_grade(grade: int) -> tuple[int, int] | None:
    """
    (first, last) grade numbers of the stage containing `grade`.

    A grade past the last configured stage maps to that last stage; a grade
    before the first stage maps to no stage.
    """
    stages = sorted(tuple(stage) for stage in get_setting("STAGES"))
    for first, last in stages:
        if first <= grade <= last:
            return first, last
    if stages and grade > stages[-1][1]:
        return stages[-1]
    return None


def grade_semester_names(grade: int | None) -> list[str]:
    """
    Names of the grade/semester root tags a student in `grade` has covered.

    None (unknown grade) covers every configured grade of every stage.
    """
    names_by_grade = {int(g): names for g, names in get_setting("GRADE_SEMESTER_NAMES").items()}
    if grade is None:
        grades = sorted(names_by_grade)
    else:
        stage = stage_for_grade(grade)
        if stage is None:
            return []
        first, last = stage
        grades = range(first, min(grade, last) + 1)

    names: list[str] = []
    for g in grades:
        names.extend(names_by_grade.get(g, []))
    return names


class CumulativeTagSelector:
    """
    Selects leaf tag names for a grade from a subject's system tag tree.
    """

    def __init__(self, tree: TagTree):
        self.tree = tree

    def tags_for_grade(self, grade: int | None) -> list[str]:
        """
        Unique leaf names under every root covered by `grade`, in curriculum
        order (root order of `grade_semester_names`, then tree order).
        """
        wanted = grade_semester_names(grade)
        result: dict[str, None] = {}
        for root_name in wanted:
            for root in self.tree.roots:
                if root.name != root_name:
                    continue
                for leaf in self.tree.leaves(root.id):
                    result.setdefault(leaf)
        return list(result)
