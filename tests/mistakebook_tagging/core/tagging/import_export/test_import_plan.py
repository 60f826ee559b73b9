"""
Test for import_plan functions
"""
from __future__ import annotations

import ddt  # type: ignore[import]
from django.test.testcases import TestCase

from mistakebook_tagging.core.tagging.import_export.actions import CreateTag, RenameTag, WithoutChanges
from mistakebook_tagging.core.tagging.import_export.exceptions import ImportActionConflict, ImportActionError
from mistakebook_tagging.core.tagging.import_export.import_plan import (
    ChapterSpec,
    CurriculumImportPlan,
    CurriculumSpec,
    GradeSpec,
    NodeItem,
    SectionSpec,
)
from mistakebook_tagging.core.tagging.import_export.parsers import YAMLParser
from mistakebook_tagging.core.tagging.models import KnowledgeTag

from .mixins import TestImportExportMixin, curriculum_file


def _math_spec(**changes) -> CurriculumSpec:
    """
    The curriculum of the math fixture, with `changes` replacing whole grades
    """
    grades = {
        "國一上": GradeSpec("國一上", 1, [
            ChapterSpec("整數", ["正數與負數", "數線"]),
            ChapterSpec("一元一次方程式", ["等式的性質"]),
        ]),
        "國一下": GradeSpec("國一下", 2, [ChapterSpec("二元一次聯立方程式", ["代入消去法", "數線"])]),
        "國二上": GradeSpec("國二上", 3, [ChapterSpec("乘法公式", ["平方差公式"])]),
        "高一上": GradeSpec("高一上", 7, [ChapterSpec("函數", ["一次函數"])]),
    }
    grades.update(changes)
    return CurriculumSpec(subject="math", grades=list(grades.values()))


class TestCurriculumSpec(TestCase):
    """
    Test the node walk of a curriculum
    """

    def test_iter_nodes_sectioned(self):
        spec, _errors = YAMLParser.parse_import(curriculum_file(), "biology")
        nodes = list(spec.iter_nodes())
        assert [(node.kind, node.order, node.name) for node in nodes] == [
            (NodeItem.GRADE, 1, "國一上"),
            (NodeItem.CHAPTER, 1, "生命的特性"),
            (NodeItem.SECTION, 1, "細胞"),
            (NodeItem.TAG, 1, "細胞的構造"),
            (NodeItem.TAG, 2, "顯微鏡"),
            (NodeItem.SECTION, 2, "養分"),
            (NodeItem.TAG, 1, "酵素"),
            (NodeItem.GRADE, 2, "國一下"),
            (NodeItem.CHAPTER, 1, "遺傳"),
            (NodeItem.SECTION, 1, "基因"),
            (NodeItem.TAG, 1, "孟德爾遺傳法則"),
            (NodeItem.GRADE, 99, "國二上"),
        ]
        assert nodes[3].parent is nodes[2]
        assert nodes[2].parent is nodes[1]
        assert nodes[1].parent is nodes[0]
        assert nodes[0].parent is None

    def test_iter_nodes_flat(self):
        spec = CurriculumSpec("math", [GradeSpec("國一上", 1, [ChapterSpec("整數", ["數線"])])])
        nodes = list(spec.iter_nodes())
        assert [node.kind for node in nodes] == [NodeItem.GRADE, NodeItem.CHAPTER, NodeItem.TAG]
        assert nodes[2].parent is nodes[1]

    def test_chapter_without_sections(self):
        spec = CurriculumSpec(
            "biology",
            [GradeSpec("國一上", 1, [ChapterSpec("導論", sections=[SectionSpec("空白")])])],
            sectioned=True,
        )
        assert [node.name for node in spec.iter_nodes()] == ["國一上", "導論", "空白"]


@ddt.ddt
class TestCurriculumImportPlan(TestImportExportMixin, TestCase):
    """
    Test for the planning of curriculum imports
    """

    def _plan(self, spec: CurriculumSpec, replace=False) -> CurriculumImportPlan:
        plan = CurriculumImportPlan(spec.subject)
        plan.generate_actions(spec, replace=replace)
        return plan

    def test_empty_subject(self):
        spec, _errors = YAMLParser.parse_import(curriculum_file(), "biology")
        plan = self._plan(spec)
        assert not plan.errors
        assert len(plan.actions) == 12
        assert all(isinstance(action, CreateTag) for action in plan.actions)
        assert [action.index for action in plan.actions] == list(range(1, 13))
        assert len(plan.indexed_actions["create"]) == 12

    def test_same_curriculum(self):
        plan = self._plan(_math_spec())
        assert not plan.errors
        assert len(plan.actions) == 16
        assert all(isinstance(action, WithoutChanges) for action in plan.actions)
        assert plan.actions[1].item.tag_id == self.integers.id

    def test_rename(self):
        plan = self._plan(_math_spec(**{"國一上": GradeSpec("國一上", 1, [
            ChapterSpec("整數與數線", ["正數與負數", "數線"]),
            ChapterSpec("一元一次方程式", ["等式的性質"]),
        ])}))
        assert not plan.errors
        assert [action.name for action in plan.actions[:5]] == [
            "without_changes", "rename", "without_changes", "without_changes", "without_changes",
        ]
        rename = plan.actions[1]
        assert isinstance(rename, RenameTag)
        assert rename.item.tag_id == self.integers.id
        assert str(rename) == f"Rename chapter (id={self.integers.id}) from '整數' to '整數與數線'"

    def test_new_parent_children_are_creates(self):
        plan = self._plan(_math_spec(**{"國三上": GradeSpec("國三上", 5, [ChapterSpec("相似形", ["縮放"])])}))
        assert not plan.errors
        assert [action.name for action in plan.actions[-3:]] == ["create", "create", "create"]
        assert str(plan.actions[-1]) == "Create a new tag '縮放' (order=1, parent=相似形)."

    def test_removed_nodes_are_left_alone(self):
        plan = self._plan(CurriculumSpec("math", [GradeSpec("國一上", 1, [])]))
        assert [action.name for action in plan.actions] == ["without_changes"]

    def test_reordered_chapter(self):
        # Positions are structural: swapped chapters are renamed in place
        plan = self._plan(_math_spec(**{"國一上": GradeSpec("國一上", 1, [
            ChapterSpec("一元一次方程式", ["等式的性質"]),
            ChapterSpec("整數", ["正數與負數", "數線"]),
        ])}))
        assert [action.name for action in plan.actions[:6]] == [
            "without_changes", "rename", "rename", "rename", "rename", "create",
        ]

    def test_position_conflict(self):
        spec = CurriculumSpec("chemistry", [
            GradeSpec("國二上", 99, []),
            GradeSpec("國二下", 99, []),
        ])
        plan = self._plan(spec)
        assert len(plan.errors) == 1
        error = plan.errors[0]
        assert isinstance(error, ImportActionConflict)
        assert "#2" in str(error)
        assert "action #1" in str(error)

    def test_unchanged_node_after_rename_conflicts(self):
        # 國三上 claims 國二上's position first, then 國二上 comes unchanged
        plan = self._plan(_math_spec(**{
            "國二上": GradeSpec("國三上", 3, [ChapterSpec("相似形", ["縮放"])]),
            "國二上 again": GradeSpec("國二上", 3, [ChapterSpec("乘法公式", ["平方差公式"])]),
        }))
        renamed = [action for action in plan.actions if action.item.name == "國三上"][0]
        unchanged = [action for action in plan.actions if action.item.name == "國二上"][0]
        assert isinstance(renamed, RenameTag)
        assert isinstance(unchanged, WithoutChanges)
        conflicts = [error for error in plan.errors if isinstance(error, ImportActionConflict)]
        assert conflicts
        assert f"Conflict with 'without_changes' (#{unchanged.index}) and action #{renamed.index}" in str(
            conflicts[0]
        )

    def test_unchanged_node_after_rename_is_not_executed(self):
        plan = self._plan(_math_spec(**{
            "國二上": GradeSpec("國三上", 3, []),
            "國二上 again": GradeSpec("國二上", 3, [ChapterSpec("乘法公式", ["平方差公式"])]),
        }))
        plan.execute()
        assert self.grade_8_first.children.count() == 1
        self.grade_8_first.refresh_from_db()
        assert self.grade_8_first.name == "國二上"

    @ddt.data("數\t線", "   ")
    def test_invalid_name(self, name):
        spec = CurriculumSpec("chemistry", [GradeSpec(name, 1, [])])
        plan = self._plan(spec)
        assert len(plan.errors) == 1
        assert isinstance(plan.errors[0], ImportActionError)

    def test_replace(self):
        plan = self._plan(_math_spec(), replace=True)
        assert plan.delete_count == 16
        assert all(isinstance(action, CreateTag) for action in plan.actions)
        assert "Delete 16 system tags" in plan.plan()

    def test_plan_output(self):
        spec = CurriculumSpec("chemistry", [
            GradeSpec("國二上", 3, [ChapterSpec("物質", ["混合物"])]),
            GradeSpec("國二下", 3, []),
        ])
        output = self._plan(spec).plan()
        assert output.startswith("Import plan for chemistry\n")
        assert "#1: Create a new grade '國二上' (order=3, parent=None)." in output
        assert "#2: Create a new chapter '物質' (order=1, parent=國二上)." in output
        assert "#3: Create a new tag '混合物' (order=1, parent=物質)." in output
        assert "Output errors" in output
        assert "Conflict with 'create' (#4) and action #1" in output

    def test_plan_only_writes_nothing(self):
        count = KnowledgeTag.objects.count()
        self._plan(_math_spec(**{"國三上": GradeSpec("國三上", 5, [])}))
        assert KnowledgeTag.objects.count() == count


class TestExecutePlan(TestImportExportMixin, TestCase):
    """
    Test for the execution of curriculum import plans
    """

    def test_execute_creates_tree(self):
        spec, _errors = YAMLParser.parse_import(curriculum_file(), "biology")
        plan = CurriculumImportPlan("biology")
        plan.generate_actions(spec)
        plan.execute()
        tags = KnowledgeTag.objects.filter(subject="biology")
        assert tags.count() == 12
        assert all(tag.is_system for tag in tags)
        leaf = tags.get(name="顯微鏡")
        assert leaf.get_lineage() == ["國一上", "生命的特性", "細胞", "顯微鏡"]
        assert leaf.order == 2
        assert tags.get(name="國二上").order == 99

    def test_execute_rename_keeps_id(self):
        plan = CurriculumImportPlan("math")
        plan.generate_actions(_math_spec(**{"高一上": GradeSpec("高一上", 7, [ChapterSpec("函數", ["線型函數"])])}))
        leaf_id = KnowledgeTag.objects.get(name="一次函數").id
        plan.execute()
        assert KnowledgeTag.objects.get(id=leaf_id).name == "線型函數"

    def test_execute_with_errors_does_nothing(self):
        spec = CurriculumSpec("chemistry", [GradeSpec("國二上", 3, []), GradeSpec("國二下", 3, [])])
        plan = CurriculumImportPlan("chemistry")
        plan.generate_actions(spec)
        plan.execute()
        assert not KnowledgeTag.objects.filter(subject="chemistry").exists()

    def test_execute_replace(self):
        plan = CurriculumImportPlan("math")
        plan.generate_actions(_math_spec(), replace=True)
        old_ids = set(KnowledgeTag.objects.filter(subject="math", is_system=True).values_list("id", flat=True))
        plan.execute()
        new_ids = set(KnowledgeTag.objects.filter(subject="math", is_system=True).values_list("id", flat=True))
        assert len(new_ids) == 16
        assert not old_ids & new_ids
        self.absolute_value.refresh_from_db()
        assert self.absolute_value.parent is None
