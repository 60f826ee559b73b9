"""
Mixins for tagging tests
"""
from __future__ import annotations

from mistakebook_tagging.core.tagging.models import KnowledgeTag


def get_tag(name: str, subject: str = "math", is_system: bool = True) -> KnowledgeTag:
    """
    Fetches and returns the first tag with the given name.
    """
    return KnowledgeTag.objects.filter(name=name, subject=subject, is_system=is_system).order_by("id").first()


class TestTagTreeMixin:
    """
    Loads a small math curriculum (and a physics grade without chapters):

    國一上 (1)            國一下 (2)                    國二上 (3)       高一上 (7)
      整數 (1)              二元一次聯立方程式 (1)         乘法公式 (1)      函數 (1)
        正數與負數 (1)          代入消去法 (1)                平方差公式 (1)    一次函數 (1)
        數線 (2)                數線 (2)
      一元一次方程式 (2)
        等式的性質 (1)
      絕對值 (custom)
    """

    fixtures = ["tests/mistakebook_tagging/core/fixtures/tagging.yaml"]

    def setUp(self):
        super().setUp()
        self.grade_7_first = get_tag("國一上")
        self.grade_7_second = get_tag("國一下")
        self.grade_8_first = get_tag("國二上")
        self.grade_10_first = get_tag("高一上")
        self.integers = get_tag("整數")
        self.number_line = get_tag("數線")
        self.equations = get_tag("一元一次方程式")
        self.absolute_value = get_tag("絕對值", is_system=False)
        self.physics_root = get_tag("高一上", subject="physics")
