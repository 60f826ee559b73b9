"""
Mixins for ImportExport tests
"""
from __future__ import annotations

from io import BytesIO

from ..mixins import TestTagTreeMixin

CURRICULUM_FILE = "tests/mistakebook_tagging/core/fixtures/curriculum_biology.yaml"


def curriculum_file() -> BytesIO:
    """
    The biology curriculum: 3 grades, 12 tags in total.
    """
    with open(CURRICULUM_FILE, "rb") as file:
        return BytesIO(file.read())


class TestImportExportMixin(TestTagTreeMixin):
    """
    Mixin that loads the base data for import/export tests
    """
