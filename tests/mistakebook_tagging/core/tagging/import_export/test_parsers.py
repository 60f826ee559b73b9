"""
Test for import/export parsers
"""
from __future__ import annotations

import json
from io import BytesIO

import ddt  # type: ignore[import]
import pytest
import yaml
from django.test.testcases import TestCase

from mistakebook_tagging.core.tagging.import_export import ParserFormat
from mistakebook_tagging.core.tagging.import_export.exceptions import (
    EmptyField,
    FieldError,
    InvalidFormat,
    InvalidShape,
)
from mistakebook_tagging.core.tagging.import_export.import_plan import ChapterSpec, SectionSpec
from mistakebook_tagging.core.tagging.import_export.parsers import JSONParser, YAMLParser, get_parser

from .mixins import TestImportExportMixin, curriculum_file


def _json_file(data) -> BytesIO:
    return BytesIO(json.dumps(data).encode())


class TestParser(TestCase):
    """
    Test for general parser functions
    """

    def test_get_parser(self):
        assert get_parser(ParserFormat.JSON) is JSONParser
        assert get_parser(ParserFormat.YAML) is YAMLParser

    def test_not_found_parser_format(self):
        with pytest.raises(ValueError):
            get_parser(".xlsx")  # type: ignore[arg-type]


class TestYAMLParser(TestCase):
    """
    Test for the .yaml parser
    """

    def test_sectioned_curriculum(self):
        spec, errors = YAMLParser.parse_import(curriculum_file(), "biology")
        assert not errors
        assert spec.subject == "biology"
        assert spec.sectioned
        assert [(grade.name, grade.order) for grade in spec.grades] == [("國一上", 1), ("國一下", 2), ("國二上", 99)]
        assert spec.grades[0].chapters[0] == ChapterSpec(
            name="生命的特性",
            sections=[
                SectionSpec(name="細胞", tags=["細胞的構造", "顯微鏡"]),
                SectionSpec(name="養分", tags=["酵素"]),
            ],
        )
        assert spec.grades[2].chapters == []

    def test_file_is_closed(self):
        file = curriculum_file()
        YAMLParser.parse_import(file, "biology")
        assert file.closed

    def test_invalid_yaml(self):
        spec, errors = YAMLParser.parse_import(BytesIO(b"curriculum: [unclosed"), "math")
        assert spec is None
        assert len(errors) == 1
        assert isinstance(errors[0], InvalidFormat)

    def test_subject_mismatch(self):
        spec, errors = YAMLParser.parse_import(curriculum_file(), "math")
        assert spec is None
        assert len(errors) == 1
        assert isinstance(errors[0], InvalidFormat)
        assert "biology" in str(errors[0])

    def test_flat_curriculum(self):
        file = BytesIO(yaml.safe_dump({
            "curriculum": {"國一上": [{"chapter": "整數", "tags": ["數線", 1]}]},
        }, allow_unicode=True).encode())
        spec, errors = YAMLParser.parse_import(file, "math")
        assert not errors
        assert not spec.sectioned
        assert spec.grades[0].chapters == [ChapterSpec(name="整數", tags=["數線", "1"])]


@ddt.ddt
class TestJSONParser(TestCase):
    """
    Test for the .json parser and the shape validation
    """

    def test_invalid_json(self):
        spec, errors = JSONParser.parse_import(BytesIO(b"{'curriculum'"), "math")
        assert spec is None
        assert isinstance(errors[0], InvalidFormat)

    @ddt.data(
        ([], InvalidFormat),
        ({}, FieldError),
        ({"curriculum": {}}, EmptyField),
        ({"curriculum": ["國一上"]}, InvalidShape),
        ({"curriculum": {"國一上": "整數"}}, InvalidShape),
        ({"curriculum": {"國一上": ["整數"]}}, InvalidShape),
        ({"curriculum": {"國一上": [{"tags": []}]}}, FieldError),
        ({"curriculum": {"國一上": [{"chapter": " ", "tags": []}]}}, EmptyField),
        ({"curriculum": {"國一上": [{"chapter": "整數"}]}}, FieldError),
        ({"curriculum": {"國一上": [{"chapter": "整數", "tags": "數線"}]}}, InvalidShape),
        ({"curriculum": {"國一上": [{"chapter": "整數", "tags": ["數線", ""]}]}}, EmptyField),
        ({"curriculum": {"國一上": [{"chapter": "整數", "tags": [{"name": "數線"}]}]}}, InvalidShape),
        ({"curriculum": {"國一上": [{"chapter": "整數", "sections": []}]}}, InvalidShape),
        ({"sectioned": "yes", "curriculum": {"國一上": []}}, InvalidShape),
        ({"grade_order": ["國一上"], "curriculum": {"國一上": []}}, InvalidShape),
        ({"grade_order": {"國一上": "first"}, "curriculum": {"國一上": []}}, InvalidShape),
        ({"sectioned": True, "curriculum": {"國一上": [{"chapter": "整數", "tags": []}]}}, InvalidShape),
        ({"sectioned": True, "curriculum": {"國一上": [{"chapter": "整數", "sections": ["正負數"]}]}}, InvalidShape),
        ({"sectioned": True, "curriculum": {"國一上": [{"chapter": "整數", "sections": [{"tags": []}]}]}}, FieldError),
    )
    @ddt.unpack
    def test_shape_errors(self, data, error_class):
        spec, errors = JSONParser.parse_import(_json_file(data), "math")
        assert spec is None
        assert errors
        assert isinstance(errors[0], error_class)

    def test_errors_are_collected(self):
        spec, errors = JSONParser.parse_import(_json_file({
            "curriculum": {
                "國一上": [{"chapter": "", "tags": []}, {"chapter": "整數"}],
                "國一下": [{"chapter": "方程式", "tags": ["", "移項"]}],
            },
        }), "math")
        assert spec is None
        assert len(errors) == 3
        assert "curriculum/國一上/1" in str(errors[0])
        assert "curriculum/國一上/2" in str(errors[1])
        assert "curriculum/國一下/1/tags/1" in str(errors[2])

    def test_grade_with_null_chapters(self):
        spec, errors = JSONParser.parse_import(_json_file({"curriculum": {"高三": None}}), "physics")
        assert not errors
        assert spec.grades[0].name == "高三"
        assert spec.grades[0].chapters == []


class TestExport(TestImportExportMixin, TestCase):
    """
    Test for exporting the system tree
    """

    def test_export_flat(self):
        data = yaml.safe_load(YAMLParser.export("math"))
        assert data["subject"] == "math"
        assert data["sectioned"] is False
        assert data["grade_order"] == {"國一上": 1, "國一下": 2, "國二上": 3, "高一上": 7}
        assert data["curriculum"]["國一上"] == [
            {"chapter": "整數", "tags": ["正數與負數", "數線"]},
            {"chapter": "一元一次方程式", "tags": ["等式的性質"]},
        ]
        # Custom tags are not part of the curriculum
        assert "絕對值" not in YAMLParser.export("math")

    def test_export_grade_without_chapters(self):
        data = json.loads(JSONParser.export("physics"))
        assert data["curriculum"] == {"高一上": []}

    def test_export_can_be_parsed(self):
        exported = JSONParser.export("math")
        spec, errors = JSONParser.parse_import(BytesIO(exported.encode()), "math")
        assert not errors
        assert [grade.name for grade in spec.grades] == ["國一上", "國一下", "國二上", "高一上"]
        assert [grade.order for grade in spec.grades] == [1, 2, 3, 7]
