"""
Parsers to import and export curricula
"""
from __future__ import annotations

import json
from enum import Enum
from typing import Any, BinaryIO

import yaml
from django.utils.translation import gettext as _

from .. import api as tagging_api
from ..conf import get_setting
from ..tree import TreeNode
from .exceptions import EmptyField, FieldError, InvalidFormat, InvalidShape, TagParserError
from .import_plan import ChapterSpec, CurriculumSpec, GradeSpec, SectionSpec


class ParserFormat(Enum):
    """
    Format of curriculum files
    """

    JSON = ".json"
    YAML = ".yaml"


class Parser:
    """
    Base class to create a parser

    This contains the base functions to convert between a file format like
    JSON/YAML and a CurriculumSpec. It can convert in both directions, for
    use during import or export.

    Every format holds the same document:
    ```
    subject: math
    sectioned: true
    grade_order: {國一上: 1, 國一下: 2}
    curriculum:
      國一上:
        - chapter: 整數
          sections:
            - section: 正負數
              tags: [正數與負數, 數線]
    ```
    In a flat curriculum (`sectioned` false or absent) chapters have `tags`
    instead of `sections`. A grade may have no chapters at all.

    To create a new Parser you need to implement `_load_data` and `_export_data`
    """

    # Set the format associated to the parser
    format: ParserFormat

    @classmethod
    def parse_import(cls, file: BinaryIO, subject: str) -> tuple[CurriculumSpec | None, list[TagParserError]]:
        """
        Parse the curriculum in file and returns it ready for use in
        CurriculumImportPlan

        Top function that calls `_load_data` and `_parse_curriculum`.
        Handle errors returned by both functions.
        """
        try:
            data, load_errors = cls._load_data(file)
            if load_errors:
                return None, load_errors
        finally:
            file.close()

        return cls._parse_curriculum(data, subject)

    @classmethod
    def export(cls, subject: str) -> str:
        """
        Returns the subject's system tags as a curriculum document.
        The output file can be used to recreate the tree with `parse_import`
        """
        data = cls._load_curriculum_for_export(subject)
        return cls._export_data(data)

    @classmethod
    def _load_data(cls, file: BinaryIO) -> tuple[Any, list[TagParserError]]:
        """
        Each parser implements this function according to its format.
        This function reads the file and returns the loaded document.

        This function does not do field validations, those are done in
        `_parse_curriculum`
        """
        raise NotImplementedError

    @classmethod
    def _export_data(cls, data: dict) -> str:
        """
        Each parser implements this function according to its format.

        It must be implemented in such a way that the output of
        this function works with _load_data
        """
        raise NotImplementedError

    @classmethod
    def _parse_curriculum(cls, data: Any, subject: str) -> tuple[CurriculumSpec | None, list[TagParserError]]:
        """
        Validates the loaded document and builds the CurriculumSpec.

        All errors found are returned together; the CurriculumSpec is None if there is
        any error.
        """
        if not isinstance(data, dict):
            return None, [
                InvalidFormat(path=None, input_format=cls.format.value, message=_("The root must be a mapping"))
            ]

        errors: list[TagParserError] = []

        file_subject = data.get("subject")
        if file_subject is not None and str(file_subject) != subject:
            errors.append(InvalidFormat(
                path="subject",
                input_format=cls.format.value,
                message=_("The file is for subject '{file_subject}', not '{subject}'").format(
                    file_subject=file_subject, subject=subject,
                ),
            ))

        sectioned = data.get("sectioned", False)
        if not isinstance(sectioned, bool):
            errors.append(InvalidShape(path="sectioned", message=_("must be true or false")))
            sectioned = False

        grade_order = data.get("grade_order") or {}
        if not isinstance(grade_order, dict) or not all(
            isinstance(rank, int) and not isinstance(rank, bool) for rank in grade_order.values()
        ):
            errors.append(InvalidShape(
                path="grade_order", message=_("must map grade names to integer ranks"),
            ))
            grade_order = {}
        grade_order = {str(name): rank for name, rank in grade_order.items()}

        if "curriculum" not in data:
            errors.append(FieldError(path=None, field="curriculum"))
            return None, errors
        curriculum = data["curriculum"]
        if not curriculum:
            errors.append(EmptyField(path=None, field="curriculum"))
            return None, errors
        if not isinstance(curriculum, dict):
            errors.append(InvalidShape(path="curriculum", message=_("expected a mapping of grades")))
            return None, errors

        default_order = get_setting("DEFAULT_GRADE_ORDER")
        grades = []
        for raw_name, chapters_data in curriculum.items():
            path = f"curriculum/{raw_name}"
            grade_name = str(raw_name).strip()
            if not grade_name:
                errors.append(EmptyField(path=path, field="grade"))
                continue
            if chapters_data is None:
                chapters_data = []
            if not isinstance(chapters_data, list):
                errors.append(InvalidShape(path=path, message=_("expected a list of chapters")))
                continue

            chapters = []
            for index, chapter_data in enumerate(chapters_data, start=1):
                chapter, chapter_errors = cls._parse_chapter(chapter_data, f"{path}/{index}", sectioned)
                errors.extend(chapter_errors)
                if chapter:
                    chapters.append(chapter)

            grades.append(GradeSpec(
                name=grade_name,
                order=grade_order.get(grade_name, default_order),
                chapters=chapters,
            ))

        if errors:
            return None, errors
        return CurriculumSpec(subject=subject, grades=grades, sectioned=sectioned), []

    @classmethod
    def _parse_chapter(
        cls, data: Any, path: str, sectioned: bool
    ) -> tuple[ChapterSpec | None, list[TagParserError]]:
        """
        Validates a chapter against the shape declared by `sectioned`
        """
        if not isinstance(data, dict):
            return None, [InvalidShape(path=path, message=_("expected a mapping with a 'chapter' field"))]

        errors: list[TagParserError] = []
        name, error = cls._required_text(data, "chapter", path)
        if error:
            errors.append(error)

        if not sectioned:
            if "sections" in data:
                errors.append(InvalidShape(
                    path=path, message=_("sections are only allowed in a sectioned curriculum"),
                ))
            tags, tag_errors = cls._tag_list(data, path)
            errors.extend(tag_errors)
            if errors:
                return None, errors
            return ChapterSpec(name=name, tags=tags), []

        if "tags" in data:
            errors.append(InvalidShape(
                path=path, message=_("tags must be grouped in sections in a sectioned curriculum"),
            ))
        sections: list[SectionSpec] = []
        if "sections" not in data:
            errors.append(FieldError(path=path, field="sections"))
        elif not isinstance(data["sections"], list):
            errors.append(InvalidShape(path=path, message=_("expected a list of sections")))
        else:
            for index, section_data in enumerate(data["sections"], start=1):
                section_path = f"{path}/{index}"
                if not isinstance(section_data, dict):
                    errors.append(InvalidShape(
                        path=section_path, message=_("expected a mapping with a 'section' field"),
                    ))
                    continue
                section_name, error = cls._required_text(section_data, "section", section_path)
                if error:
                    errors.append(error)
                tags, tag_errors = cls._tag_list(section_data, section_path)
                errors.extend(tag_errors)
                if section_name is not None:
                    sections.append(SectionSpec(name=section_name, tags=tags))

        if errors:
            return None, errors
        return ChapterSpec(name=name, sections=sections), []

    @classmethod
    def _required_text(cls, data: dict, field: str, path: str) -> tuple[str | None, TagParserError | None]:
        if field not in data:
            return None, FieldError(path=path, field=field)
        value = data[field]
        if value is None or not str(value).strip():
            return None, EmptyField(path=path, field=field)
        return str(value).strip(), None

    @classmethod
    def _tag_list(cls, data: dict, path: str) -> tuple[list[str], list[TagParserError]]:
        if "tags" not in data:
            return [], [FieldError(path=path, field="tags")]
        values = data["tags"] or []
        if not isinstance(values, list):
            return [], [InvalidShape(path=path, message=_("expected a list of tags"))]

        tags = []
        errors: list[TagParserError] = []
        for index, value in enumerate(values, start=1):
            tag_path = f"{path}/tags/{index}"
            if not isinstance(value, (str, int, float)) or isinstance(value, bool):
                errors.append(InvalidShape(path=tag_path, message=_("expected a tag name")))
            elif not str(value).strip():
                errors.append(EmptyField(path=tag_path, field="tags"))
            else:
                tags.append(str(value).strip())
        return tags, errors

    @classmethod
    def _load_curriculum_for_export(cls, subject: str) -> dict:
        """
        Returns the subject's system tree as a curriculum document.

        The document is sectioned if any tag sits below a section, i.e. at the
        fourth level of the tree.
        """
        tree = tagging_api.build_tag_tree(subject)
        sectioned = False
        stack: list[tuple[TreeNode, int]] = [(root, 0) for root in tree.roots]
        while stack:
            node, depth = stack.pop()
            if depth >= 3:
                sectioned = True
                break
            stack.extend((child, depth + 1) for child in node.children)

        def names(node: TreeNode) -> list[str]:
            return [child.name for child in node.children]

        curriculum = {}
        for root in tree.roots:
            chapters = []
            for chapter in root.children:
                if sectioned:
                    chapters.append({
                        "chapter": chapter.name,
                        "sections": [
                            {"section": section.name, "tags": names(section)} for section in chapter.children
                        ],
                    })
                else:
                    chapters.append({"chapter": chapter.name, "tags": names(chapter)})
            curriculum[root.name] = chapters

        return {
            "subject": subject,
            "sectioned": sectioned,
            "grade_order": {root.name: root.order for root in tree.roots},
            "curriculum": curriculum,
        }


class JSONParser(Parser):
    """
    Parser used with .json files
    """

    format = ParserFormat.JSON

    @classmethod
    def _load_data(cls, file: BinaryIO) -> tuple[Any, list[TagParserError]]:
        file.seek(0)
        try:
            return json.load(file), []
        except ValueError as error:
            return None, [InvalidFormat(path=None, input_format=cls.format.value, message=str(error))]

    @classmethod
    def _export_data(cls, data: dict) -> str:
        return json.dumps(data, ensure_ascii=False, indent=2)


class YAMLParser(Parser):
    """
    Parser used with .yaml files. This is the format the curricula are
    authored in.
    """

    format = ParserFormat.YAML

    @classmethod
    def _load_data(cls, file: BinaryIO) -> tuple[Any, list[TagParserError]]:
        file.seek(0)
        try:
            return yaml.safe_load(file), []
        except yaml.YAMLError as error:
            return None, [InvalidFormat(path=None, input_format=cls.format.value, message=str(error))]

    @classmethod
    def _export_data(cls, data: dict) -> str:
        return yaml.safe_dump(data, allow_unicode=True, sort_keys=False)


# Add parsers here
_parsers = [JSONParser, YAMLParser]


def get_parser(parser_format: ParserFormat) -> type[Parser]:
    """
    Get the parser for the respective `format`

    Raise `ValueError` if no parser found
    """
    for parser in _parsers:
        if parser_format == parser.format:
            return parser

    raise ValueError(_("Parser not found for format {parser_format}").format(parser_format=parser_format))
