"""
Celery tasks for curriculum import and export.

Arguments and results are plain values, so the tasks work with any result
backend and the default JSON serializer: the curriculum travels as text, the
format as its `ParserFormat` value (".yaml", ".json") and the import result
as the id of its CurriculumImportTask.
"""
from __future__ import annotations

import logging
from io import BytesIO

from celery import shared_task  # type: ignore[import]

import mistakebook_tagging.core.tagging.import_export.api as import_export_api

from .parsers import ParserFormat

log = logging.getLogger(__name__)


@shared_task
def import_curriculum_task(
    subject: str,
    content: str | bytes,
    parser_format: str,
    replace=False,
    plan_only=False,
) -> tuple[bool, int]:
    """
    Imports the curriculum in `content` and returns (ok, import task id).

    The log of the import is on the CurriculumImportTask.
    """
    if isinstance(content, str):
        content = content.encode("utf-8")
    ok, task, _plan = import_export_api.import_curriculum(
        subject,
        BytesIO(content),
        ParserFormat(parser_format),
        replace=replace,
        plan_only=plan_only,
    )
    log.info("Curriculum import task for %s ended (ok=%s, task=%s)", subject, ok, task.id)
    return ok, task.id


@shared_task
def export_curriculum_task(subject: str, output_format: str) -> str:
    return import_export_api.export_curriculum(subject, ParserFormat(output_format))
