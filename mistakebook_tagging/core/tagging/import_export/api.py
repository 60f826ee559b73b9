"""
Curriculum import/export API functions

Import
------------

In this functionality we have the following pipeline with the following classes:

Parser.parse_import() -> CurriculumImportPlan.generate_actions() -> [ImportActions]
-> CurriculumImportPlan.plan() -> CurriculumImportPlan.execute()

Parsers are in charge of reading the input file, making the respective
verifications of its shape and returning a CurriculumSpec.
For more information see parsers.py

CurriculumImportPlan walks the CurriculumSpec top-down. Every node is compared
with the system tag stored at the same structural position (subject, parent,
order), and gets a create, rename or "without changes" action.
For more information see actions.py

You can run `plan()` to see the actions and errors or you can run `execute()`
to execute each action. Executing writes each node through
`api.upsert_system_tag`, one node at a time, so an interrupted import keeps
what it wrote and can simply be run again.

Export
----------

The export only uses Parsers. Calls the respective function and
returns a string with the data.
"""
from __future__ import annotations

import logging
from typing import BinaryIO

from django.utils.translation import gettext as _

from ..models import CurriculumImportTask, CurriculumImportTaskState
from .import_plan import CurriculumImportPlan, CurriculumSpec
from .parsers import ParserFormat, get_parser

log = logging.getLogger(__name__)


def import_curriculum(
    subject: str,
    file: BinaryIO,
    parser_format: ParserFormat,
    replace=False,
    plan_only=False,
) -> tuple[bool, CurriculumImportTask, CurriculumImportPlan | None]:
    """
    Execute the necessary actions to import the curriculum in `file`

    You can read the docstring of the top for more info about the
    modular architecture.

    It creates a CurriculumImportTask to keep logs of the execution
    of each import step and the current status.
    There can only be one task in progress at a time per subject

    Set `replace` to True to delete all the subject's system tags and rebuild
    them from the file. Custom tags are kept; those under a deleted tag
    become roots.

    Set `plan_only` to True to only generate the actions and not execute them.
    """
    task = _create_import_task(subject)

    try:
        task.add_log(_("Starting to load curriculum data"))
        parser = get_parser(parser_format)
        spec, errors = parser.parse_import(file, subject)

        if errors:
            task.fail(*[str(error) for error in errors])
            return False, task, None

        task.add_log(_("Load data finished"))
    except Exception as exception:  # pylint: disable=broad-exception-caught
        log.exception("Curriculum import for %s failed while parsing", subject)
        task.fail(repr(exception))
        return False, task, None

    return _plan_and_execute(task, spec, replace, plan_only)


def import_curriculum_spec(
    spec: CurriculumSpec,
    replace=False,
    plan_only=False,
) -> tuple[bool, CurriculumImportTask, CurriculumImportPlan | None]:
    """
    Same as `import_curriculum`, for a curriculum already in memory.
    """
    task = _create_import_task(spec.subject)
    task.add_log(_("Load data finished"))
    return _plan_and_execute(task, spec, replace, plan_only)


def _plan_and_execute(
    task: CurriculumImportTask,
    spec: CurriculumSpec,
    replace: bool,
    plan_only: bool,
) -> tuple[bool, CurriculumImportTask, CurriculumImportPlan | None]:
    plan = None
    try:
        task.set_status(CurriculumImportTaskState.PLANNING, _("Starting plan actions"))
        plan = CurriculumImportPlan(spec.subject)
        plan.generate_actions(spec, replace)
        task.log_plan(plan)

        if plan.errors:
            # The errors are already part of the logged plan
            task.fail()
            return False, task, plan

        if not plan_only:
            task.set_status(CurriculumImportTaskState.EXECUTING, _("Starting execute actions"))
            plan.execute(task)

        task.set_status(CurriculumImportTaskState.SUCCESS, _("Execution finished"))
        log.info("Curriculum import for %s finished (%s actions)", spec.subject, len(plan.actions))
        return True, task, plan
    except Exception as exception:  # pylint: disable=broad-exception-caught
        # Nodes written before the failure stay; the task keeps the log.
        log.exception("Curriculum import for %s failed", spec.subject)
        task.fail(repr(exception))
        return False, task, plan


def get_last_import_status(subject: str) -> CurriculumImportTaskState:
    """
    Get status of the last import task of the given subject
    """
    task = _get_last_import_task(subject)
    if task is None:
        raise ValueError(_("No import task was created yet."))
    return CurriculumImportTaskState(task.status)


def get_last_import_log(subject: str) -> str:
    """
    Get logs of the last import task of the given subject
    """
    task = _get_last_import_task(subject)
    if task is None:
        raise ValueError(_("No import task was created yet."))
    return task.log


def export_curriculum(subject: str, output_format: ParserFormat) -> str:
    """
    Returns a string with the system tag tree of the given subject
    """
    parser = get_parser(output_format)
    return parser.export(subject)


def _create_import_task(subject: str) -> CurriculumImportTask:
    """
    Creates the import task, if no other import of the subject is in progress
    """
    last_task = _get_last_import_task(subject)
    if last_task and last_task.in_progress:
        raise ValueError(
            _(
                "There is an import task running. "
                "Only one task per subject can be created at a time."
            )
        )
    return CurriculumImportTask.create(subject)


def _get_last_import_task(subject: str) -> CurriculumImportTask | None:
    """
    Get the last import task for the given subject
    """
    return (
        CurriculumImportTask.objects.filter(subject=subject)
        .order_by("-creation_date", "-id")
        .first()
    )
