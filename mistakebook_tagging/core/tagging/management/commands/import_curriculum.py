"""
Django management command to import a subject's curriculum into the tag tree.
"""
import logging
import os

from django.core.management import CommandError
from django.core.management.base import BaseCommand

from mistakebook_tagging.core.tagging.import_export import ParserFormat
from mistakebook_tagging.core.tagging.import_export.api import import_curriculum
from mistakebook_tagging.core.tagging.models import Subject

logger = logging.getLogger(__name__)

FORMATS_BY_EXTENSION = {
    ".json": ParserFormat.JSON,
    ".yaml": ParserFormat.YAML,
    ".yml": ParserFormat.YAML,
}


class Command(BaseCommand):
    """
    Import a curriculum file (.json / .yaml) as the subject's system tags.
    """
    help = "Import a curriculum file as the subject's system tags."

    def add_arguments(self, parser):
        parser.add_argument("subject", type=str, choices=Subject.values, help="Subject key, e.g. math.")
        parser.add_argument("file_name", type=str, help="Path of the .json or .yaml curriculum file.")
        parser.add_argument(
            "--replace",
            action="store_true",
            help="Delete the subject's system tags and rebuild them. Custom tags are kept.",
        )
        parser.add_argument(
            "--plan-only",
            action="store_true",
            help="Only print the import plan, without writing anything.",
        )

    def handle(self, *args, **options):
        subject = options["subject"]
        file_name = options["file_name"]
        extension = os.path.splitext(file_name)[1].lower()
        parser_format = FORMATS_BY_EXTENSION.get(extension)
        if parser_format is None:
            raise CommandError("Curriculum file name must end with .json, .yaml or .yml")

        try:
            with open(file_name, "rb") as file:
                ok, task, plan = import_curriculum(
                    subject,
                    file,
                    parser_format,
                    replace=options["replace"],
                    plan_only=options["plan_only"],
                )
        except FileNotFoundError as exc:
            raise CommandError(f"Curriculum file {file_name} not found: {exc}") from exc
        except ValueError as exc:
            raise CommandError(str(exc)) from exc

        if plan is not None:
            self.stdout.write(plan.plan())
        if not ok:
            logger.error("Import of %s into %s failed", file_name, subject)
            raise CommandError(f"Import failed:\n{task.log}")
        self.stdout.write(self.style.SUCCESS(f"{file_name} imported into {subject}"))
