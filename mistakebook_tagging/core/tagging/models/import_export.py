"""
Models used by the curriculum import tasks.
"""
from datetime import datetime

from django.db import models
from django.utils.translation import gettext as _
from django.utils.translation import gettext_lazy

from .base import Subject


class CurriculumImportTaskState(models.TextChoices):
    LOADING_DATA = "loading_data", gettext_lazy("Loading Data")
    PLANNING = "planning", gettext_lazy("Planning")
    EXECUTING = "executing", gettext_lazy("Executing")
    SUCCESS = "success", gettext_lazy("Success")
    ERROR = "error", gettext_lazy("Error")


class CurriculumImportTask(models.Model):
    """
    State and log of one curriculum import for a subject.

    Each node written by an import is committed on its own, so the log is the
    record of how far a failed import got before it stopped.
    """

    id = models.BigAutoField(primary_key=True)
    subject = models.CharField(
        max_length=32,
        choices=Subject.choices,
        help_text=gettext_lazy("Subject whose curriculum is being imported"),
    )
    log = models.TextField(blank=True, default="", help_text=gettext_lazy("Import progress, one line per step"))
    status = models.CharField(max_length=20, choices=CurriculumImportTaskState.choices)
    creation_date = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["subject", "-creation_date"], name="mb_tagging_task_subject_idx"),
        ]

    @classmethod
    def create(cls, subject: str) -> "CurriculumImportTask":
        task = cls(subject=subject, status=CurriculumImportTaskState.LOADING_DATA.value)
        task.add_log(_("Import task created"))
        return task

    @property
    def in_progress(self) -> bool:
        return self.status not in {
            CurriculumImportTaskState.SUCCESS.value,
            CurriculumImportTaskState.ERROR.value,
        }

    def add_log(self, message: str, save=True):
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        self.log += f"[{timestamp}] {message}\n"
        if save:
            self.save()

    def set_status(self, status: CurriculumImportTaskState, message: str):
        """
        Moves the task to `status`, logging `message` with the change.
        """
        self.add_log(message, save=False)
        self.status = status.value
        self.save()

    def fail(self, *messages: str):
        """
        Logs each message and ends the task with ERROR.
        """
        for message in messages:
            self.add_log(message, save=False)
        self.status = CurriculumImportTaskState.ERROR.value
        self.save()

    def log_plan(self, plan):
        self.add_log(_("Plan finished"), save=False)
        self.log += f"\n{plan.plan()}\n"
        self.save()

    def log_replace(self, deleted_count: int, detached_count: int):
        self.add_log(
            _("Deleted {deleted} system tags, detached {detached} custom tags").format(
                deleted=deleted_count, detached=detached_count,
            )
        )
