"""
Django metadata for the Notebook Django application.
"""
from django.apps import AppConfig


class NotebookConfig(AppConfig):
    """
    Configuration for the Notebook Django application.
    """

    name = "mistakebook.apps.notebook"
    verbose_name = "Mistakebook > Notebook"
    default_auto_field = "django.db.models.BigAutoField"
    label = "mb_notebook"
