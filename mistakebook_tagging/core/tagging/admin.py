"""
Tagging app admin
"""
from __future__ import annotations

from django.contrib import admin

from .models import CurriculumImportTask, KnowledgeTag


@admin.register(KnowledgeTag)
class KnowledgeTagAdmin(admin.ModelAdmin):
    """
    Admin definition for KnowledgeTag model
    """
    autocomplete_fields = ["parent"]
    search_fields = ["name"]
    list_display = ["__str__", "subject", "is_system", "order"]
    list_filter = ["subject", "is_system"]

    def has_add_permission(self, request):
        """
        System tags come from curriculum imports, custom tags from the notebook.
        Don't create KnowledgeTags using the django admin.
        """
        return False


@admin.register(CurriculumImportTask)
class CurriculumImportTaskAdmin(admin.ModelAdmin):
    """
    Read-only view of curriculum import logs
    """
    list_display = ["id", "subject", "status", "creation_date"]
    list_filter = ["subject", "status"]
    readonly_fields = ["subject", "status", "log", "creation_date"]

    def has_add_permission(self, request):
        return False
