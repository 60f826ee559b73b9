"""
Django admin for the notebook
"""
from django.contrib import admin

from .models import ErrorItem


@admin.register(ErrorItem)
class ErrorItemAdmin(admin.ModelAdmin):
    """
    Admin definition for ErrorItem model
    """
    list_display = ["__str__", "subject", "grade_semester", "review_stage", "next_review_at", "mastered"]
    list_filter = ["subject", "mastered"]
    search_fields = ["notebook", "question_text"]
    autocomplete_fields = ["tags"]
    readonly_fields = ["created"]
