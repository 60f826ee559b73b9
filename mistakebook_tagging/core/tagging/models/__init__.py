"""
Core models for Tagging
"""
from .base import KnowledgeTag, Subject
from .import_export import CurriculumImportTask, CurriculumImportTaskState
