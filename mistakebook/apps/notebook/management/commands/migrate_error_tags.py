"""
Django management command to link legacy knowledge-point text to knowledge tags.
"""
from django.core.management.base import BaseCommand

from mistakebook.apps.notebook.api import migrate_legacy_knowledge_points


class Command(BaseCommand):
    """
    Turn the knowledge points stored as text on ErrorItems into tag links.
    """
    help = "Link the legacy knowledge points of every ErrorItem to knowledge tags."

    def handle(self, *args, **options):
        result = migrate_legacy_knowledge_points()
        self.stdout.write(self.style.SUCCESS(
            f"{result.processed} items processed ({result.skipped} without knowledge points), "
            f"{result.tags_created} tags created, {result.links_created} links created"
        ))
