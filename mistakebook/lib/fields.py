"""
Field helpers shared by the Mistakebook apps.

Tag names are compared with exact string equality everywhere in the tagging
code (structural upserts, grade resolution, custom tag lookup), so the columns
that hold them must compare the same way on every database we run on. SQLite
and Postgres are case-sensitive out of the box, MySQL is not, so we attach a
binary collation per database vendor.
"""
from __future__ import annotations

from django.db import models

# Binary (exact match) collation for each database vendor we support.
EXACT_MATCH_COLLATIONS = {
    "sqlite": "BINARY",
    "mysql": "utf8mb4_bin",
}


class MultiCollationCharField(models.CharField):
    """
    CharField that picks its collation from ``connection.vendor``.

    Django's own ``db_collation`` takes a single value, which would tie the
    migration files to one backend.
    """

    def __init__(self, *args, db_collations=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.db_collations = db_collations or {}

    def db_parameters(self, connection):
        db_params = super().db_parameters(connection)
        if connection.vendor in self.db_collations:
            db_params["collation"] = self.db_collations[connection.vendor]
        return db_params

    def deconstruct(self):
        name, path, args, kwargs = super().deconstruct()
        if self.db_collations:
            kwargs["db_collations"] = self.db_collations
        return name, path, args, kwargs


def exact_char_field(**kwargs) -> MultiCollationCharField:
    """
    Return a case-sensitive ``MultiCollationCharField``.

    "Abc" and "abc" are distinct values, both for lookups and for any unique
    index built on the column. Any ``CharField`` argument may be overridden.
    """
    final_kwargs = {
        "null": False,
        "db_collations": EXACT_MATCH_COLLATIONS,
    }
    final_kwargs.update(kwargs)
    return MultiCollationCharField(**final_kwargs)
