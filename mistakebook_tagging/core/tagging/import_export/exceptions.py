"""
Exceptions for curriculum import/export actions
"""
from __future__ import annotations

import typing

from django.utils.translation import gettext as _

if typing.TYPE_CHECKING:
    from .actions import ImportAction


class TagImportError(Exception):
    """
    Base exception for import
    """

    def __init__(self, message: str = ""):
        super().__init__()
        self.message = message

    def __str__(self):
        return str(self.message)

    def __repr__(self):
        return f"{self.__class__.__name__}({str(self)})"


class TagParserError(TagImportError):
    """
    Base exception for parsers

    `path` locates the offending node, e.g. "curriculum/國一上/2".
    """

    def __init__(self, path: str | None, **kargs):  # pylint: disable=unused-argument
        super().__init__()
        self.path = path
        self.message = _("Import parser error on {path}").format(path=path)


class InvalidFormat(TagParserError):
    """
    The file can't be read in the declared format, or its top level is wrong
    """

    def __init__(self, path: str | None, input_format: str, message: str, **kargs):
        super().__init__(path, **kargs)
        self.message = _("Invalid '{format}' format: {message}").format(format=input_format, message=message)


class FieldError(TagParserError):
    """
    A required field is missing
    """

    def __init__(self, path: str | None, field: str, **kargs):
        super().__init__(path, **kargs)
        self.message = _("Missing '{field}' field on {path}").format(field=field, path=path)


class EmptyField(TagParserError):
    """
    A required field is present but empty
    """

    def __init__(self, path: str | None, field: str, **kargs):
        super().__init__(path, **kargs)
        self.message = _("Empty '{field}' field on {path}").format(field=field, path=path)


class InvalidShape(TagParserError):
    """
    A chapter doesn't have the shape declared by the `sectioned` flag, or a
    value has the wrong type
    """

    def __init__(self, path: str | None, message: str, **kargs):
        super().__init__(path, **kargs)
        self.message = _("Invalid shape on {path}: {message}").format(path=path, message=message)


class ImportActionError(TagImportError):
    """
    Base exception for actions
    """

    def __init__(self, action: ImportAction, message: str, **kargs):
        super().__init__(**kargs)
        self.message = _(
            "Action error in '{name}' (#{index}): {message}"
        ).format(name=action.name, index=action.index, message=message)


class ImportActionConflict(ImportActionError):
    """
    Two actions of the same plan target the same structural position
    """

    def __init__(
        self,
        action: ImportAction,
        conflict_action_index: int,
        message: str,
        **kargs,
    ):
        super().__init__(action, message, **kargs)
        self.message = _(
            "Conflict with '{action_name}' (#{action_index}) "
            "and action #{conflict_action_index}: {message}"
        ).format(
            action_name=action.name,
            action_index=action.index,
            conflict_action_index=conflict_action_index,
            message=message,
        )
