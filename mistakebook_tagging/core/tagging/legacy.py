"""
Parsing of legacy knowledge-point text.

Before the tag tree existed, each mistake stored its knowledge points as a
loose string: usually a JSON list, sometimes a comma-separated string (ASCII or
full-width commas). Both are normalized to a list of trimmed, non-empty names.
"""
from __future__ import annotations

import json
import logging
import re

log = logging.getLogger(__name__)

_DELIMITERS = re.compile(r"[,，、;；]")


def parse_knowledge_points(raw: str | list | None) -> list[str]:
    """
    Tag names contained in a legacy knowledge-point value.

    Unparsable or empty input yields an empty list, never an error. Duplicates
    are dropped, keeping the first occurrence.
    """
    if raw is None:
        return []

    if isinstance(raw, list):
        values = raw
    else:
        text = str(raw).strip()
        if not text:
            return []
        try:
            parsed = json.loads(text)
        except ValueError:
            values = _DELIMITERS.split(text)
        else:
            if isinstance(parsed, list):
                values = parsed
            elif isinstance(parsed, str):
                values = _DELIMITERS.split(parsed)
            else:
                log.warning("Ignoring legacy knowledge points of type %s", type(parsed).__name__)
                return []

    names = [value.strip() for value in values if isinstance(value, str)]
    return list(dict.fromkeys(name for name in names if name))
