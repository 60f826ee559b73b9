"""
Utilities for tagging models
"""

RESERVED_TAG_CHARS = [
    '\t',  # Separates tree levels in exported lineage strings, e.g. "國一上\t整數\t數線"
]
