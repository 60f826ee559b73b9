"""
Curriculum import and export
"""
from .parsers import ParserFormat
