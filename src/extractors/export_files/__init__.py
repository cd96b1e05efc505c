"""
OneTab text export parsing

Exports:
- detect_format: classify export text as the pipe or markdown dialect
- parse_pipe_text / parse_markdown_text: dialect parsers returning TabGroups
- parse_export_text / parse_export_file: Session from export text or file
"""
from .parser import detect_format, parse_export_file, parse_export_text
from ._pipe import parse_pipe_text
from ._markdown import parse_markdown_text

__all__ = [
    "detect_format",
    "parse_export_file",
    "parse_export_text",
    "parse_pipe_text",
    "parse_markdown_text",
]
