"""Report generation components."""

from .report_generator import ReportGenerator
from .json_writer import JSONWriter
from .html_writer import HTMLWriter
from .markdown_writer import MarkdownWriter
from .sqlite_writer import SQLiteWriter, load_history, query_database

__all__ = [
    "ReportGenerator",
    "JSONWriter",
    "HTMLWriter",
    "MarkdownWriter",
    "SQLiteWriter",
    "load_history",
    "query_database",
]
