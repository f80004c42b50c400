"""Top-level package for snowflake-check.

This package exposes the core API for checking import formatting and line
widths in source files.
"""

from snowflake_check.core import build_report
from snowflake_check.core import check_source
from snowflake_check.core import iter_source_files
from snowflake_check.core import process_file
from snowflake_check.models import Category
from snowflake_check.models import CheckConfig
from snowflake_check.models import Diagnostic
from snowflake_check.models import ImportStatement
from snowflake_check.models import InvalidInputError
from snowflake_check.models import Report
from snowflake_check.models import Severity
from snowflake_check.models import SourceLine
from snowflake_check.parser import extract_import_statements
from snowflake_check.parser import split_source_lines
from snowflake_check.rules import check_imports
from snowflake_check.style_rules import check_line_width
from snowflake_check.style_rules import parse_line_width_rules


__all__ = [
    "SourceLine",
    "ImportStatement",
    "Category",
    "Severity",
    "Diagnostic",
    "CheckConfig",
    "Report",
    "InvalidInputError",
    "split_source_lines",
    "extract_import_statements",
    "check_imports",
    "check_line_width",
    "parse_line_width_rules",
    "build_report",
    "check_source",
    "process_file",
    "iter_source_files",
]
