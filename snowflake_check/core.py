#!/usr/bin/env python3
"""Core utilities for snowflake-check. This module
runs both analyzers over one file, merges their findings into an ordered
report and provides the helpers used to find and read files on disk.
"""
from __future__ import annotations
import fnmatch
import logging
from pathlib import Path
from typing import Iterable
from typing import Iterator
from typing import List
from typing import Optional
from typing import Sequence
from typing import Set
from typing import Tuple

from snowflake_check.models import CheckConfig
from snowflake_check.models import Diagnostic
from snowflake_check.models import InvalidInputError
from snowflake_check.models import Report
from snowflake_check.parser import split_source_lines
from snowflake_check.rules import check_imports
from snowflake_check.style_rules import DEFAULT_IMPORT_PATTERNS
from snowflake_check.style_rules import LineWidthRules
from snowflake_check.style_rules import check_line_width

LOG = logging.getLogger(__name__)

EXCLUDED_DIRS = {".git", ".hg", ".svn", "node_modules", "__pycache__", "target", ".venv", ".tox"}


def build_report(*diagnostic_groups: Iterable[Diagnostic]) -> Report:
    """Merge diagnostic sequences into one ordered, deduplicated report.

    Diagnostics are ordered by line number and, on the same line, by category
    precedence (MalformedImport, MultiLineImport, LineTooLong). Entries with
    the same line, category and message are kept once.
    """
    merged: List[Diagnostic] = []
    seen: Set[Tuple] = set()
    for group in diagnostic_groups:
        for diagnostic in group:
            key = (diagnostic.line, diagnostic.category, diagnostic.message)
            if key in seen:
                continue
            seen.add(key)
            merged.append(diagnostic)
    merged.sort(key=Diagnostic.sort_key)
    return Report(tuple(merged))


def check_source(text: Optional[str], config: Optional[CheckConfig], check_imports_enabled: bool = True) -> Report:
    """Run the import and line width analyzers over the text of one file."""
    if text is None or config is None:
        raise InvalidInputError("source text and a check configuration are required")

    lines = split_source_lines(text)
    import_diagnostics = check_imports(lines, config) if check_imports_enabled else []
    width_diagnostics = check_line_width(lines, config.max_line_width)
    return build_report(import_diagnostics, width_diagnostics)


def matches_any(path: str, patterns: Sequence[str]) -> bool:
    name = Path(path).name
    return any(fnmatch.fnmatchcase(name, p) or fnmatch.fnmatchcase(path, p) for p in patterns)


def process_file(file_path: str, rules: LineWidthRules, allow_multi_line_imports: bool = False,
                 import_patterns: Sequence[str] = DEFAULT_IMPORT_PATTERNS) -> Report:
    """Read one file and check it.

    The import check only runs for files matching import_patterns; the line
    width check runs for every file with the width its rules assign.
    Raises OSError or UnicodeDecodeError if the file cannot be read as text.
    """
    source = Path(file_path).read_text(encoding="utf-8")
    config = CheckConfig(
        max_line_width=rules.width_for(str(file_path)),
        allow_multi_line_imports=allow_multi_line_imports,
    )
    report = check_source(source, config, check_imports_enabled=matches_any(str(file_path), import_patterns))
    LOG.debug("[%s] %d diagnostics (max width %d)", file_path, len(report.diagnostics), config.max_line_width)
    return report


def iter_source_files(root: str, ignore: Optional[Iterable[str]] = None) -> Iterator[Path]:
    """Yield files under root, skipping VCS, dependency and build directories."""
    excluded = EXCLUDED_DIRS | set(ignore or [])
    root_path = Path(root)
    for path in sorted(root_path.rglob("*")):
        if not path.is_file():
            continue
        if any(part in excluded for part in path.relative_to(root_path).parts[:-1]):
            continue
        yield path


def format_diagnostic(file_path: str, diagnostic: Diagnostic, style: str = "text") -> str:
    """Render a diagnostic as plain text or as a GitHub workflow annotation."""
    if style == "github":
        location = f"file={file_path},line={diagnostic.line}"
        if diagnostic.end_line != diagnostic.line:
            location += f",endLine={diagnostic.end_line}"
        return f"::{diagnostic.severity.value} {location},title={diagnostic.category}::{diagnostic.message}"
    return f"{file_path}:{diagnostic.line}: {diagnostic.severity.value} [{diagnostic.category}] {diagnostic.message}"
