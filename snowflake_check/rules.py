"""Rules module for snowflake-check.

This module turns the import statements found by the parser into
diagnostics according to the import formatting policy:

* an import whose brace group spans several lines is reported as
  ``MultiLineImport`` unless the configuration allows it;
* an unterminated group, a stray closing brace or a name imported twice in
  one statement is reported as ``MalformedImport``. A malformed statement is
  never reported as ``MultiLineImport`` as well.
"""

import logging
from typing import List
from typing import Optional
from typing import Sequence
from typing import Tuple

from snowflake_check.models import Category
from snowflake_check.models import CheckConfig
from snowflake_check.models import Diagnostic
from snowflake_check.models import ImportStatement
from snowflake_check.models import InvalidInputError
from snowflake_check.models import SourceLine
from snowflake_check.parser import extract_import_statements

LOG = logging.getLogger(__name__)


def statement_diagnostics(statement: ImportStatement, config: CheckConfig) -> List[Diagnostic]:
    """Return the diagnostics for a single import statement."""
    if statement.is_malformed:
        # An unterminated group is reported where scanning gave up on it.
        line = statement.start_line if statement.terminated else statement.end_line
        return [
            Diagnostic(line, Category.MALFORMED_IMPORT, problem, end_line=statement.end_line)
            for problem in statement.problems
        ]
    if statement.is_well_formed(config.allow_multi_line_imports):
        return []
    return [
        Diagnostic(
            statement.start_line,
            Category.MULTI_LINE_IMPORT,
            f"multi-line import spans lines {statement.start_line}-{statement.end_line}; "
            "collapse it onto a single line",
            end_line=statement.end_line,
        )
    ]


def analyze_imports(lines: Optional[Sequence[SourceLine]],
                    config: Optional[CheckConfig]) -> Tuple[List[ImportStatement], List[Diagnostic]]:
    """Scan lines for import statements and check them against the policy.

    Args:
        lines: Numbered source lines of one file.
        config: Active check configuration. It is never modified.
    Returns:
        The recognized statements and the diagnostics raised by them, both
        in source order.
    Raises:
        InvalidInputError: If lines or config is missing.
    """
    if lines is None or config is None:
        raise InvalidInputError("source lines and a check configuration are required")

    statements = extract_import_statements(lines)
    diagnostics: List[Diagnostic] = []
    for statement in statements:
        diagnostics.extend(statement_diagnostics(statement, config))

    LOG.debug("Found %d import statements and %d import diagnostics", len(statements), len(diagnostics))
    return statements, diagnostics


def check_imports(lines: Optional[Sequence[SourceLine]], config: Optional[CheckConfig]) -> List[Diagnostic]:
    """Return the import diagnostics for the given lines."""
    return analyze_imports(lines, config)[1]
