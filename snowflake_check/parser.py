"""Parser module for snowflake-check.

This module splits raw file contents into numbered lines and groups those
lines into import/use statements. It is a line-oriented scanner that tracks
brace depth to find where a statement ends; it does not build a syntax tree.
"""

import re
from collections import Counter
from typing import Iterable
from typing import List
from typing import Optional
from typing import Sequence
from typing import Tuple

from snowflake_check.models import ImportStatement
from snowflake_check.models import InvalidInputError
from snowflake_check.models import SourceLine

# `use a::b;`, `pub use a::b;`, `pub(crate) use a::b;` and `import a, b`
IMPORT_START_RE = re.compile(r"^(?:pub(?:\([^)]*\))?\s+)?(?:use|import)\s+(?=\S)")
STRING_RE = re.compile(r'"(?:\\.|[^"\\])*"')
CHAR_RE = re.compile(r"'(?:\\.|[^'\\])'")
ALIAS_RE = re.compile(r"\s+as\s+")


def split_source_lines(text: Optional[str]) -> Tuple[SourceLine, ...]:
    """Split file contents into 1-indexed lines without their terminators."""
    if text is None:
        raise InvalidInputError("source text is required")
    if not text:
        return ()
    pieces = text.split("\n")
    if pieces[-1] == "":
        pieces.pop()
    return tuple(
        SourceLine(number, piece[:-1] if piece.endswith("\r") else piece)
        for number, piece in enumerate(pieces, 1)
    )


def is_import_start(text: str) -> bool:
    """Return True if the stripped line opens an import/use statement."""
    return IMPORT_START_RE.match(text) is not None


def _code_part(text: str) -> str:
    """Strip string and char literals and a trailing // comment from a line."""
    code = CHAR_RE.sub("''", STRING_RE.sub('""', text))
    return code.split("//", 1)[0].strip()


def _brace_delta(code: str) -> int:
    return code.count("{") - code.count("}")


def _split_top_level(text: str) -> List[str]:
    """Split on commas that are not nested inside braces."""
    parts: List[str] = []
    depth = 0
    current: List[str] = []
    for char in text:
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
        if char == "," and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    parts.append("".join(current))
    return parts


def _group_body(text: str) -> str:
    """Return the text inside the outermost brace group.

    An unterminated group runs to the end of the statement text.
    """
    start = text.index("{")
    depth = 0
    for index in range(start, len(text)):
        if text[index] == "{":
            depth += 1
        elif text[index] == "}":
            depth -= 1
            if depth == 0:
                return text[start + 1:index]
    return text[start + 1:]


def canonical_name(item: str) -> str:
    """Collapse whitespace and drop any `as` alias from an imported item."""
    name = " ".join(item.split())
    return ALIAS_RE.split(name, 1)[0].strip()


def extract_items(statement_text: str) -> Tuple[str, ...]:
    """Return the imported item names of a statement, in source order."""
    body = IMPORT_START_RE.sub("", statement_text.strip(), count=1)
    body = body.rstrip().rstrip(";")
    if "{" in body:
        body = _group_body(body)
    names = (canonical_name(part) for part in _split_top_level(body))
    return tuple(name for name in names if name)


def _duplicates(items: Iterable[str]) -> List[str]:
    counts = Counter(items)
    return [name for name, count in counts.items() if count > 1]


def _build_statement(lines: Sequence[SourceLine], codes: Sequence[str], depth: int,
                     terminated: bool = True) -> ImportStatement:
    text = " ".join(code for code in codes if code)
    items = extract_items(text)
    problems: List[str] = []
    if not terminated:
        problems.append("unterminated '{' grouping in import statement")
    elif depth < 0:
        problems.append("unbalanced '}' in import statement")
    for name in _duplicates(items):
        problems.append(f"duplicate imported name '{name}'")
    return ImportStatement(
        start_line=lines[0].number,
        end_line=lines[-1].number,
        items=items,
        text=text,
        terminated=terminated,
        problems=tuple(problems),
    )


def extract_import_statements(lines: Optional[Sequence[SourceLine]]) -> List[ImportStatement]:
    """Group source lines into import statements.

    A statement whose brace group stays open is extended line by line until
    the brace depth returns to zero. If another import statement starts while
    one is still open, or the input ends, the open statement is returned
    unterminated and scanning resumes normally.
    """
    if lines is None:
        raise InvalidInputError("source lines are required")

    statements: List[ImportStatement] = []
    pending: List[SourceLine] = []
    codes: List[str] = []
    depth = 0

    for line in lines:
        stripped = line.text.strip()
        opens = is_import_start(stripped)

        if pending:
            if not opens:
                code = _code_part(stripped)
                pending.append(line)
                codes.append(code)
                depth += _brace_delta(code)
                if depth <= 0:
                    statements.append(_build_statement(pending, codes, depth))
                    pending, codes = [], []
                continue
            statements.append(_build_statement(pending, codes, depth, terminated=False))
            pending, codes = [], []

        if not opens:
            continue

        code = _code_part(stripped)
        depth = _brace_delta(code)
        if depth > 0:
            pending, codes = [line], [code]
        else:
            statements.append(_build_statement([line], [code], depth))

    if pending:
        statements.append(_build_statement(pending, codes, depth, terminated=False))

    return statements
