"""Data model shared by the analyzers and the reporter."""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass
from dataclasses import field
import enum
from typing import Dict
from typing import NamedTuple
from typing import Tuple


class InvalidInputError(ValueError):
    """Raised when an analyzer is called without lines or without a config."""


class Severity(enum.Enum):
    WARNING = "warning"
    ERROR = "error"


class Category(enum.Enum):
    """Closed set of diagnostic categories.

    Each member carries its fixed severity and its rank for ordering
    diagnostics that share a line (lower rank sorts first).
    """

    MALFORMED_IMPORT = ("MalformedImport", Severity.ERROR, 0)
    MULTI_LINE_IMPORT = ("MultiLineImport", Severity.WARNING, 1)
    LINE_TOO_LONG = ("LineTooLong", Severity.WARNING, 2)

    def __init__(self, label: str, severity: Severity, rank: int):
        self.label = label
        self.severity = severity
        self.rank = rank

    def __str__(self) -> str:
        return self.label


class SourceLine(NamedTuple):
    number: int
    text: str


@dataclass(frozen=True)
class ImportStatement:
    """One logical import/use declaration found by the scanner."""

    start_line: int
    end_line: int
    items: Tuple[str, ...]
    text: str = ""
    terminated: bool = True
    problems: Tuple[str, ...] = ()

    @property
    def is_multi_line(self) -> bool:
        return self.end_line > self.start_line

    @property
    def is_malformed(self) -> bool:
        return bool(self.problems)

    def is_well_formed(self, allow_multi_line: bool = False) -> bool:
        """Return True if the statement satisfies the formatting policy."""
        if self.is_malformed:
            return False
        return allow_multi_line or not self.is_multi_line


@dataclass(frozen=True)
class Diagnostic:
    line: int
    category: Category
    message: str
    end_line: int = 0

    def __post_init__(self):
        if self.end_line < self.line:
            object.__setattr__(self, "end_line", self.line)

    @property
    def severity(self) -> Severity:
        return self.category.severity

    def sort_key(self) -> Tuple[int, int]:
        return (self.line, self.category.rank)


@dataclass(frozen=True)
class CheckConfig:
    max_line_width: int = 110
    allow_multi_line_imports: bool = False

    def __post_init__(self):
        width = self.max_line_width
        if isinstance(width, bool) or not isinstance(width, int) or width <= 0:
            raise InvalidInputError(f"max_line_width must be a positive integer, got {width!r}")


@dataclass(frozen=True)
class Report:
    """Ordered, deduplicated diagnostics for one file."""

    diagnostics: Tuple[Diagnostic, ...] = field(default_factory=tuple)

    @property
    def has_errors(self) -> bool:
        return any(d.severity is Severity.ERROR for d in self.diagnostics)

    def counts(self) -> Dict[Category, int]:
        return dict(Counter(d.category for d in self.diagnostics))
