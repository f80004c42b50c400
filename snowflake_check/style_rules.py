import fnmatch
import logging
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path
import tomllib
from typing import List
from typing import Optional
from typing import Sequence
from typing import Tuple

from snowflake_check.models import Category
from snowflake_check.models import Diagnostic
from snowflake_check.models import InvalidInputError
from snowflake_check.models import SourceLine

LOG = logging.getLogger(__name__)

DEFAULT_LINE_WIDTH = 110
DEFAULT_LINE_WIDTH_RULES = "CHANGELOG.md:80;*.md:110;*.rs:110;*.toml:110;DEFAULT=110"
DEFAULT_IMPORT_PATTERNS = ("*.rs",)


@dataclass(frozen=True)
class LineWidthRules:
    """Per-file line width limits, first matching pattern wins."""

    patterns: Tuple[Tuple[str, int], ...] = ()
    default: int = DEFAULT_LINE_WIDTH

    def width_for(self, path: str) -> int:
        path = path.replace("\\", "/")
        if path.startswith("./"):
            path = path[2:]
        name = path.rsplit("/", 1)[-1]
        for pattern, width in self.patterns:
            if any(fnmatch.fnmatchcase(candidate, pattern) for candidate in (name, path)) \
                    or fnmatch.fnmatchcase(path, "*/" + pattern):
                return width
        return self.default


@dataclass(frozen=True)
class ProjectConfig:
    """Settings read from the ``[tool.snowflake]`` table of pyproject.toml."""

    line_width_rules: Optional[str] = None
    allow_multi_line_imports: bool = False
    import_patterns: Tuple[str, ...] = field(default=DEFAULT_IMPORT_PATTERNS)


def parse_line_width_rules(rules: str) -> LineWidthRules:
    """Parse rules such as ``"CHANGELOG.md:80;*.md:110;DEFAULT=110"``."""
    patterns: List[Tuple[str, int]] = []
    default = DEFAULT_LINE_WIDTH

    for part in (p.strip() for p in (rules or "").split(";")):
        if not part:
            continue
        if part.startswith("DEFAULT="):
            value = part[len("DEFAULT="):]
            if value.isdigit() and int(value) > 0:
                default = int(value)
            else:
                LOG.warning("Ignoring invalid default line width: %r", value)
            continue
        pattern, sep, width = part.rpartition(":")
        if not sep or not pattern or not width.strip().isdigit() or int(width) <= 0:
            LOG.warning("Ignoring invalid line width rule: %r", part)
            continue
        patterns.append((pattern.strip(), int(width)))

    return LineWidthRules(tuple(patterns), default)


def _table_value(table: dict, key: str, expected: type, default):
    value = table.get(key, default)
    if value is default or isinstance(value, expected):
        return value
    LOG.warning("Ignoring [tool.snowflake] %s: expected %s, got %r", key, expected.__name__, value)
    return default


def load_config(root: str) -> ProjectConfig:
    """Read snowflake settings from pyproject.toml under root, or use defaults.

    Values of the wrong type are logged and replaced by their defaults.
    """
    toml_path = Path(root) / "pyproject.toml"
    if not toml_path.is_file():
        return ProjectConfig()

    try:
        with open(toml_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        LOG.warning("Could not read %s: %s", toml_path, exc)
        return ProjectConfig()

    table = _table_value(data, "tool", dict, {})
    table = _table_value(table, "snowflake", dict, {})

    patterns = table.get("import-patterns", DEFAULT_IMPORT_PATTERNS)
    if isinstance(patterns, str):
        patterns = [patterns]
    if not isinstance(patterns, (list, tuple)) or not all(isinstance(p, str) for p in patterns):
        LOG.warning("Ignoring [tool.snowflake] import-patterns: expected a list of strings, got %r", patterns)
        patterns = DEFAULT_IMPORT_PATTERNS

    return ProjectConfig(
        line_width_rules=_table_value(table, "line-width-rules", str, None),
        allow_multi_line_imports=_table_value(table, "allow-multi-line-imports", bool, False),
        import_patterns=tuple(patterns),
    )


def check_line_width(lines: Optional[Sequence[SourceLine]], max_width: Optional[int]) -> List[Diagnostic]:
    """Return a LineTooLong diagnostic for every line longer than max_width."""
    if lines is None or max_width is None:
        raise InvalidInputError("source lines and a line width are required")

    diagnostics = []
    for number, text in lines:
        length = len(text)
        if length > max_width:
            diagnostics.append(
                Diagnostic(number, Category.LINE_TOO_LONG, f"line too long ({length} > {max_width} characters)")
            )
    return diagnostics
