import pytest

from snowflake_check.models import Category
from snowflake_check.models import InvalidInputError
from snowflake_check.parser import split_source_lines
from snowflake_check.style_rules import DEFAULT_IMPORT_PATTERNS
from snowflake_check.style_rules import check_line_width
from snowflake_check.style_rules import load_config
from snowflake_check.style_rules import parse_line_width_rules


def test_read_config_from_toml(tmp_path):
    toml = tmp_path / "pyproject.toml"
    toml.write_text(
        "[tool.snowflake]\n"
        'line-width-rules = "*.md:80;DEFAULT=100"\n'
        "allow-multi-line-imports = true\n"
        'import-patterns = ["*.rs", "*.ts"]\n'
    )
    config = load_config(str(tmp_path))
    assert config.line_width_rules == "*.md:80;DEFAULT=100"
    assert config.allow_multi_line_imports
    assert config.import_patterns == ("*.rs", "*.ts")


def test_read_config_defaults(tmp_path):
    config = load_config(str(tmp_path))
    assert config.line_width_rules is None
    assert not config.allow_multi_line_imports
    assert config.import_patterns == DEFAULT_IMPORT_PATTERNS

    (tmp_path / "pyproject.toml").write_text("[tool.snowflake\n")
    assert load_config(str(tmp_path)).line_width_rules is None


def test_parse_line_width_rules():
    rules = parse_line_width_rules("CHANGELOG.md:80;*.md:110;*.rs:100;DEFAULT=120")
    assert rules.default == 120
    assert rules.width_for("CHANGELOG.md") == 80
    assert rules.width_for("./docs/README.md") == 110
    assert rules.width_for("src/main.rs") == 100
    assert rules.width_for("Cargo.lock") == 120


def test_parse_line_width_rules_skips_invalid_parts():
    rules = parse_line_width_rules("*.md:wide;:80;;*.rs:90;DEFAULT=x")
    assert rules.patterns == (("*.rs", 90),)
    assert rules.default == 110


def test_check_line_width_detects_long_lines():
    lines = split_source_lines("x = '" + "a" * 141 + "'\n")
    diagnostics = check_line_width(lines, 110)
    assert len(diagnostics) == 1
    assert diagnostics[0].category is Category.LINE_TOO_LONG
    assert diagnostics[0].line == 1
    assert "146" in diagnostics[0].message
    assert "110" in diagnostics[0].message


def test_line_at_limit_is_not_flagged():
    lines = split_source_lines("a" * 110 + "\n" + "b" * 111 + "\n" + " " * 111 + "\n")
    assert [d.line for d in check_line_width(lines, 110)] == [2, 3]


def test_check_line_width_requires_lines():
    with pytest.raises(InvalidInputError):
        check_line_width(None, 110)


def test_directory_pattern_matches_absolute_paths():
    rules = parse_line_width_rules("docs/*.md:72")
    assert rules.width_for("/repo/docs/guide.md") == 72
    assert rules.width_for("/repo/guide.md") == 110


def test_read_config_ignores_wrong_types(tmp_path):
    (tmp_path / "pyproject.toml").write_text(
        "[tool.snowflake]\n"
        "line-width-rules = 100\n"
        'allow-multi-line-imports = "yes"\n'
        'import-patterns = ["*.rs", 3]\n'
    )
    config = load_config(str(tmp_path))
    assert config.line_width_rules is None
    assert config.allow_multi_line_imports is False
    assert config.import_patterns == DEFAULT_IMPORT_PATTERNS

    (tmp_path / "pyproject.toml").write_text('tool = "snowflake"\n')
    assert load_config(str(tmp_path)).import_patterns == DEFAULT_IMPORT_PATTERNS
