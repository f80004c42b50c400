from pathlib import Path

import pytest

import snowflake_check
from snowflake_check.core import format_diagnostic
from snowflake_check.models import Category
from snowflake_check.models import CheckConfig
from snowflake_check.models import Diagnostic
from snowflake_check.models import InvalidInputError

SAMPLE = Path(__file__).parent / "data" / "sample.rs"


def test_check_sample_file():
    report = snowflake_check.process_file(str(SAMPLE), snowflake_check.parse_line_width_rules("DEFAULT=110"))
    assert [(d.line, d.category) for d in report.diagnostics] == [
        (4, Category.MULTI_LINE_IMPORT),
        (15, Category.MULTI_LINE_IMPORT),
        (24, Category.LINE_TOO_LONG),
        (25, Category.LINE_TOO_LONG),
    ]
    assert not report.has_errors
    assert report.counts() == {Category.MULTI_LINE_IMPORT: 2, Category.LINE_TOO_LONG: 2}


def test_import_check_skipped_for_unmatched_files(tmp_path):
    f = tmp_path / "notes.txt"
    f.write_text("use a::{\n  B\n};\n")
    report = snowflake_check.process_file(str(f), snowflake_check.parse_line_width_rules(""))
    assert report.diagnostics == ()


def test_report_orders_by_line_then_category():
    long_import = "use a::{B, B}; // " + "x" * 120
    text = "use c::{\n  D\n};\n" + long_import + "\n"
    report = snowflake_check.check_source(text, CheckConfig())
    assert [(d.line, d.category) for d in report.diagnostics] == [
        (1, Category.MULTI_LINE_IMPORT),
        (4, Category.MALFORMED_IMPORT),
        (4, Category.LINE_TOO_LONG),
    ]
    assert report.has_errors


def test_build_report_merges_exact_duplicates_only():
    a = Diagnostic(3, Category.LINE_TOO_LONG, "line too long (120 > 110 characters)")
    b = Diagnostic(3, Category.MULTI_LINE_IMPORT, "multi-line import")
    c = Diagnostic(1, Category.MALFORMED_IMPORT, "duplicate imported name 'A'")
    report = snowflake_check.build_report([a, b], [a, c])
    assert report.diagnostics == (c, b, a)
    assert report.has_errors


def test_check_source_is_idempotent():
    text = SAMPLE.read_text()
    config = CheckConfig()
    first = snowflake_check.check_source(text, config)
    assert snowflake_check.check_source(text, config) == first
    lines = [d.line for d in first.diagnostics]
    assert lines == sorted(lines)


def test_invalid_input():
    with pytest.raises(InvalidInputError):
        snowflake_check.check_source(None, CheckConfig())
    with pytest.raises(InvalidInputError):
        snowflake_check.check_source("use a;", None)
    with pytest.raises(InvalidInputError):
        CheckConfig(max_line_width=0)


def test_iter_source_files_skips_vcs_and_dependencies(tmp_path):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "main.rs").write_text("fn main() {}\n")
    (tmp_path / ".git").mkdir()
    (tmp_path / ".git" / "HEAD").write_text("ref: refs/heads/main\n")
    (tmp_path / "node_modules" / "pkg").mkdir(parents=True)
    (tmp_path / "node_modules" / "pkg" / "index.js").write_text("x\n")
    files = [p.relative_to(tmp_path).as_posix() for p in snowflake_check.iter_source_files(str(tmp_path))]
    assert files == ["src/main.rs"]


def test_format_diagnostic():
    d = Diagnostic(5, Category.MULTI_LINE_IMPORT, "collapse it", end_line=9)
    assert format_diagnostic("a.rs", d) == "a.rs:5: warning [MultiLineImport] collapse it"
    assert format_diagnostic("a.rs", d, "github") == (
        "::warning file=a.rs,line=5,endLine=9,title=MultiLineImport::collapse it"
    )
