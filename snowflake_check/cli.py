#!/usr/bin/env python3
"""Command-line interface for snowflake-check using Click."""

from importlib import metadata
import logging
from pathlib import Path
import sys
from typing import Dict
from typing import Optional
from typing import Sequence
from typing import Set

import click
from click.core import ParameterSource
from snowflake_check import changes as changes_mod
from snowflake_check import core
from snowflake_check import style_rules
from snowflake_check.models import Severity

try:
    VERSION = f"snowflake-check {metadata.version('snowflake-check')}"
except metadata.PackageNotFoundError:
    VERSION = "snowflake-check"


def _handle_files(path: Path, rules: style_rules.LineWidthRules, allow_multi_line_imports: bool,
                  import_patterns: Sequence[str], changes: Optional[Dict[Path, Set[int]]],
                  output_format: str, fail_on: str) -> int:
    """Check files and report diagnostics.

    Args:
        path: File or directory to check.
        rules: Line width rules used to pick each file's limit.
        allow_multi_line_imports: If True, multi-line imports are accepted.
        import_patterns: File name patterns the import check applies to.
        changes: Added lines per absolute path, or None to check every line.
        output_format: 'text' or 'github'.
        fail_on: 'warning' fails on any diagnostic, 'error' only on errors.
    Returns:
        0 if the check passed, 1 if it failed, 2 if a file could not be read.
    """
    if path.is_file():
        file_paths = [path]
    else:
        file_paths = list(core.iter_source_files(str(path)))

    exit_code = 0
    total = 0
    total_errors = 0

    for file_path in file_paths:
        if changes is not None:
            added = changes.get(file_path.resolve())
            if not added:
                continue
        try:
            report = core.process_file(str(file_path), rules, allow_multi_line_imports, import_patterns)
        except UnicodeDecodeError:
            logging.debug("[%s] skipped: not a UTF-8 text file", file_path)
            continue
        except OSError as exc:
            logging.error("[%s] ERROR: %s", file_path, exc)
            exit_code = max(exit_code, 2)
            continue

        if changes is not None:
            report = changes_mod.filter_report(report, added)

        for diagnostic in report.diagnostics:
            if output_format == "github":
                click.echo(core.format_diagnostic(str(file_path), diagnostic, "github"))
            elif diagnostic.severity is Severity.ERROR:
                logging.error(core.format_diagnostic(str(file_path), diagnostic))
            else:
                logging.warning(core.format_diagnostic(str(file_path), diagnostic))
        total += len(report.diagnostics)

        if report.has_errors:
            total_errors += 1
        if report.has_errors or (report.diagnostics and fail_on == "warning"):
            exit_code = max(exit_code, 1)

    if total:
        logging.info("Total diagnostics: %d (%d files with errors)", total, total_errors)
    else:
        logging.info("No formatting problems found in %d files.", len(file_paths))

    return exit_code


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Increase verbosity.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-error output.")
@click.version_option(version=VERSION, prog_name="snowflake-check CLI")
def cli(verbose: bool, quiet: bool) -> None:
    """Check import formatting and line widths."""
    # Configure logging only once
    if not logging.getLogger().handlers:
        if quiet:
            logging.basicConfig(level=logging.ERROR, format="%(message)s")
        else:
            logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(message)s")


@cli.command(help="Report multi-line imports and long lines.")
@click.argument("path", type=click.Path(exists=True, file_okay=True, dir_okay=True))
@click.option("--line-width-rules", envvar="INPUT_LINE_WIDTH_RULES", default=None,
              help='Line width rules, e.g. "CHANGELOG.md:80;*.md:110;DEFAULT=110".')
@click.option("--allow-multi-line-imports/--no-allow-multi-line-imports", default=False,
              help="Accept imports whose braces span lines (overrides pyproject.toml).")
@click.option("--import-pattern", "import_patterns", multiple=True,
              help="File pattern the import check applies to (repeatable, default *.rs).")
@click.option("--check-diff/--no-check-diff", envvar="INPUT_CHECK_DIFF", default=False,
              help="Only check lines changed against --base.")
@click.option("--base", default=None, help="Git ref to diff against (default: PR base or HEAD~1).")
@click.option("--format", "output_format", type=click.Choice(["text", "github"]), default="text",
              help="Output format.")
@click.option("--fail-on", type=click.Choice(["warning", "error"]), default="warning",
              help="Lowest severity that fails the check.")
def check(path: str, line_width_rules: Optional[str], allow_multi_line_imports: bool,
          import_patterns: Sequence[str], check_diff: bool, base: Optional[str],
          output_format: str, fail_on: str) -> None:
    target = Path(path)
    project = style_rules.load_config(str(target if target.is_dir() else target.parent))

    rules = style_rules.parse_line_width_rules(
        line_width_rules or project.line_width_rules or style_rules.DEFAULT_LINE_WIDTH_RULES
    )
    source = click.get_current_context().get_parameter_source("allow_multi_line_imports")
    if source is ParameterSource.DEFAULT:
        allow_multi_line_imports = project.allow_multi_line_imports
    changes = changes_mod.get_changes(base) if check_diff else None

    exit_code = _handle_files(
        target,
        rules,
        allow_multi_line_imports,
        tuple(import_patterns) or project.import_patterns,
        changes,
        output_format,
        fail_on,
    )
    sys.exit(exit_code)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    cli()
