"""Detect which lines a change touched, so only those lines are checked."""

import logging
import os
from pathlib import Path
import re
import subprocess
from typing import Dict
from typing import List
from typing import Optional
from typing import Set

from snowflake_check.models import Diagnostic
from snowflake_check.models import Report

LOG = logging.getLogger(__name__)

HUNK_RE = re.compile(r"^@@ -\d+(?:,\d+)? \+(\d+)(?:,(\d+))? @@")


def parse_diff(diff: str) -> Dict[str, Set[int]]:
    """Map each file in a ``git diff --unified=0`` to its added line numbers."""
    changed: Dict[str, Set[int]] = {}
    current: Optional[Set[int]] = None
    in_header = False
    new_line = 0

    for line in diff.splitlines():
        if line.startswith("diff --git "):
            current = None
            in_header = True
            continue
        if in_header:
            if line.startswith("+++ "):
                target = line[4:].strip()
                if target != "/dev/null":
                    current = changed.setdefault(target[2:] if target.startswith("b/") else target, set())
                continue
            if not line.startswith("@@"):
                continue
            in_header = False
        if current is None:
            continue
        match = HUNK_RE.match(line)
        if match:
            new_line = int(match.group(1))
        elif line.startswith("+"):
            current.add(new_line)
            new_line += 1
        elif line.startswith(" "):
            new_line += 1

    return changed


def _git(*args: str) -> str:
    result = subprocess.run(["git", *args], check=True, capture_output=True, text=True)
    return result.stdout


def default_base() -> str:
    """Pick the ref to diff against: the pull request base or the previous commit."""
    base_ref = os.environ.get("GITHUB_BASE_REF")
    if base_ref:
        return f"origin/{base_ref}"
    return "HEAD~1"


def get_changes(base: Optional[str] = None) -> Optional[Dict[Path, Set[int]]]:
    """Return added lines per absolute file path, or None if git cannot tell.

    None means the caller should check every line.
    """
    base = base or default_base()
    try:
        root = Path(_git("rev-parse", "--show-toplevel").strip())
        diff = _git("diff", "--unified=0", "--no-color", base, "HEAD")
    except (OSError, subprocess.CalledProcessError) as exc:
        LOG.warning("Failed to get changes against %s, will check all lines: %s", base, exc)
        return None

    changes = {(root / name).resolve(): lines for name, lines in parse_diff(diff).items()}
    LOG.info("Checking only lines changed against %s (%d files)", base, len(changes))
    return changes


def filter_report(report: Report, added_lines: Set[int]) -> Report:
    """Keep only diagnostics whose line range touches an added line."""
    kept: List[Diagnostic] = [
        d for d in report.diagnostics
        if any(n in added_lines for n in range(d.line, d.end_line + 1))
    ]
    return Report(tuple(kept))
