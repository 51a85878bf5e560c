"""Diff generation for rewritten use sections."""
from __future__ import annotations

import difflib
from pathlib import Path


def generate_diff(
    original: str,
    modified: str,
    path: Path,
    context_lines: int = 3,
) -> str:
    """Generate unified diff between original and modified content.

    Parameters
    ----------
    original : str
        Original file content.
    modified : str
        Modified file content.
    path : Path
        Path to the file (used in diff header).
    context_lines : int
        Number of context lines to include around changes.

    Returns
    -------
    str
        Unified diff string, or empty string if no changes.
    """
    if original == modified:
        return ""

    original_lines = original.splitlines(keepends=True)
    modified_lines = modified.splitlines(keepends=True)

    # Ensure files end with newlines for proper diff formatting
    if original_lines and not original_lines[-1].endswith("\n"):
        original_lines[-1] += "\n"
    if modified_lines and not modified_lines[-1].endswith("\n"):
        modified_lines[-1] += "\n"

    diff = difflib.unified_diff(
        original_lines,
        modified_lines,
        fromfile=f"a/{path.name}",
        tofile=f"b/{path.name}",
        n=context_lines,
    )
    return "".join(diff)
