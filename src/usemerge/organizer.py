"""Rewrite the use section at the top of an existing source file.

The contiguous run of use items that follows the file's leading comments
and inner attributes is parsed, merged and replaced by the sectioned
output. Comments placed between those use items are not preserved.
"""
from __future__ import annotations

import logging
from pathlib import Path

from usemerge.core.config import UseMergeConfig
from usemerge.core.diff import generate_diff
from usemerge.core.errors import ConflictError, ParseError
from usemerge.core.results import ErrorResult, Result
from usemerge.merge.engine import MergeEngine
from usemerge.sections.renderer import render_sections
from usemerge.tree.normalizer import build_import_forest
from usemerge.tree.parser import scan_use_block

logger = logging.getLogger(__name__)


class UseOrganizer:
    """Merge and sort the use section of source files.

    Parameters
    ----------
    config : UseMergeConfig | None
        Classification and rendering settings.
    dry_run : bool
        If True, report the diff without writing the file.
    """

    def __init__(self, config: UseMergeConfig | None = None, dry_run: bool = False) -> None:
        self.config = config or UseMergeConfig()
        self.dry_run = dry_run

    def organize_source(self, content: str) -> str:
        """Return ``content`` with its leading use section merged.

        Raises
        ------
        ParseError
            If a use item in the section is malformed.
        ConflictError
            If the use items conflict with each other.
        """
        statements = scan_use_block(content)
        if not statements:
            return content

        start = statements[0].span[0]
        end = statements[-1].span[1]
        forest = build_import_forest(statements, 0)
        merged = MergeEngine(absorb_unaliased=self.config.absorb_unaliased).merge([forest])
        block = render_sections(merged, self.config).render()
        return content[:start] + block + content[end:]

    def organize(self, path: str | Path) -> Result:
        """Organize the use section of the file at ``path``.

        Returns
        -------
        Result
            Result of the operation with a unified diff when the file changed.
        """
        path = Path(path)
        if not path.exists():
            return ErrorResult(message=f"File not found: {path}", target=str(path), operation="organize")

        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read %s: %s", path, e)
            return ErrorResult(
                message=f"Failed to read file: {e}",
                target=str(path),
                exception=e,
                operation="organize",
            )

        try:
            new_content = self.organize_source(content)
        except (ParseError, ConflictError) as e:
            logger.warning("Failed to organize uses in %s: %s", path, e)
            return ErrorResult(
                message=f"Failed to organize uses in {path}: {e}",
                target=str(path),
                exception=e,
                operation="organize",
            )

        if new_content == content:
            return Result(success=True, message="Uses already organized", target=str(path))

        diff = generate_diff(content, new_content, path)
        if self.dry_run:
            return Result(
                success=True,
                message=f"[DRY RUN] Would organize uses in {path}",
                target=str(path),
                files_changed=[path],
                diff=diff,
            )

        try:
            path.write_text(new_content, encoding="utf-8")
        except OSError as e:
            logger.warning("Failed to write %s: %s", path, e)
            return ErrorResult(
                message=f"Failed to write file: {e}",
                target=str(path),
                exception=e,
                operation="organize",
                diff=diff,
            )
        logger.debug("Organized uses in %s", path)
        return Result(
            success=True,
            message=f"Organized uses in {path}",
            target=str(path),
            files_changed=[path],
            diff=diff,
        )
