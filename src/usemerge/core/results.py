"""Result types for all operations.

This module defines the core result classes:
- Result - Base result for all operations
- ErrorResult - Result for failed operations
- BatchResult - Aggregate result for batch operations
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator


@dataclass
class Result:
    """Base result for all operations.

    Facade operations never raise exceptions. Instead, they return Result
    objects that indicate success or failure.

    Attributes:
        success: Whether the operation succeeded
        message: Human-readable description of what happened
        target: Name of the output file or fragment set the result belongs to
        data: Payload, usually ``RenderedSections``
        files_changed: List of files that were modified
        diff: Unified diff of the change (if any)
    """

    success: bool
    message: str
    target: str | None = None
    data: Any = None
    files_changed: list[Path] = field(default_factory=list)
    diff: str | None = None

    def __bool__(self) -> bool:
        return self.success

    def is_error(self) -> bool:
        """Check if this result represents an error."""
        return not self.success


@dataclass
class ErrorResult(Result):
    """Result for failed operations - never raises automatically.

    Attributes:
        exception: The original exception, if any
        operation: Name of the attempted operation
    """

    success: bool = field(default=False, init=False)
    exception: Exception | None = None
    operation: str = ""

    def raise_if_error(self) -> None:
        """Explicitly re-raise the exception if the caller wants to."""
        if self.exception:
            raise self.exception
        raise RuntimeError(self.message)


@dataclass
class BatchResult:
    """Aggregate result for a batch of independent merges."""

    results: list[Result] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """True if all operations succeeded."""
        return all(r.success for r in self.results)

    @property
    def partial_success(self) -> bool:
        """True if at least one operation succeeded."""
        return any(r.success for r in self.results)

    @property
    def succeeded(self) -> list[Result]:
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> list[Result]:
        return [r for r in self.results if not r.success]

    def get(self, target: str) -> Result | None:
        """Result for the named target, if present."""
        for r in self.results:
            if r.target == target:
                return r
        return None

    def __bool__(self) -> bool:
        return self.success

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self) -> Iterator[Result]:
        return iter(self.results)
