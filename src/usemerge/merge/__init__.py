"""Merge Engine for import forests."""
from __future__ import annotations

from usemerge.merge.engine import MergedImportSet, MergeEngine, merge_forests

__all__ = ["MergeEngine", "MergedImportSet", "merge_forests"]
