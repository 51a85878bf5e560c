"""Import-tree model, text parser and tree builder."""
from __future__ import annotations

from usemerge.tree.nodes import ImportForest, ImportNode, UseData, UseGroup, UseLeaf, build_forest, iter_leaves
from usemerge.tree.normalizer import TreeBuilder, build_import_forest, forest_from_text, normalize
from usemerge.tree.parser import UseStatement, parse_uses, scan_use_block
from usemerge.tree.segments import Segment, SegmentKind

__all__ = [
    "Segment",
    "SegmentKind",
    "UseData",
    "UseLeaf",
    "UseGroup",
    "ImportNode",
    "ImportForest",
    "build_forest",
    "iter_leaves",
    "UseStatement",
    "parse_uses",
    "scan_use_block",
    "TreeBuilder",
    "normalize",
    "build_import_forest",
    "forest_from_text",
]
