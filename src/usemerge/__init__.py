"""
usemerge - merge and normalize use declarations for generated source files.

When independently written code fragments are stitched into one output
file, each brings its own use declarations. usemerge folds them into one
minimal, deterministic use block partitioned into Core, External and Local
sections.

Example
-------
>>> from usemerge import UseBuilder
>>>
>>> builder = UseBuilder.from_uses([
...     "use crate::Test; use std::fmt::Debug;",
...     "use std::fmt::Display; use crate::*;",
... ])
>>> print(builder.build().data.render())
use std::fmt::{Debug, Display};

use crate::*;

Classes
-------
UseBuilder
    Collects fragments, merges and renders them. Returns Result objects.

UseMergeConfig
    Core/local namespace names, statement granularity and alias policy.

MergeEngine
    The prefix-trie merge of import forests.

UseOrganizer
    Rewrites the leading use section of an existing file.

Result / ErrorResult / BatchResult
    Explicit operation results; facade operations never raise.
"""
from __future__ import annotations

from usemerge.batch import merge_batch
from usemerge.builder import UseBuilder
from usemerge.core import (
    AliasConflictError,
    AttributeConflictError,
    BatchResult,
    BindingConflictError,
    ConfigError,
    ConflictError,
    ErrorResult,
    Granularity,
    ParseError,
    Result,
    UseMergeConfig,
    UseMergeError,
)
from usemerge.merge import MergedImportSet, MergeEngine, merge_forests
from usemerge.organizer import UseOrganizer
from usemerge.sections import RenderedSections, Section, SectionClassifier, render_sections
from usemerge.tree import (
    ImportForest,
    Segment,
    SegmentKind,
    UseData,
    UseGroup,
    UseLeaf,
    forest_from_text,
    normalize,
    parse_uses,
)

__all__ = [
    "UseBuilder",
    "UseOrganizer",
    "merge_batch",
    "UseMergeConfig",
    "Granularity",
    "Result",
    "ErrorResult",
    "BatchResult",
    "UseMergeError",
    "ParseError",
    "ConflictError",
    "AliasConflictError",
    "BindingConflictError",
    "AttributeConflictError",
    "ConfigError",
    "MergeEngine",
    "MergedImportSet",
    "merge_forests",
    "Section",
    "SectionClassifier",
    "RenderedSections",
    "render_sections",
    "Segment",
    "SegmentKind",
    "UseData",
    "UseLeaf",
    "UseGroup",
    "ImportForest",
    "parse_uses",
    "normalize",
    "forest_from_text",
]
