"""UseBuilder - merge the use sections of many code fragments.

Example
-------
>>> from usemerge import UseBuilder
>>>
>>> builder = UseBuilder()
>>> builder.add_fragment("use crate::Test; use std::fmt::Debug;")
>>> builder.add_fragment("use std::fmt::Display; use crate::*;")
>>> result = builder.build()
>>> print(result.data.render())
use std::fmt::{Debug, Display};

use crate::*;
"""
from __future__ import annotations

from typing import Iterable, Sequence, Union

from usemerge.core.config import UseMergeConfig
from usemerge.core.errors import ConflictError, ParseError
from usemerge.core.results import ErrorResult, Result
from usemerge.merge.engine import MergedImportSet, MergeEngine
from usemerge.sections.classifier import SECTION_ORDER
from usemerge.sections.renderer import UseRenderer, render_sections
from usemerge.tree.nodes import ImportForest
from usemerge.tree.normalizer import build_import_forest
from usemerge.tree.parser import UseStatement, parse_uses

Fragment = Union[str, Sequence[UseStatement], ImportForest]


class UseBuilder:
    """Collect fragments and merge them into one section-partitioned use block.

    Fragments may be source text, already parsed statements, or import
    forests. They are only parsed when merging, so every problem surfaces
    through the returned ``Result``.

    Parameters
    ----------
    config : UseMergeConfig | None
        Classification and rendering settings. Defaults are used if None.
    fragments : Iterable[Fragment]
        Initial fragments, indexed from 0 in iteration order.
    """

    def __init__(self, config: UseMergeConfig | None = None, fragments: Iterable[Fragment] = ()) -> None:
        self.config = config or UseMergeConfig()
        self._fragments: list[Fragment] = []
        for fragment in fragments:
            self.add_fragment(fragment)

    @classmethod
    def from_uses(cls, fragments: Iterable[Fragment], config: UseMergeConfig | None = None) -> UseBuilder:
        return cls(config, fragments)

    def __len__(self) -> int:
        return len(self._fragments)

    def add_fragment(self, fragment: Fragment) -> int:
        """Register a fragment and return its index."""
        self._fragments.append(fragment)
        return len(self._fragments) - 1

    def forests(self) -> list[ImportForest]:
        """Parse and normalize every fragment.

        Raises
        ------
        ParseError
            If a fragment is malformed.
        """
        forests = []
        for index, fragment in enumerate(self._fragments):
            if isinstance(fragment, ImportForest):
                forests.append(fragment)
            elif isinstance(fragment, str):
                forests.append(build_import_forest(parse_uses(fragment, index), index))
            else:
                forests.append(build_import_forest(fragment, index))
        return forests

    def merge(self) -> MergedImportSet:
        """Merge all fragments, raising ``ParseError`` or ``ConflictError``."""
        engine = MergeEngine(absorb_unaliased=self.config.absorb_unaliased)
        return engine.merge(self.forests())

    def build(self) -> Result:
        """Merge and render into Core, External and Local sections.

        Returns
        -------
        Result
            ``data`` holds a ``RenderedSections`` on success. Parse and
            conflict failures come back as ``ErrorResult`` with the
            original exception attached.
        """
        try:
            merged = self.merge()
        except (ParseError, ConflictError) as e:
            return ErrorResult(message=str(e), exception=e, operation="build")

        sections = render_sections(merged, self.config)
        counts = ", ".join(f"{len(sections.section(s))} {s.value}" for s in SECTION_ORDER)
        return Result(success=True, message=f"Merged {len(self)} fragment(s) into {counts} statement(s)", data=sections)

    def into_items(self) -> Result:
        """Merge and render all statements as one sorted list without sections."""
        try:
            merged = self.merge()
        except (ParseError, ConflictError) as e:
            return ErrorResult(message=str(e), exception=e, operation="into_items")

        items = UseRenderer(self.config.granularity).render(merged)
        return Result(success=True, message=f"Merged {len(self)} fragment(s) into {len(items)} statement(s)", data=items)
