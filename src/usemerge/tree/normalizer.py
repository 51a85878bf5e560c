"""Tree Builder: raw use statements to canonical import trees."""
from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Iterator

from usemerge.core.errors import ParseError
from usemerge.tree.nodes import ImportForest, ImportNode, UseData, UseLeaf, build_forest, node_sort_key
from usemerge.tree.parser import RawGlob, RawGroup, RawName, RawPath, RawRename, RawTree, UseStatement, parse_uses
from usemerge.tree.segments import IDENT_RE, Segment, SegmentKind, format_path


class TreeBuilder:
    """Expand one raw statement into canonical trees.

    The statement is flattened to full-path leaves, validated, and then
    re-factored so every group carries the longest possible shared prefix.
    ``use a::{b::x, b::y}`` therefore becomes ``a::b::{x, y}``. A top-level
    group (``use {a::b, c};``) yields one tree per distinct root, and an
    empty group contributes nothing.

    Parameters
    ----------
    statement : UseStatement
        The statement to expand.
    """

    def __init__(self, statement: UseStatement) -> None:
        self.statement = statement
        self.data = UseData(
            visibility=statement.visibility,
            attributes=statement.attributes,
            leading_colon=statement.leading_colon,
        )

    def _error(self, message: str) -> ParseError:
        return ParseError(message, fragment=self.statement.fragment)

    def build(self) -> list[ImportNode]:
        leaves = list(self._leaves(self.statement.tree, (), in_group=False))
        return sorted(build_forest(leaves), key=node_sort_key)

    def _leaves(self, tree: RawTree, prefix: tuple[Segment, ...], in_group: bool) -> Iterator[UseLeaf]:
        if isinstance(tree, RawGroup):
            for item in tree.items:
                yield from self._leaves(item, prefix, in_group=True)
        elif isinstance(tree, RawPath):
            segment = self._segment(tree.ident, prefix, last=False, in_group=in_group)
            yield from self._leaves(tree.tree, prefix + (segment,), in_group=False)
        elif isinstance(tree, RawGlob):
            if not prefix:
                raise self._error("a glob cannot be the first segment of a use path")
            yield UseLeaf(prefix + (Segment.glob(),), None, self.data)
        elif isinstance(tree, RawName):
            segment = self._segment(tree.ident, prefix, last=True, in_group=in_group)
            yield UseLeaf(prefix + (segment,), None, self.data)
        elif isinstance(tree, RawRename):
            segment = self._segment(tree.ident, prefix, last=True, in_group=in_group)
            if tree.rename != "_" and not _is_ident(tree.rename):
                raise self._error(f"invalid alias {tree.rename!r} for '{format_path(prefix + (segment,))}'")
            yield UseLeaf(prefix + (segment,), tree.rename, self.data)
        else:
            raise self._error(f"unexpected syntax {tree!r}")

    def _segment(self, text: str, before: tuple[Segment, ...], last: bool, in_group: bool) -> Segment:
        """Validate ``text`` as the segment following ``before``."""
        where = format_path(before) or "use"
        if not text:
            raise self._error(f"empty segment after '{where}'")
        segment = Segment.parse(text)
        kind = segment.kind
        if kind is SegmentKind.NAME:
            if not segment.is_valid:
                raise self._error(f"invalid identifier {text!r} after '{where}'")
            return segment
        if kind is SegmentKind.SELF:
            if before and not (last and in_group):
                raise self._error(f"'self' after '{where}' is only allowed inside braces")
            if not before and last:
                raise self._error("'self' cannot be imported on its own")
            return segment
        if kind is SegmentKind.CRATE and before:
            raise self._error(f"'crate' must be the first segment, found after '{where}'")
        if kind is SegmentKind.SUPER and not all(
            seg.kind in (SegmentKind.SELF, SegmentKind.SUPER) for seg in before
        ):
            raise self._error(f"'super' cannot follow '{where}'")
        if last:
            raise self._error(f"'{text}' cannot be imported on its own")
        return segment


def _is_ident(text: str) -> bool:
    return bool(IDENT_RE.match(text)) and Segment.parse(text).kind is SegmentKind.NAME


def normalize(statement: UseStatement) -> list[ImportNode]:
    """Expand ``statement`` into canonical trees, sorted for stable output."""
    return TreeBuilder(statement).build()


def build_import_forest(statements: Iterable[UseStatement], fragment: int | None = None) -> ImportForest:
    """Normalize every statement of one fragment into an ``ImportForest``.

    Parameters
    ----------
    statements : Iterable[UseStatement]
        Statements belonging to one fragment.
    fragment : int | None
        Fragment index. Defaults to the index recorded on the first statement.
    """
    roots: list[ImportNode] = []
    index = fragment
    for statement in statements:
        if index is None:
            index = statement.fragment
        elif statement.fragment != index:
            statement = replace(statement, fragment=index)
        roots.extend(normalize(statement))
    return ImportForest(fragment=index or 0, roots=tuple(roots))


def forest_from_text(text: str, fragment: int = 0) -> ImportForest:
    """Parse and normalize one fragment given as source text."""
    return build_import_forest(parse_uses(text, fragment), fragment)
