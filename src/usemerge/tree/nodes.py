"""Canonical import trees.

A tree is either a ``UseLeaf`` (a full path, optionally renamed, possibly
ending in a glob) or a ``UseGroup`` (a shared prefix over an unordered set
of children). Paths stored in children are relative to the group prefix.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Iterable, Iterator, Union

from usemerge.tree.segments import Segment, SegmentKind, format_path

CFG_RE = re.compile(r"cfg\s*\(")


@dataclass(frozen=True)
class UseData:
    """Statement-level metadata shared by every leaf of a use item.

    Attributes
    ----------
    visibility : str
        Normalized visibility, e.g. ``"pub"`` or ``"pub(crate)"``. Empty for
        private uses.
    attributes : tuple[str, ...]
        Outer attribute bodies without the ``#[`` and ``]`` delimiters.
    leading_colon : bool
        Whether the path was written with a leading ``::``.
    """

    visibility: str = ""
    attributes: tuple[str, ...] = ()
    leading_colon: bool = False

    def sort_key(self) -> tuple[str, tuple[str, ...], bool]:
        return (self.visibility, self.attributes, self.leading_colon)

    @property
    def cfg_scope(self) -> frozenset[str]:
        """The ``cfg(...)`` attributes gating the item.

        Other attributes (``allow``, ``doc``, ...) do not change where the
        imported name is visible.
        """
        return frozenset(attr for attr in self.attributes if CFG_RE.match(attr))

    def __str__(self) -> str:
        parts = [f"#[{attr}]" for attr in self.attributes]
        if self.visibility:
            parts.append(self.visibility)
        if self.leading_colon:
            parts.append("::")
        return " ".join(parts) or "<private>"


@dataclass(frozen=True)
class UseLeaf:
    """One imported item.

    Attributes
    ----------
    path : tuple[Segment, ...]
        Segments of the item, relative to the enclosing group (if any).
    alias : str | None
        Rename target for ``path as alias``.
    data : UseData
        Metadata of the statement this leaf came from.
    """

    path: tuple[Segment, ...]
    alias: str | None = None
    data: UseData = field(default_factory=UseData)

    @property
    def is_glob(self) -> bool:
        return bool(self.path) and self.path[-1].is_glob

    @property
    def is_plain(self) -> bool:
        """A single unaliased name, the kind of leaf a glob makes redundant."""
        return len(self.path) == 1 and self.path[0].kind is SegmentKind.NAME and self.alias is None

    def canonical(self) -> UseLeaf:
        """The same import with a redundant trailing ``self`` dropped.

        ``a::{self}`` imports exactly what ``a`` does. After ``crate``,
        ``super`` or ``self`` the marker is kept, since those cannot be
        imported bare.
        """
        path = self.path
        if len(path) > 1 and path[-1].kind is SegmentKind.SELF and path[-2].kind is SegmentKind.NAME:
            return replace(self, path=path[:-1])
        return self

    def __str__(self) -> str:
        text = format_path(self.path)
        if self.alias is not None:
            text += f" as {self.alias}"
        return text


@dataclass(frozen=True)
class UseGroup:
    """Children sharing the segments in ``prefix``."""

    prefix: tuple[Segment, ...]
    children: frozenset[ImportNode]

    def __str__(self) -> str:
        return f"{format_path(self.prefix)}::{{{len(self.children)} items}}"


ImportNode = Union[UseLeaf, UseGroup]


@dataclass(frozen=True)
class ImportForest:
    """The trees contributed by one input fragment."""

    fragment: int
    roots: tuple[ImportNode, ...] = ()

    def __len__(self) -> int:
        return len(self.roots)

    def __iter__(self) -> Iterator[ImportNode]:
        return iter(self.roots)


def iter_leaves(node: ImportNode, prefix: tuple[Segment, ...] = ()) -> Iterator[UseLeaf]:
    """Yield every leaf beneath ``node`` with its full path."""
    if isinstance(node, UseLeaf):
        yield replace(node, path=prefix + node.path)
        return
    for child in node.children:
        yield from iter_leaves(child, prefix + node.prefix)


def build_forest(leaves: Iterable[UseLeaf]) -> frozenset[ImportNode]:
    """Factor full-path leaves into trees with maximal shared prefixes.

    A leaf that ends exactly where another leaf's path continues stays a
    sibling (``a::{b, b::c}``) rather than becoming a ``self`` import.
    """
    return frozenset(_build_children(list(dict.fromkeys(leaves))))


def _build_children(leaves: list[UseLeaf]) -> list[ImportNode]:
    nodes: list[ImportNode] = []
    buckets: dict[Segment, list[UseLeaf]] = {}
    for leaf in leaves:
        if len(leaf.path) == 1:
            nodes.append(leaf)
        else:
            buckets.setdefault(leaf.path[0], []).append(leaf)

    for head, members in buckets.items():
        if len(members) == 1:
            nodes.append(members[0])
            continue
        tails = [replace(leaf, path=leaf.path[1:]) for leaf in members]
        nodes.append(_make_group((head,), _build_children(tails)))
    return nodes


def _make_group(prefix: tuple[Segment, ...], children: list[ImportNode]) -> ImportNode:
    if len(children) == 1:
        only = children[0]
        if isinstance(only, UseGroup):
            return UseGroup(prefix + only.prefix, only.children)
        return replace(only, path=prefix + only.path)
    return UseGroup(prefix, frozenset(children))


def _path_key(path: tuple[Segment, ...]) -> tuple[tuple[int, str], ...]:
    return tuple(seg.sort_key() for seg in path)


def node_sort_key(node: ImportNode) -> tuple:
    """Deterministic total order over nodes, applied recursively to groups."""
    if isinstance(node, UseLeaf):
        alias_key = (0, "") if node.alias is None else (1, node.alias)
        return (_path_key(node.path), 0, alias_key, node.data.sort_key(), ())
    children = tuple(sorted(node_sort_key(child) for child in node.children))
    return (_path_key(node.prefix), 1, (0, ""), ("", (), False), children)


def root_segment(node: ImportNode) -> Segment:
    """First segment of a tree, which decides its merge identity and section."""
    path = node.path if isinstance(node, UseLeaf) else node.prefix
    return path[0]
