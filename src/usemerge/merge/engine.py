"""Merge Engine: combine the import forests of many fragments into one set.

Every tree is flattened to full-path leaves, and each leaf is inserted
into a prefix trie keyed by segment identity (kind and text). Each trie
level holds the terminals that end there, keyed by ``(last segment,
alias)``, plus the sub-tries of longer paths. A trailing ``self`` after a
name is dropped on insertion, so ``a::{self}`` and ``a`` are one import.

After insertion the trie is checked for alias conflicts, the unaliased
and wildcard absorption rules are applied, and the surviving leaves are
factored back into canonical trees.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator

from usemerge.core.errors import AliasConflictError, AttributeConflictError, BindingConflictError
from usemerge.tree.nodes import (
    ImportForest,
    ImportNode,
    UseData,
    UseLeaf,
    build_forest,
    iter_leaves,
    node_sort_key,
    root_segment,
)
from usemerge.tree.segments import Segment, SegmentKind, format_path

# Binds nothing, so it never competes for a name.
DISCARD_ALIAS = "_"


@dataclass(frozen=True)
class MergedImportSet:
    """The merged, duplicate-free import trees of one output file.

    Attributes
    ----------
    roots : frozenset[ImportNode]
        Canonical trees. For each metadata value a root identity has at
        most two trees: a bare single-segment leaf (``use foo;``) and the
        tree of longer paths.
    """

    roots: frozenset[ImportNode] = field(default_factory=frozenset)

    def __iter__(self) -> Iterator[ImportNode]:
        return iter(sorted(self.roots, key=node_sort_key))

    def __len__(self) -> int:
        return len(self.roots)

    def __bool__(self) -> bool:
        return bool(self.roots)

    def leaves(self) -> list[UseLeaf]:
        """All leaves with full paths, in sorted order."""
        leaves = [leaf for root in self.roots for leaf in iter_leaves(root)]
        return sorted(leaves, key=node_sort_key)

    def by_root(self) -> dict[Segment, list[ImportNode]]:
        """Trees grouped by their first segment."""
        grouped: dict[Segment, list[ImportNode]] = {}
        for root in self:
            grouped.setdefault(root_segment(root), []).append(root)
        return grouped

    def as_forest(self, fragment: int = 0) -> ImportForest:
        """Feed this set back into another merge."""
        return ImportForest(fragment=fragment, roots=tuple(self))


@dataclass
class _Terminal:
    data: UseData
    fragments: list[int]


class _Trie:
    """One level of the merge trie."""

    def __init__(self) -> None:
        self.terminals: dict[tuple[Segment, str | None], _Terminal] = {}
        self.children: dict[Segment, _Trie] = {}

    def child(self, segment: Segment) -> _Trie:
        node = self.children.get(segment)
        if node is None:
            node = self.children[segment] = _Trie()
        return node

    def sorted_children(self) -> list[tuple[Segment, _Trie]]:
        return sorted(self.children.items(), key=lambda item: item[0].sort_key())

    def sorted_terminals(self) -> list[tuple[tuple[Segment, str | None], _Terminal]]:
        def key(item: tuple[tuple[Segment, str | None], _Terminal]) -> tuple:
            (segment, alias), _ = item
            return (segment.sort_key(), alias is not None, alias or "")

        return sorted(self.terminals.items(), key=key)


def _scopes_overlap(a: frozenset[str], b: frozenset[str]) -> bool:
    # An ungated import is visible under every cfg.
    return not a or not b or a == b


class MergeEngine:
    """Merge import forests.

    Parameters
    ----------
    absorb_unaliased : bool
        When True, ``use a::b;`` is dropped if ``use a::b as c;`` with the
        same metadata is also present. When False both are kept.

    Examples
    --------
    >>> from usemerge.tree.normalizer import forest_from_text
    >>> engine = MergeEngine()
    >>> merged = engine.merge([forest_from_text("use a::b;"), forest_from_text("use a::c;", 1)])
    >>> [str(leaf) for leaf in merged.leaves()]
    ['a::b', 'a::c']
    """

    def __init__(self, absorb_unaliased: bool = True) -> None:
        self.absorb_unaliased = absorb_unaliased

    def merge(self, forests: Iterable[ImportForest]) -> MergedImportSet:
        """Merge ``forests`` into one ``MergedImportSet``.

        Raises
        ------
        ConflictError
            On the first alias, binding or metadata conflict. No partial
            result is produced.
        """
        root = _Trie()
        for forest in forests:
            for node in forest.roots:
                for leaf in iter_leaves(node):
                    self._insert(root, leaf.canonical(), forest.fragment)

        self._check_aliases(root)
        self._absorb(root)
        return MergedImportSet(build_forest(self._collect(root, ())))

    # -- insertion --------------------------------------------------------

    def _insert(self, trie: _Trie, leaf: UseLeaf, fragment: int) -> None:
        *head, last = leaf.path
        for segment in head:
            trie = trie.child(segment)
        key = (last, leaf.alias)
        existing = trie.terminals.get(key)
        if existing is None:
            trie.terminals[key] = _Terminal(leaf.data, [fragment])
        elif existing.data == leaf.data:
            existing.fragments.append(fragment)
        else:
            full = UseLeaf(leaf.path, leaf.alias)
            data = sorted([str(existing.data), str(leaf.data)])
            raise AttributeConflictError(str(full), data, [existing.fragments[0], fragment])

    # -- conflicts --------------------------------------------------------

    def _check_aliases(self, root: _Trie) -> None:
        # Only cfg attributes scope a binding: two alternatives gated by
        # different cfgs may reuse a name, an ungated one clashes with all.
        renamed: dict[str, list[tuple[frozenset[str], str, int]]] = {}
        bindings: dict[str, list[tuple[frozenset[str], str, int]]] = {}
        for path, trie in self._walk(root, ()):
            for (segment, alias), terminal in trie.sorted_terminals():
                if alias is None or alias == DISCARD_ALIAS:
                    continue
                full = format_path(path + (segment,))
                scope = terminal.data.cfg_scope
                fragment = terminal.fragments[0]

                for other_scope, other_alias, other_fragment in renamed.get(full, ()):
                    if other_alias != alias and _scopes_overlap(scope, other_scope):
                        raise AliasConflictError(full, [other_alias, alias], [other_fragment, fragment])
                renamed.setdefault(full, []).append((scope, alias, fragment))

                for other_scope, other_path, other_fragment in bindings.get(alias, ()):
                    if other_path != full and _scopes_overlap(scope, other_scope):
                        raise BindingConflictError(alias, [other_path, full], [other_fragment, fragment])
                bindings.setdefault(alias, []).append((scope, full, fragment))

    # -- absorption -------------------------------------------------------

    def _absorb(self, root: _Trie) -> None:
        for _, trie in self._walk(root, ()):
            if self.absorb_unaliased:
                self._absorb_unaliased(trie)
            self._absorb_into_glob(trie)

    @staticmethod
    def _absorb_unaliased(trie: _Trie) -> None:
        renamed = {
            (segment, terminal.data)
            for (segment, alias), terminal in trie.terminals.items()
            if alias is not None and alias != DISCARD_ALIAS
        }
        for (segment, alias), terminal in list(trie.terminals.items()):
            if alias is None and (segment, terminal.data) in renamed:
                del trie.terminals[(segment, alias)]

    @staticmethod
    def _absorb_into_glob(trie: _Trie) -> None:
        globs = {
            terminal.data
            for (segment, _), terminal in trie.terminals.items()
            if segment.kind is SegmentKind.GLOB
        }
        if not globs:
            return
        for (segment, alias), terminal in list(trie.terminals.items()):
            if UseLeaf((segment,), alias).is_plain and terminal.data in globs:
                del trie.terminals[(segment, alias)]

    # -- traversal --------------------------------------------------------

    def _walk(self, trie: _Trie, path: tuple[Segment, ...]) -> Iterator[tuple[tuple[Segment, ...], _Trie]]:
        yield path, trie
        for segment, child in trie.sorted_children():
            yield from self._walk(child, path + (segment,))

    def _collect(self, trie: _Trie, path: tuple[Segment, ...]) -> list[UseLeaf]:
        leaves = [
            UseLeaf(path + (segment,), alias, terminal.data)
            for (segment, alias), terminal in trie.terminals.items()
        ]
        for segment, child in trie.children.items():
            leaves.extend(self._collect(child, path + (segment,)))
        return leaves


def merge_forests(forests: Iterable[ImportForest], absorb_unaliased: bool = True) -> MergedImportSet:
    """Shortcut for ``MergeEngine(absorb_unaliased).merge(forests)``."""
    return MergeEngine(absorb_unaliased=absorb_unaliased).merge(forests)
