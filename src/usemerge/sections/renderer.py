"""Render merged import sets as sorted use statements.

The merged set is split into statements according to the configured
granularity, one statement never mixing different visibility, attributes
or leading ``::``. Statements are sorted, classified into sections and
joined with a single blank line between non-empty sections. The text is
left for an external formatter to wrap.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, NamedTuple

from usemerge.core.config import Granularity, UseMergeConfig
from usemerge.merge.engine import MergedImportSet
from usemerge.sections.classifier import SECTION_ORDER, Section, SectionClassifier
from usemerge.tree.nodes import ImportNode, UseData, UseGroup, UseLeaf, build_forest, node_sort_key
from usemerge.tree.segments import SegmentKind, format_path


class Statement(NamedTuple):
    """One use item to be emitted: a tree and its metadata."""

    node: ImportNode
    data: UseData

    def sort_key(self) -> tuple:
        return (node_sort_key(self.node), self.data.sort_key())


def render_node(node: ImportNode) -> str:
    """Render a tree as use-path text, children in sorted order."""
    if isinstance(node, UseLeaf):
        *head, last = node.path
        text = last.text if node.alias is None else f"{last.text} as {node.alias}"
        if not head:
            return text
        # `self` after a path is only legal inside braces.
        if last.kind is SegmentKind.SELF:
            return f"{format_path(head)}::{{{text}}}"
        return f"{format_path(head)}::{text}"
    children = ", ".join(render_node(child) for child in sorted(node.children, key=node_sort_key))
    return f"{format_path(node.prefix)}::{{{children}}}"


def render_statement(statement: Statement) -> str:
    data = statement.data
    lines = [f"#[{attr}]" for attr in data.attributes]
    visibility = f"{data.visibility} " if data.visibility else ""
    colons = "::" if data.leading_colon else ""
    lines.append(f"{visibility}use {colons}{render_node(statement.node)};")
    return "\n".join(lines)


class UseRenderer:
    """Turn a ``MergedImportSet`` into statements.

    Parameters
    ----------
    granularity : Granularity
        ``CRATE`` nests everything under one tree per root, ``MODULE``
        groups the items of each module, ``ITEM`` emits one statement per
        imported item.
    """

    def __init__(self, granularity: Granularity = Granularity.MODULE) -> None:
        self.granularity = granularity

    def statements(self, merged: MergedImportSet) -> list[Statement]:
        """All statements for ``merged``, sorted."""
        by_data: dict[UseData, list[UseLeaf]] = {}
        for leaf in merged.leaves():
            by_data.setdefault(leaf.data, []).append(leaf)

        statements = []
        for data, leaves in by_data.items():
            for node in self._layout(leaves):
                statements.append(Statement(node, data))
        return sorted(statements, key=Statement.sort_key)

    def _layout(self, leaves: list[UseLeaf]) -> Iterator[ImportNode]:
        leaves = [UseLeaf(leaf.path, leaf.alias) for leaf in leaves]
        if self.granularity is Granularity.CRATE:
            yield from build_forest(leaves)
        elif self.granularity is Granularity.ITEM:
            yield from leaves
        else:
            modules: dict[tuple, list[UseLeaf]] = {}
            for leaf in leaves:
                modules.setdefault(leaf.path[:-1], []).append(leaf)
            for module, members in modules.items():
                if not module or len(members) == 1:
                    yield from members
                else:
                    yield UseGroup(module, frozenset(UseLeaf(m.path[-1:], m.alias) for m in members))

    def render(self, merged: MergedImportSet) -> list[str]:
        return [render_statement(statement) for statement in self.statements(merged)]


@dataclass(frozen=True)
class RenderedSections:
    """Rendered statements per section.

    Attributes
    ----------
    core : tuple[str, ...]
        Statements rooted at core namespaces.
    external : tuple[str, ...]
        Statements rooted at third-party crates.
    local : tuple[str, ...]
        Statements rooted at ``self``, ``super``, ``crate`` or a configured
        local name.
    """

    core: tuple[str, ...] = ()
    external: tuple[str, ...] = ()
    local: tuple[str, ...] = ()
    merged: MergedImportSet = field(default_factory=MergedImportSet, compare=False, repr=False)

    def section(self, section: Section) -> tuple[str, ...]:
        return getattr(self, section.value)

    def blocks(self) -> list[str]:
        """Non-empty sections as text blocks, in output order."""
        return ["\n".join(self.section(s)) for s in SECTION_ORDER if self.section(s)]

    def render(self) -> str:
        """Sections separated by one blank line; empty sections leave no trace."""
        return "\n\n".join(self.blocks())

    def __str__(self) -> str:
        return self.render()

    def __bool__(self) -> bool:
        return bool(self.core or self.external or self.local)


def render_sections(merged: MergedImportSet, config: UseMergeConfig | None = None) -> RenderedSections:
    """Classify and render ``merged`` using ``config`` (defaults if omitted)."""
    config = config or UseMergeConfig()
    classifier = SectionClassifier.from_config(config)
    renderer = UseRenderer(config.granularity)

    sections: dict[Section, list[str]] = {section: [] for section in SECTION_ORDER}
    for statement in renderer.statements(merged):
        sections[classifier.classify(statement.node)].append(render_statement(statement))
    return RenderedSections(
        core=tuple(sections[Section.CORE]),
        external=tuple(sections[Section.EXTERNAL]),
        local=tuple(sections[Section.LOCAL]),
        merged=merged,
    )
