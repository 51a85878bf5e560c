"""Section classification of merged import trees."""
from __future__ import annotations

from enum import Enum
from typing import Iterable

from usemerge.core.config import DEFAULT_CORE_NAMES, UseMergeConfig
from usemerge.tree.nodes import ImportNode, root_segment
from usemerge.tree.segments import Segment, SegmentKind


class Section(Enum):
    """Output categories, declared in rendering order."""

    CORE = "core"
    EXTERNAL = "external"
    LOCAL = "local"


SECTION_ORDER = (Section.CORE, Section.EXTERNAL, Section.LOCAL)

LOCAL_KINDS = frozenset({SegmentKind.SELF, SegmentKind.SUPER, SegmentKind.CRATE})


class SectionClassifier:
    """Assign trees to sections by their first segment.

    Parameters
    ----------
    core_names : Iterable[str]
        First segments recognised as core namespaces.
    local_names : Iterable[str]
        First segments treated like ``crate`` (first-party crates).
    """

    def __init__(
        self,
        core_names: Iterable[str] = DEFAULT_CORE_NAMES,
        local_names: Iterable[str] = (),
    ) -> None:
        self.core_names = frozenset(core_names)
        self.local_names = frozenset(local_names)

    @classmethod
    def from_config(cls, config: UseMergeConfig) -> SectionClassifier:
        return cls(config.core_names, config.local_names)

    def classify_segment(self, segment: Segment) -> Section:
        if segment.kind in LOCAL_KINDS or segment.text in self.local_names:
            return Section.LOCAL
        if segment.kind is SegmentKind.NAME and segment.text in self.core_names:
            return Section.CORE
        return Section.EXTERNAL

    def classify(self, node: ImportNode) -> Section:
        return self.classify_segment(root_segment(node))

    def partition(self, nodes: Iterable[ImportNode]) -> dict[Section, list[ImportNode]]:
        """Split ``nodes`` into the three sections, preserving their order."""
        sections: dict[Section, list[ImportNode]] = {section: [] for section in SECTION_ORDER}
        for node in nodes:
            sections[self.classify(node)].append(node)
        return sections
