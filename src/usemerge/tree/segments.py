"""Path segments of a use declaration."""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

IDENT_RE = re.compile(r"^(?:r#)?[A-Za-z_][A-Za-z0-9_]*$")


class SegmentKind(Enum):
    """Closed set of segment kinds."""

    NAME = "name"
    SELF = "self"
    SUPER = "super"
    CRATE = "crate"
    GLOB = "glob"


MARKER_TEXT = {
    SegmentKind.SELF: "self",
    SegmentKind.SUPER: "super",
    SegmentKind.CRATE: "crate",
    SegmentKind.GLOB: "*",
}

KEYWORD_KINDS = {text: kind for kind, text in MARKER_TEXT.items() if kind is not SegmentKind.GLOB}


@dataclass(frozen=True)
class Segment:
    """One segment of an import path.

    Attributes
    ----------
    kind : SegmentKind
        What the segment denotes.
    text : str
        Source text. Markers always carry their canonical text.
    """

    kind: SegmentKind
    text: str

    @classmethod
    def name(cls, text: str) -> Segment:
        return cls(SegmentKind.NAME, text)

    @classmethod
    def self_(cls) -> Segment:
        return cls(SegmentKind.SELF, "self")

    @classmethod
    def super_(cls) -> Segment:
        return cls(SegmentKind.SUPER, "super")

    @classmethod
    def crate(cls) -> Segment:
        return cls(SegmentKind.CRATE, "crate")

    @classmethod
    def glob(cls) -> Segment:
        return cls(SegmentKind.GLOB, "*")

    @classmethod
    def parse(cls, text: str) -> Segment:
        """Build a segment from its source text, recognising the markers."""
        if text == "*":
            return cls.glob()
        kind = KEYWORD_KINDS.get(text)
        if kind is not None:
            return cls(kind, text)
        return cls.name(text)

    @property
    def is_glob(self) -> bool:
        return self.kind is SegmentKind.GLOB

    @property
    def is_valid(self) -> bool:
        """True if a NAME segment holds a usable identifier."""
        if self.kind is not SegmentKind.NAME:
            return self.text == MARKER_TEXT[self.kind]
        return bool(IDENT_RE.match(self.text)) and self.text != "_" and self.text not in KEYWORD_KINDS

    def sort_key(self) -> tuple[int, str]:
        """Order: ``self`` first, then everything by text, globs last."""
        if self.kind is SegmentKind.SELF:
            return (0, "")
        if self.kind is SegmentKind.GLOB:
            return (2, "")
        return (1, self.text)

    def __str__(self) -> str:
        return self.text


def format_path(path: tuple[Segment, ...] | list[Segment]) -> str:
    """Join segments with ``::``."""
    return "::".join(seg.text for seg in path)
