"""Section classification and rendering."""
from __future__ import annotations

from usemerge.sections.classifier import SECTION_ORDER, Section, SectionClassifier
from usemerge.sections.renderer import RenderedSections, UseRenderer, render_node, render_sections

__all__ = [
    "Section",
    "SECTION_ORDER",
    "SectionClassifier",
    "RenderedSections",
    "UseRenderer",
    "render_node",
    "render_sections",
]
