"""
Tests for usemerge.sections.classifier module.

This module tests section classification:
- Core namespaces (default and configured)
- Local markers and configured local names
- External fallback
- partition() output
"""
from __future__ import annotations

import pytest

from usemerge.core.config import UseMergeConfig
from usemerge.sections.classifier import SECTION_ORDER, Section, SectionClassifier
from usemerge.tree.normalizer import forest_from_text
from usemerge.tree.segments import Segment


class TestClassifySegment:
    """Tests for SectionClassifier.classify_segment()."""

    @pytest.fixture
    def classifier(self) -> SectionClassifier:
        return SectionClassifier()

    @pytest.mark.parametrize("name", ["std", "core", "alloc", "proc_macro", "test"])
    def test_default_core_names(self, classifier, name):
        """The conventional standard namespaces are Core."""
        assert classifier.classify_segment(Segment.name(name)) is Section.CORE

    @pytest.mark.parametrize("segment", [Segment.self_(), Segment.super_(), Segment.crate()])
    def test_markers_are_local(self, classifier, segment):
        """self, super and crate are Local."""
        assert classifier.classify_segment(segment) is Section.LOCAL

    def test_everything_else_is_external(self, classifier):
        """Unknown crates are External."""
        assert classifier.classify_segment(Segment.name("serde")) is Section.EXTERNAL

    def test_raw_identifier_not_core(self, classifier):
        """r#std is not the std namespace."""
        assert classifier.classify_segment(Segment.name("r#std")) is Section.EXTERNAL


class TestConfiguredClassifier:
    """Tests for classifiers built from configuration."""

    def test_extended_core_names(self):
        """Extra core names are honoured."""
        config = UseMergeConfig().with_core_names("tokio")
        classifier = SectionClassifier.from_config(config)
        assert classifier.classify_segment(Segment.name("tokio")) is Section.CORE
        assert classifier.classify_segment(Segment.name("std")) is Section.CORE

    def test_local_names(self):
        """Configured first-party crates are Local."""
        classifier = SectionClassifier.from_config(UseMergeConfig(local_names=frozenset({"my_crate"})))
        assert classifier.classify_segment(Segment.name("my_crate")) is Section.LOCAL


class TestPartition:
    """Tests for SectionClassifier.partition()."""

    def test_partition_covers_all_sections(self):
        """Every section is present, possibly empty."""
        forest = forest_from_text("use std::fmt; use crate::a; use std::io;")
        sections = SectionClassifier().partition(forest.roots)
        assert list(sections) == list(SECTION_ORDER)
        assert len(sections[Section.CORE]) == 2
        assert sections[Section.EXTERNAL] == []
        assert len(sections[Section.LOCAL]) == 1

    def test_section_order(self):
        """Sections render Core, External, Local."""
        assert SECTION_ORDER == (Section.CORE, Section.EXTERNAL, Section.LOCAL)
