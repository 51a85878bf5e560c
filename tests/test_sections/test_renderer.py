"""
Tests for usemerge.sections.renderer module.

This module tests rendering of merged sets:
- render_node() for leaves, groups and self imports
- Statement metadata (attributes, visibility, leading colons)
- Granularity layouts (crate, module, item)
- Section partitioning and blank-line handling
"""
from __future__ import annotations

import textwrap

import pytest

from usemerge.core.config import Granularity, UseMergeConfig
from usemerge.merge.engine import MergedImportSet
from usemerge.sections.classifier import Section
from usemerge.sections.renderer import RenderedSections, UseRenderer, render_node, render_sections
from usemerge.tree.nodes import UseGroup, UseLeaf
from usemerge.tree.segments import Segment


def seg(*texts: str) -> tuple[Segment, ...]:
    return tuple(Segment.parse(t) for t in texts)


# =============================================================================
# render_node Tests
# =============================================================================

class TestRenderNode:
    """Tests for render_node()."""

    def test_leaf(self):
        """A leaf renders as its path."""
        assert render_node(UseLeaf(seg("std", "fmt", "Debug"))) == "std::fmt::Debug"

    def test_leaf_with_alias(self):
        """A rename clause follows the path."""
        assert render_node(UseLeaf(seg("std", "error", "Error"), "StdError")) == "std::error::Error as StdError"

    def test_group_sorted(self):
        """Children render sorted: self first, glob last."""
        node = UseGroup(
            seg("a"),
            frozenset({UseLeaf(seg("*")), UseLeaf(seg("z")), UseLeaf(seg("self")), UseLeaf(seg("b"), "c")}),
        )
        assert render_node(node) == "a::{self, b as c, z, *}"

    def test_nested_group(self):
        """Groups render recursively."""
        inner = UseGroup(seg("fmt"), frozenset({UseLeaf(seg("Display")), UseLeaf(seg("Debug"))}))
        node = UseGroup(seg("std"), frozenset({inner, UseLeaf(seg("io", "Read"))}))
        assert render_node(node) == "std::{fmt::{Debug, Display}, io::Read}"

    def test_trailing_self_is_braced(self):
        """a::self renders as a::{self}."""
        assert render_node(UseLeaf(seg("a", "self"))) == "a::{self}"
        assert render_node(UseLeaf(seg("a", "self"), "b")) == "a::{self as b}"


# =============================================================================
# Granularity Tests
# =============================================================================

class TestGranularity:
    """Tests for UseRenderer layouts."""

    TEXT = "use std::error::Error as StdError; use std::fmt::{Debug, Display}; use foo;"

    def test_module(self, merge):
        """Module granularity emits one statement per module."""
        statements = UseRenderer(Granularity.MODULE).render(merge(self.TEXT))
        assert statements == [
            "use foo;",
            "use std::error::Error as StdError;",
            "use std::fmt::{Debug, Display};",
        ]

    def test_crate(self, merge):
        """Crate granularity nests everything under each root."""
        statements = UseRenderer(Granularity.CRATE).render(merge(self.TEXT))
        assert statements == [
            "use foo;",
            "use std::{error::Error as StdError, fmt::{Debug, Display}};",
        ]

    def test_item(self, merge):
        """Item granularity emits one statement per leaf."""
        statements = UseRenderer(Granularity.ITEM).render(merge(self.TEXT))
        assert statements == [
            "use foo;",
            "use std::error::Error as StdError;",
            "use std::fmt::Debug;",
            "use std::fmt::Display;",
        ]

    def test_metadata_splits_statements(self, merge):
        """Leaves with different metadata never share a statement."""
        merged = merge("pub use a::b;", "use a::c;", "#[cfg(test)]\nuse a::d;", "use ::a::e;")
        statements = UseRenderer(Granularity.CRATE).render(merged)
        assert statements == [
            "pub use a::b;",
            "use a::c;",
            "#[cfg(test)]\nuse a::d;",
            "use ::a::e;",
        ]

    def test_same_tree_different_metadata(self, merge):
        """Groups sharing a prefix but not metadata stay separate statements."""
        merged = merge("pub use a::{b, c};", "use a::{d, e};")
        statements = UseRenderer(Granularity.CRATE).render(merged)
        assert statements == ["pub use a::{b, c};", "use a::{d, e};"]

    def test_pub_crate_visibility(self, merge):
        """Restricted visibility is rendered verbatim."""
        statements = UseRenderer().render(merge("pub(in crate::x) use super::{a, b};"))
        assert statements == ["pub(in crate::x) use super::{a, b};"]


# =============================================================================
# Section Tests
# =============================================================================

class TestRenderSections:
    """Tests for render_sections()."""

    def test_three_sections(self, merge):
        """Core, External and Local blocks separated by single blank lines."""
        merged = merge("use crate::a::B;", "use serde::Serialize;", "use std::fmt::Debug;")
        rendered = render_sections(merged)
        assert rendered.render() == textwrap.dedent('''\
            use std::fmt::Debug;

            use serde::Serialize;

            use crate::a::B;''')
        assert len(rendered.blocks()) == 3

    def test_empty_section_leaves_no_blank_line(self, merge):
        """A missing External section does not produce a double blank line."""
        merged = merge("use crate::Test; use std::fmt::Debug;", "use std::fmt::Display; use crate::*;")
        rendered = render_sections(merged)
        assert rendered.core == ("use std::fmt::{Debug, Display};",)
        assert rendered.external == ()
        assert rendered.local == ("use crate::*;",)
        assert rendered.render() == "use std::fmt::{Debug, Display};\n\nuse crate::*;"

    def test_documented_scenario(self, merge, sample_fragments):
        """The two sample fragments give the expected sections."""
        rendered = render_sections(merge(*sample_fragments))
        assert rendered.section(Section.CORE) == (
            "use std::error::Error as StdError;",
            "use std::fmt::{Debug, Display};",
        )
        assert rendered.section(Section.EXTERNAL) == ("use syn::ItemUse;",)
        assert rendered.section(Section.LOCAL) == ("use crate::*;",)

    def test_empty_set(self):
        """Nothing to render gives empty text and a falsy result."""
        rendered = render_sections(MergedImportSet())
        assert rendered.render() == ""
        assert not rendered
        assert rendered == RenderedSections()

    def test_local_ordering(self, merge):
        """self sorts before other local roots."""
        merged = merge("use super::b; use crate::a; use self::c;")
        assert render_sections(merged).local == ("use self::c;", "use crate::a;", "use super::b;")

    @pytest.mark.parametrize("granularity", ["crate", "module"])
    def test_configured_core_names(self, merge, granularity):
        """Extra core names move crates into the Core section."""
        config = UseMergeConfig(granularity=granularity).with_core_names("tokio")
        rendered = render_sections(merge("use tokio::sync::Mutex; use std::sync::Arc;"), config)
        assert rendered.core == ("use std::sync::Arc;", "use tokio::sync::Mutex;")
        assert rendered.external == ()
