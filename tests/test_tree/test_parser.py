"""
Tests for usemerge.tree.parser module.

This module tests the text front end:
- Tokenizing (comments, attributes, raw identifiers)
- Parsing use items into raw trees
- Visibility and leading colon handling
- ParseError positions for malformed input
- scan_use_block() for leading use sections of whole files
"""
from __future__ import annotations

import textwrap

import pytest

from usemerge.core.errors import ParseError
from usemerge.tree.parser import (
    RawGlob,
    RawGroup,
    RawName,
    RawPath,
    RawRename,
    parse_uses,
    scan_use_block,
    tokenize,
)


# =============================================================================
# Tokenizer Tests
# =============================================================================

class TestTokenize:
    """Tests for tokenize()."""

    def test_skips_comments(self):
        """Line and nested block comments produce no tokens."""
        tokens = list(tokenize("use /* a /* nested */ b */ x; // trailing"))
        assert [t.text for t in tokens] == ["use", "x", ";"]

    def test_attribute_is_one_token(self):
        """An attribute, including brackets in strings, is a single token."""
        tokens = list(tokenize('#[doc = "a ] b"] use x;'))
        assert tokens[0].kind == "ATTR"
        assert tokens[0].text == 'doc = "a ] b"'

    def test_attribute_whitespace_collapsed(self):
        """Attribute bodies have their whitespace normalized."""
        (token, *_) = tokenize("#[cfg(  all(test,\n  unix) )]")
        assert token.text == "cfg( all(test, unix) )"

    def test_inner_attribute(self):
        """Inner attributes get their own token kind."""
        (token,) = tokenize("#![allow(dead_code)]")
        assert token.kind == "INNER_ATTR"

    def test_unterminated_block_comment(self):
        """An unterminated block comment is a ParseError."""
        with pytest.raises(ParseError):
            list(tokenize("use a; /* oops"))


# =============================================================================
# Parser Tests
# =============================================================================

class TestParseUses:
    """Tests for parse_uses()."""

    def test_simple_path(self):
        """A plain path parses into nested RawPath nodes ending in a RawName."""
        (stmt,) = parse_uses("use std::fmt::Debug;")
        assert stmt.tree == RawPath("std", RawPath("fmt", RawName("Debug")))
        assert stmt.visibility == ""
        assert stmt.leading_colon is False

    def test_rename(self):
        """'as' produces a RawRename."""
        (stmt,) = parse_uses("use std::error::Error as StdError;")
        assert stmt.tree == RawPath("std", RawPath("error", RawRename("Error", "StdError")))

    def test_underscore_rename(self):
        """'as _' is accepted."""
        (stmt,) = parse_uses("use std::io::Write as _;")
        assert stmt.tree == RawPath("std", RawPath("io", RawRename("Write", "_")))

    def test_glob(self):
        """A trailing '*' becomes a RawGlob."""
        (stmt,) = parse_uses("use crate::*;")
        assert stmt.tree == RawPath("crate", RawGlob())

    def test_nested_group(self):
        """Groups nest and may have a trailing comma."""
        (stmt,) = parse_uses("use a::{b, c::{d, *}, e as f,};")
        assert stmt.tree == RawPath(
            "a",
            RawGroup((
                RawName("b"),
                RawPath("c", RawGroup((RawName("d"), RawGlob()))),
                RawRename("e", "f"),
            )),
        )

    def test_empty_group(self):
        """An empty group parses."""
        (stmt,) = parse_uses("use a::{};")
        assert stmt.tree == RawPath("a", RawGroup(()))

    def test_multiple_statements_keep_fragment(self):
        """Every statement records the fragment index."""
        stmts = parse_uses("use a; use b;", fragment=3)
        assert [s.fragment for s in stmts] == [3, 3]

    def test_span(self):
        """Spans cover the item from its first token to the semicolon."""
        text = "  #[cfg(test)]\n  use a::b;\n"
        (stmt,) = parse_uses(text)
        start, end = stmt.span
        assert text[start:end] == "#[cfg(test)]\n  use a::b;"

    def test_raw_identifier(self):
        """Raw identifiers are kept verbatim."""
        (stmt,) = parse_uses("use a::r#type;")
        assert stmt.tree == RawPath("a", RawName("r#type"))


class TestParseMetadata:
    """Tests for visibility, attributes and leading colons."""

    @pytest.mark.parametrize(
        "text,visibility",
        [
            ("pub use a::b;", "pub"),
            ("pub(crate) use a::b;", "pub(crate)"),
            ("pub(super) use a::b;", "pub(super)"),
            ("pub(self) use a::b;", "pub(self)"),
            ("pub(in crate::x) use a::b;", "pub(in crate::x)"),
            ("pub ( in crate :: x ) use a::b;", "pub(in crate::x)"),
        ],
    )
    def test_visibility(self, text, visibility):
        """Visibility is normalized."""
        (stmt,) = parse_uses(text)
        assert stmt.visibility == visibility

    def test_invalid_visibility_scope(self):
        """Only crate/super/self/in are valid scopes."""
        with pytest.raises(ParseError, match="visibility scope"):
            parse_uses("pub(everyone) use a::b;")

    def test_attributes(self):
        """Outer attributes are collected in order."""
        (stmt,) = parse_uses("#[cfg(test)]\n#[allow(unused)]\nuse a::b;")
        assert stmt.attributes == ("cfg(test)", "allow(unused)")

    def test_leading_colon(self):
        """'use ::a' sets leading_colon."""
        (stmt,) = parse_uses("use ::serde::Serialize;")
        assert stmt.leading_colon is True
        assert stmt.tree == RawPath("serde", RawName("Serialize"))


class TestParseErrors:
    """Tests for malformed input."""

    def test_dangling_separator(self):
        """'a::' followed by ';' is an error with position and fragment."""
        with pytest.raises(ParseError) as exc_info:
            parse_uses("use a::b;\nuse a::;", fragment=2)
        error = exc_info.value
        assert error.fragment == 2
        assert error.line == 2
        assert error.column == 8
        assert "fragment 2" in str(error)

    def test_missing_semicolon(self):
        """A missing ';' is reported."""
        with pytest.raises(ParseError, match="expected ';'"):
            parse_uses("use a::b")

    def test_unclosed_group(self):
        """A group without '}' is reported."""
        with pytest.raises(ParseError):
            parse_uses("use a::{b, c;")

    def test_not_a_use_item(self):
        """Anything other than a use item is rejected."""
        with pytest.raises(ParseError, match="expected 'use'"):
            parse_uses("fn main() {}")

    def test_missing_alias(self):
        """'as' without a name is reported."""
        with pytest.raises(ParseError, match="alias"):
            parse_uses("use a::b as;")


# =============================================================================
# scan_use_block Tests
# =============================================================================

class TestScanUseBlock:
    """Tests for scan_use_block()."""

    def test_stops_at_first_other_item(self, sample_generated_file):
        """Only the leading run of use items is returned."""
        stmts = scan_use_block(sample_generated_file)
        assert len(stmts) == 5
        end = stmts[-1].span[1]
        assert sample_generated_file[end:].strip() == "pub struct Generated;"

    def test_attribute_on_following_item_not_consumed(self):
        """An attribute on a non-use item ends the block."""
        text = textwrap.dedent('''\
            use a::b;
            #[derive(Debug)]
            struct S;
        ''')
        stmts = scan_use_block(text)
        assert len(stmts) == 1

    def test_pub_fn_not_consumed(self):
        """'pub fn' ends the block."""
        stmts = scan_use_block("pub use a::b;\npub fn f() {}\n")
        assert len(stmts) == 1
        assert stmts[0].visibility == "pub"

    def test_no_uses(self):
        """A file without leading uses yields nothing."""
        assert scan_use_block("fn main() { let s = \"use a;\"; }") == []
