"""
Shared pytest fixtures for the usemerge test suite.

This module provides:
- Sample use fragments (the two-fragment scenario and variations)
- Default and customised configurations
- Helpers to merge fragments given as text

Fixture Naming Convention:
- sample_* : Fixtures that provide sample source strings
- config_* : Fixtures that provide UseMergeConfig instances
"""
from __future__ import annotations

import textwrap

import pytest

from usemerge import MergedImportSet, UseMergeConfig, forest_from_text, merge_forests


def merge_text(*fragments: str, absorb_unaliased: bool = True) -> MergedImportSet:
    """Merge fragments given as source text, indexed in order."""
    forests = [forest_from_text(text, index) for index, text in enumerate(fragments)]
    return merge_forests(forests, absorb_unaliased=absorb_unaliased)


def leaf_strings(merged: MergedImportSet) -> list[str]:
    """Sorted ``path as alias`` strings of every merged leaf."""
    return [str(leaf) for leaf in merged.leaves()]


# =============================================================================
# Sample Fragments
# =============================================================================

@pytest.fixture
def sample_fragments() -> list[str]:
    """
    The two fragments used throughout the documentation.

    Contains:
    - A crate-local import and a glob over the same crate root
    - Two std::fmt traits split across fragments
    - A renamed std import and an external crate import
    """
    return [
        textwrap.dedent('''
            use crate::Test;
            use std::error::Error as StdError;
            use std::fmt::Debug;
        '''),
        textwrap.dedent('''
            use syn::ItemUse;
            use std::fmt::Display;
            use crate::*;
        '''),
    ]


@pytest.fixture
def sample_generated_file() -> str:
    """A generated source file with a messy leading use section."""
    return textwrap.dedent('''\
        //! Generated code, do not edit.
        #![allow(unused_imports)]

        use crate::Test;
        use std::fmt::Display;
        use serde::Serialize;
        use std::fmt::Debug;
        use crate::*;

        pub struct Generated;
    ''')


# =============================================================================
# Configurations
# =============================================================================

@pytest.fixture
def config_default() -> UseMergeConfig:
    """Default configuration (module granularity, std/alloc/core/proc_macro/test as core)."""
    return UseMergeConfig()


@pytest.fixture
def config_crate_granularity() -> UseMergeConfig:
    """Configuration emitting one nested tree per root."""
    return UseMergeConfig(granularity="crate")


# =============================================================================
# Helpers
# =============================================================================

@pytest.fixture
def merge():
    """The ``merge_text`` helper as a fixture."""
    return merge_text


@pytest.fixture
def leaves():
    """The ``leaf_strings`` helper as a fixture."""
    return leaf_strings
