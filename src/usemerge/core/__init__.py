"""
Core module: configuration, errors and result types.
"""
from __future__ import annotations

from .errors import (
    AliasConflictError,
    AttributeConflictError,
    BindingConflictError,
    ConfigError,
    ConflictError,
    ParseError,
    UseMergeError,
)
from .results import BatchResult, ErrorResult, Result
from .config import Granularity, UseMergeConfig

__all__ = [
    "UseMergeConfig",
    "Granularity",
    "Result",
    "ErrorResult",
    "BatchResult",
    "UseMergeError",
    "ParseError",
    "ConflictError",
    "AliasConflictError",
    "BindingConflictError",
    "AttributeConflictError",
    "ConfigError",
]
