"""Exceptions raised by the parsing, merging and configuration layers.

Every exception keeps its details as attributes so callers can report the
conflicting paths, aliases and fragment indices verbatim.
"""
from __future__ import annotations

from typing import Sequence


class UseMergeError(Exception):
    """Base class for all usemerge errors."""


class ParseError(UseMergeError):
    """A use statement is malformed.

    Attributes
    ----------
    fragment : int | None
        Index of the input fragment the statement came from.
    line : int | None
        1-based line of the problem, when parsed from text.
    column : int | None
        1-based column of the problem, when parsed from text.
    """

    def __init__(
        self,
        message: str,
        fragment: int | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        self.message = message
        self.fragment = fragment
        self.line = line
        self.column = column
        super().__init__(str(self))

    def __str__(self) -> str:
        where = []
        if self.fragment is not None:
            where.append(f"fragment {self.fragment}")
        if self.line is not None:
            where.append(f"line {self.line}, column {self.column}")
        if where:
            return f"{self.message} ({', '.join(where)})"
        return self.message


class ConflictError(UseMergeError):
    """Two leaves disagree and cannot be merged.

    Attributes
    ----------
    fragments : tuple[int, ...]
        Indices of the fragments holding the competing leaves.
    """

    fragments: tuple[int, ...] = ()


class AliasConflictError(ConflictError):
    """The same path is renamed to two different aliases."""

    def __init__(self, path: str, aliases: Sequence[str], fragments: Sequence[int] = ()) -> None:
        self.path = path
        self.aliases = tuple(aliases)
        self.fragments = tuple(fragments)
        super().__init__(
            f"'{path}' is imported under conflicting aliases "
            f"{' and '.join(repr(a) for a in self.aliases)}"
            f"{_describe_fragments(self.fragments)}"
        )


class BindingConflictError(ConflictError):
    """The same alias is bound to two different paths."""

    def __init__(self, alias: str, paths: Sequence[str], fragments: Sequence[int] = ()) -> None:
        self.alias = alias
        self.paths = tuple(paths)
        self.fragments = tuple(fragments)
        super().__init__(
            f"alias '{alias}' is bound to both "
            f"{' and '.join(repr(p) for p in self.paths)}"
            f"{_describe_fragments(self.fragments)}"
        )


class AttributeConflictError(ConflictError):
    """The same import appears with differing visibility, attributes or leading colons."""

    def __init__(self, path: str, data: Sequence[str], fragments: Sequence[int] = ()) -> None:
        self.path = path
        self.data = tuple(data)
        self.fragments = tuple(fragments)
        super().__init__(
            f"'{path}' is imported with differing attributes "
            f"{' and '.join(repr(d) for d in self.data)}"
            f"{_describe_fragments(self.fragments)}"
        )


class ConfigError(UseMergeError):
    """The configuration is malformed.

    Attributes
    ----------
    key : str | None
        The offending configuration key, if known.
    """

    def __init__(self, message: str, key: str | None = None) -> None:
        self.message = message
        self.key = key
        super().__init__(f"{key}: {message}" if key else message)


def _describe_fragments(fragments: tuple[int, ...]) -> str:
    if not fragments:
        return ""
    return f" (fragments {', '.join(str(f) for f in fragments)})"
