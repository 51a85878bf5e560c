"""Text front end for use declarations.

Turns source text such as::

    #[cfg(test)]
    pub(crate) use std::{fmt::Debug, io::*};

into ``UseStatement`` objects whose ``tree`` mirrors the written syntax
(paths, names, renames, globs and brace groups). No normalization happens
here; see ``usemerge.tree.normalizer`` for that.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, NamedTuple, Union

from usemerge.core.errors import ParseError

# *** Raw syntax ***


@dataclass(frozen=True)
class RawName:
    ident: str


@dataclass(frozen=True)
class RawRename:
    ident: str
    rename: str


@dataclass(frozen=True)
class RawGlob:
    pass


@dataclass(frozen=True)
class RawPath:
    ident: str
    tree: RawTree


@dataclass(frozen=True)
class RawGroup:
    items: tuple[RawTree, ...]


RawTree = Union[RawName, RawRename, RawGlob, RawPath, RawGroup]


@dataclass(frozen=True)
class UseStatement:
    """A single parsed ``use`` item.

    Attributes
    ----------
    tree : RawTree
        The path expression as written.
    visibility : str
        Normalized visibility (``""``, ``"pub"``, ``"pub(crate)"``, ...).
    attributes : tuple[str, ...]
        Outer attribute bodies with whitespace collapsed.
    leading_colon : bool
        True for ``use ::path``.
    fragment : int
        Index of the fragment this statement belongs to.
    span : tuple[int, int] | None
        Character offsets of the item in its source text, if parsed.
    """

    tree: RawTree
    visibility: str = ""
    attributes: tuple[str, ...] = ()
    leading_colon: bool = False
    fragment: int = 0
    span: tuple[int, int] | None = None


# *** Tokens ***


class Token(NamedTuple):
    kind: str
    text: str
    start: int
    end: int


_IDENT = re.compile(r"r#[A-Za-z_][A-Za-z0-9_]*|[A-Za-z_][A-Za-z0-9_]*")
_WHITESPACE = re.compile(r"\s+")
_PUNCT = {
    "::": "COLON2",
    "{": "LBRACE",
    "}": "RBRACE",
    ",": "COMMA",
    "*": "STAR",
    ";": "SEMI",
    "(": "LPAREN",
    ")": "RPAREN",
}


def _position(text: str, offset: int) -> tuple[int, int]:
    line = text.count("\n", 0, offset) + 1
    column = offset - (text.rfind("\n", 0, offset) + 1) + 1
    return line, column


def _error(text: str, offset: int, message: str, fragment: int) -> ParseError:
    line, column = _position(text, offset)
    return ParseError(message, fragment=fragment, line=line, column=column)


def _skip_block_comment(text: str, pos: int, fragment: int) -> int:
    depth = 0
    i = pos
    while i < len(text):
        if text.startswith("/*", i):
            depth += 1
            i += 2
        elif text.startswith("*/", i):
            depth -= 1
            i += 2
            if depth == 0:
                return i
        else:
            i += 1
    raise _error(text, pos, "unterminated block comment", fragment)


def _scan_attribute(text: str, pos: int, fragment: int) -> int:
    """Return the offset just past the ``]`` closing the attribute at ``pos``."""
    i = text.index("[", pos) + 1
    depth = 1
    while i < len(text):
        ch = text[i]
        if ch == '"':
            i += 1
            while i < len(text) and text[i] != '"':
                i += 2 if text[i] == "\\" else 1
        elif ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    raise _error(text, pos, "unterminated attribute", fragment)


def tokenize(text: str, fragment: int = 0) -> Iterator[Token]:
    """Lazily tokenize ``text``. Unknown characters become ``OTHER`` tokens."""
    pos = 0
    length = len(text)
    while pos < length:
        ws = _WHITESPACE.match(text, pos)
        if ws:
            pos = ws.end()
            continue
        if text.startswith("//", pos):
            newline = text.find("\n", pos)
            pos = length if newline == -1 else newline + 1
            continue
        if text.startswith("/*", pos):
            pos = _skip_block_comment(text, pos, fragment)
            continue
        if text.startswith("#[", pos) or text.startswith("#![", pos):
            end = _scan_attribute(text, pos, fragment)
            kind = "INNER_ATTR" if text[pos + 1] == "!" else "ATTR"
            body = text[text.index("[", pos) + 1 : end - 1]
            yield Token(kind, " ".join(body.split()), pos, end)
            pos = end
            continue
        ident = _IDENT.match(text, pos)
        if ident:
            yield Token("IDENT", ident.group(), pos, ident.end())
            pos = ident.end()
            continue
        punct = text[pos : pos + 2] if text.startswith("::", pos) else text[pos]
        yield Token(_PUNCT.get(punct, "OTHER"), punct, pos, pos + len(punct))
        pos += len(punct)


# *** Parser ***


class UseParser:
    """Recursive-descent parser over a token stream.

    Parameters
    ----------
    text : str
        Source text.
    fragment : int
        Fragment index recorded on statements and errors.
    """

    def __init__(self, text: str, fragment: int = 0) -> None:
        self.text = text
        self.fragment = fragment
        self._tokens = tokenize(text, fragment)
        self._buffer: list[Token] = []

    # -- token helpers --------------------------------------------------

    def _peek(self, offset: int = 0) -> Token | None:
        while len(self._buffer) <= offset:
            token = next(self._tokens, None)
            if token is None:
                return None
            self._buffer.append(token)
        return self._buffer[offset]

    def _next(self) -> Token:
        token = self._peek()
        if token is None:
            raise _error(self.text, len(self.text), "unexpected end of input", self.fragment)
        return self._buffer.pop(0)

    def _at(self, kind: str, text: str | None = None, offset: int = 0) -> bool:
        token = self._peek(offset)
        return token is not None and token.kind == kind and (text is None or token.text == text)

    def _expect(self, kind: str, what: str) -> Token:
        token = self._peek()
        if token is None or token.kind != kind:
            offset = len(self.text) if token is None else token.start
            found = "end of input" if token is None else repr(token.text)
            raise _error(self.text, offset, f"expected {what}, found {found}", self.fragment)
        return self._next()

    def _fail(self, message: str) -> ParseError:
        token = self._peek()
        offset = len(self.text) if token is None else token.start
        return _error(self.text, offset, message, self.fragment)

    # -- grammar --------------------------------------------------------

    def at_end(self) -> bool:
        return self._peek() is None

    def skip_inner_attributes(self) -> None:
        while self._at("INNER_ATTR"):
            self._next()

    def starts_use_item(self) -> bool:
        """Look ahead past attributes and visibility for the ``use`` keyword."""
        offset = 0
        while self._at("ATTR", offset=offset):
            offset += 1
        if self._at("IDENT", "pub", offset):
            offset += 1
            if self._at("LPAREN", offset=offset):
                while not self._at("RPAREN", offset=offset):
                    if self._peek(offset) is None:
                        return False
                    offset += 1
                offset += 1
        return self._at("IDENT", "use", offset)

    def parse_item(self) -> UseStatement:
        first = self._peek()
        if first is None:
            raise self._fail("expected a use item, found end of input")
        attributes = []
        while self._at("ATTR"):
            attributes.append(self._next().text)
        visibility = self._parse_visibility()
        if not self._at("IDENT", "use"):
            raise self._fail("expected 'use'")
        self._next()
        leading_colon = False
        if self._at("COLON2"):
            self._next()
            leading_colon = True
        tree = self._parse_tree()
        semi = self._expect("SEMI", "';'")
        return UseStatement(
            tree=tree,
            visibility=visibility,
            attributes=tuple(attributes),
            leading_colon=leading_colon,
            fragment=self.fragment,
            span=(first.start, semi.end),
        )

    def _parse_visibility(self) -> str:
        if not self._at("IDENT", "pub"):
            return ""
        self._next()
        if not self._at("LPAREN"):
            return "pub"
        self._next()
        scope = self._expect("IDENT", "visibility scope")
        if scope.text in ("crate", "super", "self"):
            self._expect("RPAREN", "')'")
            return f"pub({scope.text})"
        if scope.text != "in":
            raise _error(self.text, scope.start, f"invalid visibility scope {scope.text!r}", self.fragment)
        parts = [self._expect("IDENT", "path").text]
        while self._at("COLON2"):
            self._next()
            parts.append(self._expect("IDENT", "path segment").text)
        self._expect("RPAREN", "')'")
        return f"pub(in {'::'.join(parts)})"

    def _parse_tree(self) -> RawTree:
        if self._at("STAR"):
            self._next()
            return RawGlob()
        if self._at("LBRACE"):
            self._next()
            items: list[RawTree] = []
            while not self._at("RBRACE"):
                items.append(self._parse_tree())
                if not self._at("COMMA"):
                    break
                self._next()
            self._expect("RBRACE", "',' or '}'")
            return RawGroup(tuple(items))
        if not self._at("IDENT"):
            raise self._fail("expected identifier, '*' or '{'")
        ident = self._next().text
        if self._at("COLON2"):
            self._next()
            return RawPath(ident, self._parse_tree())
        if self._at("IDENT", "as"):
            self._next()
            rename = self._expect("IDENT", "alias after 'as'")
            return RawRename(ident, rename.text)
        return RawName(ident)


def parse_uses(text: str, fragment: int = 0) -> list[UseStatement]:
    """Parse text made up solely of use items.

    Raises
    ------
    ParseError
        If anything other than use items (and comments) is present.
    """
    parser = UseParser(text, fragment)
    statements = []
    while not parser.at_end():
        statements.append(parser.parse_item())
    return statements


def scan_use_block(text: str) -> list[UseStatement]:
    """Parse the contiguous use items at the top of a source file.

    Leading comments and inner attributes (``#![...]``) are skipped. Parsing
    stops at the first item that is not a use declaration.
    """
    parser = UseParser(text)
    parser.skip_inner_attributes()
    statements = []
    while parser.starts_use_item():
        statements.append(parser.parse_item())
    return statements
