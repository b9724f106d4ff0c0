"""
Build constraints: parsing and evaluation of //go:build and // +build lines,
and of GOOS/GOARCH file name suffixes.

A constraint is a small expression tree. Each node answers match(tags): is
the expression satisfied when exactly the given tags are set?
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Collection, List, Optional, Tuple

from goresolve.exceptions import ConstraintSyntaxError
from .config import GO_SOURCE_SUFFIX, KNOWN_ARCH, KNOWN_OS
from .source import read_header

_VALID_TAG = re.compile(r"^[A-Za-z0-9_.]+$")
_GO_BUILD_TOKEN = re.compile(r"\s*(\|\||&&|!|\(|\)|[A-Za-z0-9_.]+)")


class Tag(ABC):
    """A build constraint expression."""

    @abstractmethod
    def match(self, tags: Collection[str]) -> bool:
        ...


@dataclass(frozen=True)
class Atom(Tag):
    name: str

    def match(self, tags: Collection[str]) -> bool:
        return self.name in tags


@dataclass(frozen=True)
class Not(Tag):
    tag: Tag

    def match(self, tags: Collection[str]) -> bool:
        return not self.tag.match(tags)


@dataclass(frozen=True)
class And(Tag):
    tags: Tuple[Tag, ...]

    def match(self, tags: Collection[str]) -> bool:
        return all(t.match(tags) for t in self.tags)


@dataclass(frozen=True)
class Or(Tag):
    tags: Tuple[Tag, ...]

    def match(self, tags: Collection[str]) -> bool:
        return any(t.match(tags) for t in self.tags)


def _atom(name: str, expression: str) -> Atom:
    if not _VALID_TAG.match(name):
        raise ConstraintSyntaxError(expression, f"invalid tag {name!r}")
    return Atom(name)


# // +build lines


def _parse_plus_term(term: str, line: str) -> Tag:
    if term.startswith("!"):
        return Not(_atom(term[1:], line))
    return _atom(term, line)


def _parse_plus_and(option: str, line: str) -> Tag:
    terms = option.split(",")
    if len(terms) == 1:
        return _parse_plus_term(terms[0], line)
    return And(tuple(_parse_plus_term(t, line) for t in terms))


def parse_plus_build_line(line: str) -> Optional[Tag]:
    """
    Parse the text after "+build": space separated options are ORed,
    comma separated terms within an option are ANDed, "!" negates a term.

    Returns None for an empty line.
    """
    options = line.split()
    if not options:
        return None
    if len(options) == 1:
        return _parse_plus_and(options[0], line)
    return Or(tuple(_parse_plus_and(o, line) for o in options))


def parse_plus_build(lines: List[str]) -> Optional[Tag]:
    """Combine several // +build lines; every line must be satisfied."""
    parsed = [t for t in (parse_plus_build_line(line) for line in lines) if t is not None]
    if not parsed:
        return None
    if len(parsed) == 1:
        return parsed[0]
    return And(tuple(parsed))


# //go:build expressions


class _GoBuildParser:
    """Recursive descent over ||, &&, ! and parentheses."""

    def __init__(self, expression: str):
        self.expression = expression
        self.tokens = self._tokenize(expression)
        self.pos = 0

    def _tokenize(self, expression: str) -> List[str]:
        tokens = []
        pos = 0
        text = expression.rstrip()
        while pos < len(text):
            m = _GO_BUILD_TOKEN.match(text, pos)
            if not m:
                raise ConstraintSyntaxError(expression, f"unexpected character at offset {pos}")
            tokens.append(m.group(1))
            pos = m.end()
        return tokens

    def _peek(self) -> Optional[str]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _next(self) -> str:
        tok = self._peek()
        if tok is None:
            raise ConstraintSyntaxError(self.expression, "unexpected end of expression")
        self.pos += 1
        return tok

    def parse(self) -> Tag:
        if not self.tokens:
            raise ConstraintSyntaxError(self.expression, "empty expression")
        tag = self._or()
        if self._peek() is not None:
            raise ConstraintSyntaxError(self.expression, f"unexpected {self._peek()!r}")
        return tag

    def _or(self) -> Tag:
        terms = [self._and()]
        while self._peek() == "||":
            self._next()
            terms.append(self._and())
        return terms[0] if len(terms) == 1 else Or(tuple(terms))

    def _and(self) -> Tag:
        terms = [self._not()]
        while self._peek() == "&&":
            self._next()
            terms.append(self._not())
        return terms[0] if len(terms) == 1 else And(tuple(terms))

    def _not(self) -> Tag:
        tok = self._next()
        if tok == "!":
            return Not(self._not())
        if tok == "(":
            tag = self._or()
            if self._next() != ")":
                raise ConstraintSyntaxError(self.expression, "missing )")
            return tag
        if tok in ("||", "&&", ")"):
            raise ConstraintSyntaxError(self.expression, f"unexpected {tok!r}")
        return _atom(tok, self.expression)


def parse_go_build(expression: str) -> Tag:
    """Parse the expression of a //go:build line."""
    return _GoBuildParser(expression).parse()


def constraint_of(go_build: Optional[str], plus_build: List[str]) -> Optional[Tag]:
    """
    The constraint of a file: its //go:build line when present, otherwise
    the conjunction of its // +build lines. None means unconstrained.
    """
    if go_build is not None:
        return parse_go_build(go_build)
    return parse_plus_build(plus_build)


def parse_tags(text: str) -> Optional[Tag]:
    """Read the build constraint from the header of Go source text."""
    header = read_header(text)
    return constraint_of(header.go_build, header.plus_build)


# File name suffixes


def good_os_arch_file(filename: str, tags: Collection[str]) -> bool:
    """
    Report whether a file name's GOOS/GOARCH suffixes allow it under tags.

    Recognized forms (before .go, optionally followed by _test):
        *_GOOS, *_GOARCH, *_GOOS_GOARCH
    The part before the first underscore never counts, so linux.go is
    unconstrained.
    """
    name = filename
    if name.endswith(GO_SOURCE_SUFFIX):
        name = name[: -len(GO_SOURCE_SUFFIX)]
    underscore = name.find("_")
    if underscore < 0:
        return True
    parts = name[underscore:].split("_")
    if parts and parts[-1] == "test":
        parts = parts[:-1]
    n = len(parts)
    if n >= 2 and parts[-2] in KNOWN_OS and parts[-1] in KNOWN_ARCH:
        return parts[-2] in tags and parts[-1] in tags
    if n >= 1 and (parts[-1] in KNOWN_OS or parts[-1] in KNOWN_ARCH):
        return parts[-1] in tags
    return True
