"""
Reads the header of a Go source file: leading comments (build constraints),
the package clause and the import declarations.

Only the header is scanned; tokenizing stops at the first declaration that
is not an import. This is all the loader needs to place a file in a package.
"""

import re
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from .config import CGO_PSEUDO_IMPORT

_TOKEN_RE = re.compile(
    r"""
      (?P<comment>//[^\n]*|/\*.*?\*/)
    | (?P<string>"(?:[^"\\\n]|\\.)*"|`[^`]*`)
    | (?P<ident>[^\W\d]\w*)
    | (?P<newline>\n)
    | (?P<space>[ \t\r\f\v]+)
    | (?P<other>.)
    """,
    re.VERBOSE | re.DOTALL,
)
_ESCAPE_RE = re.compile(r"\\(.)")

GO_BUILD_PREFIX = "//go:build"
PLUS_BUILD_PREFIX = "+build"

Token = Tuple[str, str]


class HeaderError(ValueError):
    """The header of a Go file is malformed."""


@dataclass
class GoFileHeader:
    """What the loader needs to know about one Go file."""

    package_name: str
    imports: List[str] = field(default_factory=list)
    go_build: Optional[str] = None  # expression of the //go:build line
    plus_build: List[str] = field(default_factory=list)  # text after each "// +build"

    @property
    def imports_cgo(self) -> bool:
        return CGO_PSEUDO_IMPORT in self.imports


def _tokens(text: str) -> Iterator[Token]:
    for m in _TOKEN_RE.finditer(text):
        kind = m.lastgroup
        value = m.group()
        if kind == "space":
            continue
        if kind == "other":
            if value in ('"', "`"):
                raise HeaderError("string literal not terminated")
            if value == "/" and text.startswith("/*", m.start()):
                raise HeaderError("comment not terminated")
        yield kind, value


def _significant(tokens: Iterator[Token]) -> Optional[Token]:
    """Next token that is not a comment or a statement separator."""
    for kind, value in tokens:
        if kind in ("comment", "newline") or value == ";":
            continue
        return kind, value
    return None


def _unquote(literal: str) -> str:
    body = literal[1:-1]
    if literal.startswith('"'):
        body = _ESCAPE_RE.sub(r"\1", body)
    return body


def _import_spec(token: Optional[Token], tokens: Iterator[Token]) -> str:
    if token is None:
        raise HeaderError("import declaration not terminated")
    kind, value = token
    if kind == "ident" or value == ".":
        token = _significant(tokens)
        if token is None:
            raise HeaderError("missing import path")
        kind, value = token
    if kind != "string":
        raise HeaderError(f"missing import path, found {value!r}")
    path = _unquote(value)
    if not path:
        raise HeaderError("empty import path")
    return path


def _constraint_line(comment: str, header: GoFileHeader) -> None:
    if comment.startswith(GO_BUILD_PREFIX):
        if header.go_build is not None:
            raise HeaderError("multiple //go:build comments")
        header.go_build = comment[len(GO_BUILD_PREFIX):].strip()
        return
    if comment.startswith("//"):
        text = comment[2:].strip()
        if text.startswith(PLUS_BUILD_PREFIX + " ") or text == PLUS_BUILD_PREFIX:
            header.plus_build.append(text[len(PLUS_BUILD_PREFIX):].strip())


def read_header(text: str) -> GoFileHeader:
    """
    Scan the header of Go source text.

    Args:
        text: Full contents of a .go file.

    Returns:
        GoFileHeader with package name, imports in source order and the raw
        build constraint lines found before the package clause.

    Raises:
        HeaderError: If there is no package clause, an import declaration is
            malformed, or a literal or comment is not terminated.
    """
    header = GoFileHeader(package_name="")
    tokens = _tokens(text)

    for kind, value in tokens:
        if kind == "comment":
            _constraint_line(value, header)
        elif kind == "newline" or value == ";":
            continue
        elif kind == "ident" and value == "package":
            break
        else:
            raise HeaderError(f"expected 'package', found {value!r}")
    else:
        raise HeaderError("expected 'package', found EOF")

    token = _significant(tokens)
    if token is None or token[0] != "ident":
        raise HeaderError("expected package name")
    header.package_name = token[1]

    while True:
        token = _significant(tokens)
        if token is None or token != ("ident", "import"):
            break
        token = _significant(tokens)
        if token is not None and token[1] == "(":
            while True:
                token = _significant(tokens)
                if token is None:
                    raise HeaderError("import block not terminated")
                if token[1] == ")":
                    break
                header.imports.append(_import_spec(token, tokens))
        else:
            header.imports.append(_import_spec(token, tokens))

    return header
