"""
Parses the files of a Go package with tree-sitter.
"""

import codecs
import os
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

import tree_sitter_go as tsgo
from tree_sitter import Language, Node, Parser, Tree

from goresolve.exceptions import SyntaxParseError
from goresolve.logging_config import logger

GO_LANGUAGE = Language(tsgo.language())


def new_parser() -> Parser:
    """
    Create a Go parser.

    Parsers keep per-parse state, so each parse gets its own.
    """
    parser = Parser()
    parser.language = GO_LANGUAGE
    return parser


@dataclass
class SourceFile:
    """One parsed Go file."""

    name: str
    path: str
    source: bytes
    tree: Tree
    comments: List[Node] = field(default_factory=list)  # only filled when parsed with comments

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def text(self, node: Node) -> str:
        return self.source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

    def package_clause(self) -> Optional[Node]:
        for child in self.root.children:
            if child.type == "package_clause":
                return child
        return None

    def package_name(self) -> Optional[str]:
        clause = self.package_clause()
        if clause is None:
            return None
        for child in clause.children:
            if child.type == "package_identifier":
                return self.text(child)
        return None


@dataclass
class GoAst:
    """The syntax trees of a package, keyed by file name."""

    name: str
    files: Dict[str, SourceFile] = field(default_factory=dict)
    with_comments: bool = False


def _collect_comments(node: Node) -> List[Node]:
    comments = []
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "comment":
            comments.append(current)
        stack.extend(reversed(current.children))
    return comments


def parse_file(path: str, parse_comments: bool = False) -> SourceFile:
    """
    Parse a single Go file.

    Raises:
        SyntaxParseError: If the file cannot be read or contains syntax errors.
    """
    name = os.path.basename(path)
    try:
        with open(path, "rb") as f:
            source = f.read()
    except OSError as e:
        raise SyntaxParseError(path, str(e)) from e
    if source.startswith(codecs.BOM_UTF8):
        source = source[len(codecs.BOM_UTF8):]

    tree = new_parser().parse(source)
    if tree.root_node.has_error:
        raise SyntaxParseError(path, "syntax error")

    parsed = SourceFile(name=name, path=path, source=source, tree=tree)
    if parse_comments:
        parsed.comments = _collect_comments(tree.root_node)
    return parsed


def parse_dir(
    directory: str,
    filenames: Iterable[str],
    package_name: str,
    parse_comments: bool = False,
) -> GoAst:
    """
    Parse the named files of a directory as one package.

    Args:
        directory: Package directory.
        filenames: Files to parse, relative to directory.
        package_name: Package every file must declare.
        parse_comments: Keep comment nodes on each SourceFile.

    Returns:
        GoAst with one SourceFile per file name.

    Raises:
        SyntaxParseError: On unreadable files, syntax errors, or a file
            declaring another package.
    """
    ast = GoAst(name=package_name, with_comments=parse_comments)
    for name in filenames:
        parsed = parse_file(os.path.join(directory, name), parse_comments)
        declared = parsed.package_name()
        if declared != package_name:
            raise SyntaxParseError(parsed.path, f"No package named {package_name} (found {declared})")
        ast.files[name] = parsed

    logger.debug(f"Parsed {len(ast.files)} files of package {package_name} in {directory}")
    return ast
