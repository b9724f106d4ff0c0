"""
Package documentation extracted from tree-sitter syntax trees.

Mirrors what godoc shows: the package comment, and the doc comment of every
top-level func, method, type, const and var.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

from tree_sitter import Node

from goresolve.exceptions import GoResolveError
from goresolve.loader.config import DOCUMENTATION_PACKAGE
from goresolve.loader.source import HeaderError, read_header
from goresolve.logging_config import logger
from .parser import GoAst, SourceFile, parse_file

SPEC_TYPES = {
    "type_declaration": ("type", ("type_spec", "type_alias")),
    "const_declaration": ("const", ("const_spec",)),
    "var_declaration": ("var", ("var_spec",)),
}


class DocMode(Enum):
    EXPORTED = "exported"  # exported declarations only
    ALL_DECLS = "all"  # exported and unexported


@dataclass
class DeclDoc:
    name: str
    kind: str  # "func", "method", "type", "const" or "var"
    filename: str
    line: int
    doc: str = ""
    receiver: Optional[str] = None  # receiver type name for methods


@dataclass
class PackageDoc:
    import_path: str
    name: str
    doc: str = ""
    funcs: List[DeclDoc] = field(default_factory=list)
    types: List[DeclDoc] = field(default_factory=list)
    consts: List[DeclDoc] = field(default_factory=list)
    vars: List[DeclDoc] = field(default_factory=list)

    def synopsis(self) -> str:
        """First sentence of the package comment."""
        text = " ".join(self.doc.split())
        end = text.find(". ")
        return text if end < 0 else text[: end + 1]


def is_exported(name: str) -> bool:
    return bool(name) and name[0].isupper()


def comment_text(raw: str) -> str:
    """Strip comment markers from a // line or a /* */ block."""
    if raw.startswith("//"):
        line = raw[2:]
        return line[1:] if line.startswith(" ") else line
    body = raw[2:-2] if raw.startswith("/*") else raw
    lines = [line.strip() for line in body.splitlines()]
    return "\n".join(lines).strip()


def _doc_before(comments: List[Node], node: Node, source: SourceFile) -> str:
    """Text of the comment group ending on the line just above node."""
    group: List[Node] = []
    expected = node.start_point[0] - 1
    for comment in reversed(comments):
        if comment.end_point[0] != expected:
            break
        group.append(comment)
        expected = comment.start_point[0] - 1
    return "\n".join(comment_text(source.text(c)) for c in reversed(group)).strip()


def _receiver_type(node: Node, source: SourceFile) -> Optional[str]:
    receiver = node.child_by_field_name("receiver")
    if receiver is None:
        return None
    for param in receiver.children:
        if param.type == "parameter_declaration":
            type_node = param.child_by_field_name("type")
            if type_node is None:
                return None
            text = source.text(type_node).lstrip("*").strip()
            return text.split("[", 1)[0]
    return None


def _spec_names(spec: Node, source: SourceFile) -> List[str]:
    return [source.text(n) for n in spec.children_by_field_name("name")]


def specs_of(decl: Node, spec_types: Iterable[str]) -> List[Node]:
    found = []
    stack = list(reversed(decl.children))
    while stack:
        node = stack.pop()
        if node.type in spec_types:
            found.append(node)
        elif node.type.endswith("_list"):
            stack.extend(reversed(node.children))
    return found


def _file_decls(source: SourceFile) -> List[DeclDoc]:
    decls: List[DeclDoc] = []
    pending: List[Node] = []
    for node in source.root.children:
        if node.type == "comment":
            pending.append(node)
            continue
        doc = _doc_before(pending, node, source)
        pending = []
        line = node.start_point[0] + 1

        if node.type == "function_declaration":
            name = node.child_by_field_name("name")
            if name is not None:
                decls.append(DeclDoc(source.text(name), "func", source.name, line, doc))
        elif node.type == "method_declaration":
            name = node.child_by_field_name("name")
            if name is not None:
                decls.append(DeclDoc(
                    source.text(name), "method", source.name, line, doc,
                    receiver=_receiver_type(node, source),
                ))
        elif node.type in SPEC_TYPES:
            kind, spec_types = SPEC_TYPES[node.type]
            for spec in specs_of(node, spec_types):
                for spec_name in _spec_names(spec, source):
                    decls.append(DeclDoc(spec_name, kind, source.name, spec.start_point[0] + 1, doc))
    return decls


def package_comment(source: SourceFile) -> str:
    clause = source.package_clause()
    if clause is None:
        return ""
    comments = [c for c in source.root.children if c.type == "comment" and c.end_byte <= clause.start_byte]
    return _doc_before(comments, clause, source)


def _visible(decl: DeclDoc, mode: DocMode) -> bool:
    if mode is DocMode.ALL_DECLS:
        return True
    if decl.kind == "method":
        return is_exported(decl.name) and is_exported(decl.receiver or "")
    return is_exported(decl.name)


def build_package_doc(ast: GoAst, import_path: str, mode: DocMode = DocMode.EXPORTED) -> PackageDoc:
    """
    Collect documentation for a parsed package.

    Package comments of all files are joined in file name order. Declarations
    are sorted by name within each kind.
    """
    doc = PackageDoc(import_path=import_path, name=ast.name)
    comments = []
    for filename in sorted(ast.files):
        source = ast.files[filename]
        text = package_comment(source)
        if text:
            comments.append(text)
        for decl in _file_decls(source):
            if not _visible(decl, mode):
                continue
            if decl.kind in ("func", "method"):
                doc.funcs.append(decl)
            else:
                getattr(doc, decl.kind + "s").append(decl)
    doc.doc = "\n\n".join(comments)
    for group in (doc.funcs, doc.types, doc.consts, doc.vars):
        group.sort(key=lambda d: (d.receiver or "", d.name))
    return doc


def documentation_comment(directory: str, ignored_files: Iterable[str]) -> Optional[str]:
    """
    Package comment of the first ignored file declaring package documentation.

    Ignored files may not be meant to parse at all, so unreadable or
    malformed ones are skipped.
    """
    for name in ignored_files:
        path = os.path.join(directory, name)
        try:
            with open(path, "r", encoding="utf-8-sig") as f:
                header = read_header(f.read())
            if header.package_name != DOCUMENTATION_PACKAGE:
                continue
            return package_comment(parse_file(path, parse_comments=True))
        except (OSError, UnicodeDecodeError, HeaderError, GoResolveError) as e:
            logger.debug(f"Skipping ignored file {path}: {e}")
    return None
