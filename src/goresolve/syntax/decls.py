"""
Top-level declarations of a parsed package, searchable by name.

A Decl is a func or method, or a type/const/var declaration together with
its specs. Import declarations are never Decls.
"""

import re
from dataclasses import dataclass
from typing import List, Protocol, Tuple, Union

from tree_sitter import Node

from .docs import SPEC_TYPES, specs_of
from .parser import GoAst, SourceFile

FUNC_KINDS = ("func", "method")


class StringMatcher(Protocol):
    """Anything that can tell whether a name matches."""

    def match_string(self, s: str) -> bool:
        ...


class PrefixMatcher(str):
    """Matches every string starting with this prefix."""

    def match_string(self, s: str) -> bool:
        return s.startswith(self)


class RegexMatcher:
    """Matches strings containing a match of a regular expression anywhere."""

    def __init__(self, pattern: Union[str, re.Pattern]):
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern

    def match_string(self, s: str) -> bool:
        return self.pattern.search(s) is not None


@dataclass
class Spec:
    """One spec of a type, const or var declaration."""

    node: Node
    names: Tuple[str, ...]
    values: Tuple[Node, ...] = ()


@dataclass
class Decl:
    kind: str  # "func", "method", "type", "const" or "var"
    node: Node
    file: SourceFile
    specs: Tuple[Spec, ...] = ()

    @property
    def names(self) -> List[str]:
        if self.kind in FUNC_KINDS:
            name = self.node.child_by_field_name("name")
            return [self.file.text(name)] if name is not None else []
        return [n for spec in self.specs for n in spec.names]

    @property
    def name(self) -> str:
        names = self.names
        return names[0] if names else ""

    @property
    def line(self) -> int:
        """1-based line of the declaration, or of its spec once split."""
        node = self.specs[0].node if len(self.specs) == 1 else self.node
        return node.start_point[0] + 1

    def text(self) -> str:
        return self.file.text(self.node)

    def __repr__(self) -> str:
        return f"<Decl {self.kind} {', '.join(self.names)} ({self.file.name}:{self.line})>"


class Decls(list):
    """A list of Decl with filters by kind and by name."""

    def funcs(self) -> "Decls":
        """Funcs and methods."""
        return Decls(d for d in self if d.kind in FUNC_KINDS)

    def types(self) -> "Decls":
        return Decls(d for d in self if d.kind == "type")

    def consts(self) -> "Decls":
        return Decls(d for d in self if d.kind == "const")

    def vars(self) -> "Decls":
        return Decls(d for d in self if d.kind == "var")

    def split_specs(self) -> "Decls":
        """
        One Decl per spec, and one per name where a spec assigns as many
        values as it declares names.

        var a, b, c = 1, 2, 3 splits into three Decls; var a, b, c = f() does
        not split. Funcs pass through unchanged.
        """
        out = Decls()
        for d in self:
            if d.kind in FUNC_KINDS:
                out.append(d)
                continue
            for spec in d.specs:
                if len(spec.names) > 1 and len(spec.names) == len(spec.values):
                    for name, value in zip(spec.names, spec.values):
                        out.append(Decl(d.kind, d.node, d.file, (Spec(spec.node, (name,), (value,)),)))
                else:
                    out.append(Decl(d.kind, d.node, d.file, (spec,)))
        return out

    def named(self, matcher: Union[StringMatcher, re.Pattern]) -> "Decls":
        """
        Decls with a name accepted by matcher.

        A compiled regular expression is searched, not anchored. Without
        split_specs a declaration matches when any of its names does.
        """
        if isinstance(matcher, re.Pattern):
            matcher = RegexMatcher(matcher)
        return Decls(d for d in self if any(matcher.match_string(n) for n in d.names))


def _spec(node: Node, source: SourceFile) -> Spec:
    names = tuple(source.text(n) for n in node.children_by_field_name("name"))
    value = node.child_by_field_name("value")
    values = tuple(c for c in value.named_children if c.type != "comment") if value is not None else ()
    return Spec(node, names, values)


def collect_decls(ast: GoAst) -> Decls:
    """Every top-level non-import declaration, in file name then source order."""
    decls = Decls()
    for filename in sorted(ast.files):
        source = ast.files[filename]
        for node in source.root.children:
            if node.type == "function_declaration":
                decls.append(Decl("func", node, source))
            elif node.type == "method_declaration":
                decls.append(Decl("method", node, source))
            elif node.type in SPEC_TYPES:
                kind, spec_types = SPEC_TYPES[node.type]
                specs = tuple(_spec(s, source) for s in specs_of(node, spec_types))
                decls.append(Decl(kind, node, source, specs))
    return decls
