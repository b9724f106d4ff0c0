"""
This facade exposes the public API for the syntax module.
"""
from .parser import GoAst, SourceFile, parse_dir, parse_file
from .docs import DeclDoc, DocMode, PackageDoc, build_package_doc, documentation_comment
from .decls import Decl, Decls, PrefixMatcher, RegexMatcher, Spec, StringMatcher, collect_decls

__all__ = [
    "GoAst",
    "SourceFile",
    "parse_dir",
    "parse_file",
    "DeclDoc",
    "DocMode",
    "PackageDoc",
    "build_package_doc",
    "documentation_comment",
    "Decl",
    "Decls",
    "PrefixMatcher",
    "RegexMatcher",
    "Spec",
    "StringMatcher",
    "collect_decls",
]
