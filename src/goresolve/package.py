"""
The Package record handed out by the importer.
"""

import os
from typing import Dict, List, Optional

from goresolve.context import BuildContext
from goresolve.exceptions import ConstraintSyntaxError, SyntaxParseError
from goresolve.loader.constraints import Tag, parse_tags
from goresolve.loader.source import HeaderError
from goresolve.logging_config import logger
from goresolve.schemas import BuildPackage, PackageSummary
from goresolve.syntax import (
    Decls,
    DocMode,
    GoAst,
    PackageDoc,
    SourceFile,
    build_package_doc,
    collect_decls,
    documentation_comment,
    parse_dir,
)


class Package:
    """
    A Go package: the context it was imported with plus its build metadata.

    The syntax tree, documentation and build tag index are derived lazily and
    computed at most once. Imports are kept as import path strings; resolving
    them to Packages always goes back through the importer.
    """

    def __init__(self, context: BuildContext, build: BuildPackage):
        self.context = context
        self.build = build
        self.ast: Optional[GoAst] = None
        self.doc: Optional[PackageDoc] = None
        # filename -> constraint, only for files that have one
        self._tags: Optional[Dict[str, Tag]] = None

    @property
    def import_path(self) -> str:
        return self.build.import_path

    @property
    def name(self) -> str:
        return self.build.name

    @property
    def dir(self) -> str:
        return self.build.dir

    @property
    def imports(self) -> List[str]:
        return self.build.imports

    @property
    def goroot(self) -> bool:
        return self.build.goroot

    def __repr__(self) -> str:
        return f"<Package {self.import_path!r} ({self.build.dir})>"

    def summary(self) -> PackageSummary:
        return PackageSummary(
            import_path=self.import_path,
            name=self.name,
            dir=self.dir,
            goroot=self.goroot,
            files=self.build.source_files,
            imports=self.imports,
        )

    def parse(self, parse_comments: bool = False) -> GoAst:
        """
        Parse the package's Go files and set self.ast.

        It is not necessary to parse with comments before calling parse_docs,
        which does its own parse.
        """
        if self.ast is not None:
            return self.ast
        self.ast = parse_dir(self.build.dir, self.build.source_files, self.build.name, parse_comments)
        return self.ast

    def parse_docs(self, mode: DocMode = DocMode.EXPORTED) -> PackageDoc:
        """
        Build the package documentation and set self.doc.

        If an ignored file declares package documentation (and this package
        is not itself named documentation), its package comment replaces the
        package's own.
        """
        if self.doc is not None:
            return self.doc
        ast = parse_dir(self.build.dir, self.build.source_files, self.build.name, parse_comments=True)
        doc = build_package_doc(ast, self.import_path, mode)

        if self.build.name != "documentation":
            override = documentation_comment(self.build.dir, self.build.ignored_go_files)
            if override:
                doc.doc = override

        self.doc = doc
        return self.doc

    def parse_tags(self) -> Dict[str, Tag]:
        """
        Read the build constraint of every file in go_files.

        Only constrained files appear in the result.
        """
        if self._tags is not None:
            return self._tags
        tags: Dict[str, Tag] = {}
        for name in self.build.go_files:
            path = os.path.join(self.build.dir, name)
            try:
                with open(path, "r", encoding="utf-8-sig") as f:
                    constraint = parse_tags(f.read())
            except (OSError, UnicodeDecodeError, HeaderError, ConstraintSyntaxError) as e:
                raise SyntaxParseError(path, str(e)) from e
            if constraint is not None:
                tags[name] = constraint
        self._tags = tags
        logger.debug(f"{self.import_path}: {len(tags)} of {len(self.build.go_files)} files have build constraints")
        return self._tags

    def files_matching(self, *tags: str) -> List[str]:
        """
        Files of go_files whose build constraint matches tags.

        Files without a constraint never match, and no tags match nothing:
        this selects the files that exist specifically for those tags.
        """
        if not tags:
            return []
        constraints = self.parse_tags()
        return [f for f in self.build.go_files if f in constraints and constraints[f].match(tags)]

    def ast_files_matching(self, *tags: str) -> List[SourceFile]:
        """files_matching, looked up in the parsed syntax trees."""
        ast = self.parse()
        return [ast.files[f] for f in self.files_matching(*tags)]

    def decls(self) -> Decls:
        """
        Every top-level declaration except imports, parsing the package
        first if needed.
        """
        return collect_decls(self.parse())
