import os
from typing import List, Optional, Protocol, Set

from goresolve.context import BuildContext, tags_of
from goresolve.exceptions import (
    AmbiguousPackageNameError,
    ConstraintSyntaxError,
    DirectoryReadError,
    MetadataParseError,
    NoBuildableSourceFilesError,
    NoSuchDirectoryError,
)
from goresolve.logging_config import logger
from goresolve.schemas import BuildPackage
from .config import (
    DOCUMENTATION_PACKAGE,
    GO_SOURCE_SUFFIX,
    GO_TEST_SUFFIX,
    IGNORED_FILE_PREFIXES,
)
from .constraints import constraint_of, good_os_arch_file
from .source import GoFileHeader, HeaderError, read_header


class MetadataLoader(Protocol):
    """Loads the build metadata of one import path under one root."""

    def load(self, import_path: str, root: str, ctx: BuildContext) -> BuildPackage:
        ...


def _go_files(directory: str) -> List[str]:
    names = []
    with os.scandir(directory) as entries:
        for entry in entries:
            name = entry.name
            if not name.endswith(GO_SOURCE_SUFFIX) or name.startswith(IGNORED_FILE_PREFIXES):
                continue
            if entry.is_file():
                names.append(name)
    return sorted(names)


class GoSourceLoader:
    """
    Reads a Go package directory the way the go tool selects files.

    Every .go file's header is scanned for its package clause, imports and
    build constraints. Files are sorted into the lists of BuildPackage;
    files excluded by the context end up in ignored_go_files.
    """

    def load(self, import_path: str, root: str, ctx: BuildContext) -> BuildPackage:
        """
        Load build metadata for import_path under root.

        Args:
            import_path: Slash-separated import path relative to root.
            root: Source root, as returned by SearchPath.to_import.
            ctx: Build context deciding which files take part.

        Returns:
            BuildPackage describing the directory.

        Raises:
            NoSuchDirectoryError: root/import_path is not a directory.
            DirectoryReadError: The directory cannot be listed.
            NoBuildableSourceFilesError: No file survives constraint checks.
            MetadataParseError: A file header or build constraint is malformed.
            AmbiguousPackageNameError: Files declare different package names.
        """
        root = os.path.normpath(root)
        directory = os.path.join(root, *import_path.split("/")) if import_path else root
        if not os.path.isdir(directory):
            raise NoSuchDirectoryError(import_path, directory)

        satisfied = tags_of(ctx)
        pkg = BuildPackage(
            import_path=import_path,
            dir=directory,
            name="",
            root=root,
            goroot=root == os.path.normpath(ctx.goroot_src()),
        )
        first_file: Optional[str] = None
        imports: Set[str] = set()
        test_imports: Set[str] = set()
        xtest_imports: Set[str] = set()

        try:
            names = _go_files(directory)
        except OSError as e:
            raise DirectoryReadError(import_path, directory, e) from e

        for name in names:
            header = self._read(import_path, directory, name)
            try:
                constraint = constraint_of(header.go_build, header.plus_build)
            except ConstraintSyntaxError as e:
                raise MetadataParseError(import_path, directory, name, str(e)) from e

            if not good_os_arch_file(name, satisfied) or (
                constraint is not None and not constraint.match(satisfied)
            ):
                pkg.ignored_go_files.append(name)
                continue

            pkg_name = header.package_name
            if pkg_name == DOCUMENTATION_PACKAGE:
                pkg.ignored_go_files.append(name)
                continue

            is_test = name.endswith(GO_TEST_SUFFIX)
            is_xtest = is_test and pkg_name.endswith("_test") and pkg_name != pkg.name
            if is_xtest:
                pkg_name = pkg_name[: -len("_test")]

            if not pkg.name:
                pkg.name = pkg_name
                first_file = name
            elif pkg_name != pkg.name:
                raise AmbiguousPackageNameError(
                    import_path, directory, [pkg.name, pkg_name], [first_file, name]
                )

            if is_xtest:
                pkg.xtest_go_files.append(name)
                xtest_imports.update(header.imports)
            elif is_test:
                pkg.test_go_files.append(name)
                test_imports.update(header.imports)
            elif header.imports_cgo:
                if not ctx.cgo_enabled:
                    pkg.ignored_go_files.append(name)
                    continue
                pkg.cgo_files.append(name)
                imports.update(header.imports)
            else:
                pkg.go_files.append(name)
                imports.update(header.imports)

        if not (pkg.go_files or pkg.cgo_files or pkg.test_go_files or pkg.xtest_go_files):
            raise NoBuildableSourceFilesError(import_path, directory)

        pkg.imports = sorted(imports)
        pkg.test_imports = sorted(test_imports)
        pkg.xtest_imports = sorted(xtest_imports)
        logger.debug(
            f"Loaded {import_path!r}: package {pkg.name}, {len(pkg.go_files) + len(pkg.cgo_files)} files, "
            f"{len(pkg.imports)} imports"
        )
        return pkg

    def _read(self, import_path: str, directory: str, name: str) -> GoFileHeader:
        path = os.path.join(directory, name)
        try:
            with open(path, "r", encoding="utf-8-sig") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise MetadataParseError(import_path, directory, name, str(e)) from e
        try:
            return read_header(text)
        except HeaderError as e:
            raise MetadataParseError(import_path, directory, name, str(e)) from e

