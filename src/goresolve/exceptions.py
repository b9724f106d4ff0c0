# Custom exceptions for goresolve

from typing import List, Optional


class GoResolveError(Exception):
    """Base exception for all application-specific errors."""
    pass


class ConfigError(GoResolveError):
    """Raised for unusable GO* environment settings."""
    pass


class ArgumentError(GoResolveError):
    """Raised for unusable command line package arguments."""
    pass


class ResolutionError(GoResolveError):
    """Raised when a path is not under any registered source root."""
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Directory {path} not in $GOPATH")


class LoaderError(GoResolveError):
    """Base class for failures reported by a metadata loader."""
    def __init__(self, import_path: str, directory: str, message: str):
        self.import_path = import_path
        self.directory = directory
        self.message = message
        super().__init__(message)


class NoSuchDirectoryError(LoaderError):
    """Raised when the directory for an import path does not exist."""
    def __init__(self, import_path: str, directory: str):
        super().__init__(import_path, directory, f"cannot find package {import_path!r} in {directory}")


class DirectoryReadError(LoaderError):
    """Raised when a package directory exists but cannot be listed."""
    def __init__(self, import_path: str, directory: str, cause: Exception):
        self.cause = cause
        super().__init__(import_path, directory, f"cannot read directory {directory}: {cause}")


class NoBuildableSourceFilesError(LoaderError):
    """Raised when a directory holds no Go files matching the build context."""
    def __init__(self, import_path: str, directory: str):
        super().__init__(import_path, directory, f"no buildable Go source files in {directory}")


class MetadataParseError(LoaderError):
    """Raised when a Go file's package clause or import block cannot be read."""
    def __init__(self, import_path: str, directory: str, filename: str, message: str):
        self.filename = filename
        super().__init__(import_path, directory, f"{directory}/{filename}: {message}")


class AmbiguousPackageNameError(LoaderError):
    """Raised when the files of one directory declare different packages."""
    def __init__(self, import_path: str, directory: str, names: List[str], files: List[str]):
        self.names = names
        self.files = files
        super().__init__(
            import_path,
            directory,
            f"found packages {names[0]} ({files[0]}) and {names[1]} ({files[1]}) in {directory}",
        )


class PackageImportError(GoResolveError):
    """Raised when the metadata loader fails for a resolved import path."""
    def __init__(self, import_path: str, cause: Exception):
        self.import_path = import_path
        self.cause = cause
        super().__init__(f"import {import_path!r}: {cause}")


class PartialWalkError(GoResolveError):
    """First failure met while walking a tree; the walk itself went on."""
    def __init__(self, directory: str, cause: Exception):
        self.directory = directory
        self.cause = cause
        super().__init__(f"{directory}: {cause}")


class ClosureError(GoResolveError):
    """Raised when any dependency of a package cannot be imported."""
    def __init__(self, root: str, import_path: str, cause: Exception):
        self.root = root
        self.import_path = import_path
        self.cause = cause
        super().__init__(f"dependencies of {root!r}: cannot import {import_path!r}: {cause}")


class ConstraintSyntaxError(GoResolveError):
    """Raised for a malformed //go:build or // +build expression."""
    def __init__(self, expression: str, message: Optional[str] = None):
        self.expression = expression
        detail = f": {message}" if message else ""
        super().__init__(f"invalid build constraint {expression!r}{detail}")


class SyntaxParseError(GoResolveError):
    """Raised when tree-sitter cannot parse a Go file of a package."""
    def __init__(self, filename: str, message: str):
        self.filename = filename
        self.message = message
        super().__init__(f"Failed to parse {filename}: {message}")
