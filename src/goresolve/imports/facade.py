"""
Module-level import functions backed by one process-wide Importer.

The default importer is created on first use from the default build
context and lives until reset_importer() is called. Code that wants an
isolated cache should build its own Importer instead.
"""

import threading
from typing import Optional

from goresolve.context import BuildContext
from goresolve.package import Package
from goresolve.packages import Packages
from .closure import DependencyClosure
from .importer import Importer
from .tree_walker import TreeWalker, WalkResult

_default_importer: Optional[Importer] = None
_lock = threading.Lock()


def get_importer() -> Importer:
    """Get the process-wide importer, creating it on first use."""
    global _default_importer
    with _lock:
        if _default_importer is None:
            _default_importer = Importer()
        return _default_importer


def reset_importer() -> None:
    """Drop the process-wide importer and its cache (for tests, or after env changes)."""
    global _default_importer
    with _lock:
        _default_importer = None


def import_package(path: str, context: Optional[BuildContext] = None) -> Package:
    """Import a package. See Importer.import_package."""
    return get_importer().import_package(path, context)


def import_tree(root: str, context: Optional[BuildContext] = None) -> WalkResult:
    """Import every package in a directory tree. See TreeWalker.import_tree."""
    return TreeWalker(get_importer()).import_tree(root, context)


def import_all(context: Optional[BuildContext] = None) -> WalkResult:
    """Import every package under every source root. See TreeWalker.import_all."""
    return TreeWalker(get_importer()).import_all(context)


def import_deps(package: Package) -> Packages:
    """A package and all its dependencies. See DependencyClosure.dependencies."""
    return DependencyClosure(get_importer()).dependencies(package)


def import_rec(path: str, context: Optional[BuildContext] = None) -> Packages:
    """Import a package, then all its dependencies. See DependencyClosure.import_rec."""
    return DependencyClosure(get_importer()).import_rec(path, context)
