"""
Best-effort import of every package in a directory tree.
"""

import os
from typing import List, NamedTuple, Optional

from goresolve.context import BuildContext
from goresolve.exceptions import GoResolveError, PartialWalkError
from goresolve.loader.config import GO_SOURCE_SUFFIX
from goresolve.logging_config import logger
from goresolve.packages import Packages
from goresolve.tracing import trace
from .importer import Importer


class WalkResult(NamedTuple):
    """Packages found by a walk, and the first error met on the way (if any)."""

    packages: Packages
    error: Optional[PartialWalkError]


class _WalkState:
    def __init__(self):
        self.packages = Packages()
        self.first_error: Optional[PartialWalkError] = None

    def fail(self, directory: str, cause: Exception) -> None:
        logger.debug(f"Walk error in {directory}: {cause}")
        if self.first_error is None:
            self.first_error = PartialWalkError(directory, cause)


class TreeWalker:
    """
    Imports every directory holding Go files under a root.

    A failure in one directory never stops the walk: it is recorded (only the
    first one is kept) and every sibling and subdirectory is still visited.
    """

    def __init__(self, importer: Importer):
        self.importer = importer

    @trace
    def import_tree(self, root: str, context: Optional[BuildContext] = None) -> WalkResult:
        """
        Import every package in the tree rooted at root.

        root itself need not be a package. Packages come back in pre-order of
        the directory walk (names sorted), not in dependency order.

        Returns:
            WalkResult(packages, error). error is the first PartialWalkError,
            or None when every directory imported cleanly.
        """
        state = _WalkState()
        root = os.path.abspath(root)
        self._walk(root, context, state)
        logger.info(
            f"Imported {len(state.packages)} packages under {root}"
            + (f" (first error: {state.first_error})" if state.first_error else "")
        )
        return WalkResult(state.packages, state.first_error)

    @trace
    def import_all(self, context: Optional[BuildContext] = None) -> WalkResult:
        """
        Import every package under every source root.

        Packages of all roots are concatenated in search order; only the first
        error across all roots is reported.
        """
        packages = Packages()
        first: Optional[PartialWalkError] = None
        for root in self.importer.search_path.roots:
            result = self.import_tree(root, context)
            packages.extend(result.packages)
            if first is None:
                first = result.error
        return WalkResult(packages, first)

    def _walk(self, root: str, context: Optional[BuildContext], state: _WalkState) -> None:
        stack = [root]
        while stack:
            directory = stack.pop()
            subdirs: List[str] = []
            has_go_files = False

            try:
                with os.scandir(directory) as entries:
                    for entry in sorted(entries, key=lambda e: e.name):
                        if entry.is_dir(follow_symlinks=False):
                            subdirs.append(entry.path)
                        elif entry.name.endswith(GO_SOURCE_SUFFIX):
                            has_go_files = True
            except OSError as e:
                state.fail(directory, e)

            if has_go_files:
                try:
                    state.packages.append(self.importer.import_package(directory, context))
                except GoResolveError as e:
                    state.fail(directory, e)

            # reversed so the first subdirectory is popped first
            stack.extend(reversed(subdirs))
