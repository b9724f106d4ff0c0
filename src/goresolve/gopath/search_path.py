"""
Mapping of filesystem paths and import paths onto the source roots.
"""

import os
from typing import Iterable, List, Optional, Tuple

from goresolve.context import BuildContext, default_context
from goresolve.exceptions import ResolutionError
from goresolve.logging_config import logger


def _isdir(path: str) -> bool:
    return os.path.isdir(path)


class SearchPath:
    """
    Ordered list of source roots ($GOROOT/src, then every $GOPATH/src).

    Roots are normalized once, with a trailing separator, so that a plain
    prefix test tells whether a path lies under a root.
    """

    def __init__(self, roots: Iterable[str]):
        self.roots: List[str] = [os.path.normpath(str(r)) + os.sep for r in roots]

    @classmethod
    def from_context(cls, ctx: Optional[BuildContext] = None) -> "SearchPath":
        """Build the search path from a context's existing source directories."""
        ctx = ctx or default_context()
        return cls(ctx.src_dirs())

    def __repr__(self) -> str:
        return f"SearchPath({self.roots!r})"

    def to_import(self, path: str) -> Tuple[str, str]:
        """
        Resolve an arbitrary path to a root and an import path.

        Args:
            path: An absolute or relative directory, or an import path.
                  "" and "." both mean the current working directory.

        Returns:
            (root, import_path). The first matching root in search order wins.
            The import path always uses "/" separators.

        Raises:
            ResolutionError: If no root matches. The error carries the
                original input.

        The "..." wildcard is not handled here, see TreeWalker.
        """
        original = path
        if path == "" or path == ".":
            original = "."
            path = os.getcwd()
        path = os.path.normpath(path)

        if os.path.isabs(path):
            for root in self.roots:
                if path.startswith(root) and _isdir(root):
                    imp = path[len(root):].replace(os.sep, "/")
                    return root, imp
            raise ResolutionError(original)

        imp = path.replace(os.sep, "/")
        if imp == ".." or imp.startswith("../"):
            raise ResolutionError(original)
        for root in self.roots:
            if _isdir(os.path.join(root, path)):
                return root, imp

        logger.debug(f"{original!r} did not match any of {len(self.roots)} roots")
        raise ResolutionError(original)
