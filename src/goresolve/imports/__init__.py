"""
Import resolution package.

Provides the Importer, the best-effort TreeWalker, the all-or-nothing
DependencyClosure, and module-level functions over a shared default Importer.
"""

from .facade import (
    get_importer,
    reset_importer,
    import_package,
    import_tree,
    import_all,
    import_deps,
    import_rec,
)
from .importer import Importer
from .tree_walker import TreeWalker, WalkResult
from .closure import DependencyClosure

__all__ = [
    "get_importer",
    "reset_importer",
    "import_package",
    "import_tree",
    "import_all",
    "import_deps",
    "import_rec",
    "Importer",
    "TreeWalker",
    "WalkResult",
    "DependencyClosure",
]
