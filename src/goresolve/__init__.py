"""
goresolve - Go package discovery and dependency resolution

Resolves directories and import paths under $GOROOT/$GOPATH to package
metadata, imports whole trees, computes transitive dependency closures and
caches everything per build context.

Imported packages are cached with their BuildContext object as part of the
key, so never modify a context after using it. Passing no context uses the
default context built from the GO* environment variables.
"""

__version__ = "0.4.0"

from goresolve.context import BuildContext, context, default_context, tags_of
from goresolve.cache import PackageCache
from goresolve.gopath import SearchPath
from goresolve.package import Package
from goresolve.packages import Packages, flatten
from goresolve.imports import (
    Importer,
    TreeWalker,
    DependencyClosure,
    WalkResult,
    import_package,
    import_tree,
    import_all,
    import_deps,
    import_rec,
)

__all__ = [
    "__version__",
    "BuildContext",
    "context",
    "default_context",
    "tags_of",
    "PackageCache",
    "SearchPath",
    "Package",
    "Packages",
    "flatten",
    "Importer",
    "TreeWalker",
    "DependencyClosure",
    "WalkResult",
    "import_package",
    "import_tree",
    "import_all",
    "import_deps",
    "import_rec",
]
