"""
Import resolution: path -> (root, import path) -> cached Package.
"""

from typing import Optional

from goresolve.cache import PackageCache
from goresolve.context import BuildContext, default_context
from goresolve.exceptions import LoaderError, PackageImportError
from goresolve.gopath import SearchPath
from goresolve.loader import GoSourceLoader, MetadataLoader
from goresolve.logging_config import logger
from goresolve.package import Package


class Importer:
    """
    Resolves paths to Packages, consulting the search path and the cache.

    Packages are cached per (context, import path), with the context keyed by
    identity: two contexts with identical values that are not the same
    object get separate cache entries. Never modify a context once it has
    been used here.

    The cache lock is only held to read or write one entry. Loading happens
    outside it, so concurrent first imports of one key may both load, and
    both callers then get equivalent but distinct Packages.
    """

    def __init__(
        self,
        search_path: Optional[SearchPath] = None,
        cache: Optional[PackageCache] = None,
        loader: Optional[MetadataLoader] = None,
        context: Optional[BuildContext] = None,
    ):
        """
        Args:
            search_path: Source roots. Defaults to the roots of the default context.
            cache: Shared package cache. Defaults to a new, private cache.
            loader: Metadata loader. Defaults to GoSourceLoader.
            context: Context used when a call passes none. Defaults to the
                process-wide default context.
        """
        self._context = context
        self.search_path = search_path or SearchPath.from_context(self.default_context)
        self.cache = cache if cache is not None else PackageCache()
        self.loader = loader or GoSourceLoader()

    @property
    def default_context(self) -> BuildContext:
        return self._context if self._context is not None else default_context()

    def import_package(self, path: str, context: Optional[BuildContext] = None) -> Package:
        """
        Import one package.

        Args:
            path: Directory (absolute, "", ".") or import path, see SearchPath.to_import.
            context: Build context; None means the default context.

        Returns:
            The cached Package for (context, import path), loading it on a miss.

        Raises:
            ResolutionError: The path is not under any source root.
            PackageImportError: The loader failed; the cause is kept.
        """
        ctx = context if context is not None else self.default_context
        root, import_path = self.search_path.to_import(path)

        key = (ctx, import_path)
        pkg = self.cache.get(key)
        if pkg is not None:
            return pkg

        logger.debug(f"Cache miss for {import_path!r}, loading from {root}")
        try:
            build = self.loader.load(import_path, root, ctx)
        except LoaderError as e:
            raise PackageImportError(import_path, e) from e

        pkg = Package(ctx, build)
        self.cache.put(key, pkg)
        return pkg
