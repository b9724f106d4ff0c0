"""
Transitive dependency closure of a package.
"""

from typing import Iterator, List, Optional

from goresolve.context import BuildContext
from goresolve.exceptions import ClosureError, GoResolveError
from goresolve.loader.config import CGO_PSEUDO_IMPORT
from goresolve.logging_config import logger
from goresolve.package import Package
from goresolve.packages import Packages
from goresolve.tracing import trace
from .importer import Importer


class DependencyClosure:
    """
    Imports everything a package depends on, directly or indirectly.

    Unlike TreeWalker this is all or nothing: one dependency that fails to
    import makes the whole closure fail. Each import path is imported at most
    once per call, which also makes import cycles terminate. The cgo
    pseudo-package "C" is never imported.
    """

    def __init__(self, importer: Importer):
        self.importer = importer

    @trace
    def dependencies(self, package: Package) -> Packages:
        """
        Import all dependencies of package, recursively.

        The package's own context is used for every import.

        Returns:
            Packages with package first, then its dependencies in pre-order
            of discovery (not topologically sorted).

        Raises:
            ClosureError: Some dependency could not be imported.
        """
        seen = {package.import_path, CGO_PSEUDO_IMPORT}
        acc = Packages([package])
        stack: List[Iterator[str]] = [iter(package.build.imports)]

        while stack:
            for path in stack[-1]:
                if path in seen:
                    continue
                seen.add(path)
                dep = self._import(package, path)
                acc.append(dep)
                stack.append(iter(dep.build.imports))
                break
            else:
                stack.pop()

        logger.debug(f"{package.import_path}: {len(acc) - 1} dependencies")
        return acc

    def import_rec(self, path: str, context: Optional[BuildContext] = None) -> Packages:
        """
        Import path and all its dependencies.

        The package for path comes first, exactly once.

        Raises:
            ResolutionError, PackageImportError: path itself failed.
            ClosureError: A dependency failed.
        """
        pkg = self.importer.import_package(path, context)
        return self.dependencies(pkg)

    def _import(self, root: Package, path: str) -> Package:
        try:
            return self.importer.import_package(path, root.context)
        except GoResolveError as e:
            raise ClosureError(root.import_path, path, e) from e
