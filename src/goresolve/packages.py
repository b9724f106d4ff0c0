"""
Lists of packages, with set-like and bulk operations.
"""

from typing import Callable, Iterable, Set

from goresolve.package import Package
from goresolve.syntax import DocMode


class Packages(list):
    """
    An ordered list of Package, possibly with duplicates.

    The bulk parse methods stop at the first package that fails and raise its
    error. Filters never parse anything themselves: parse first if the
    predicate needs syntax trees or docs.
    """

    def parse(self, parse_comments: bool = False) -> "Packages":
        for p in self:
            p.parse(parse_comments)
        return self

    def parse_docs(self, mode: DocMode = DocMode.EXPORTED) -> "Packages":
        for p in self:
            p.parse_docs(mode)
        return self

    def parse_tags(self) -> "Packages":
        for p in self:
            p.parse_tags()
        return self

    def filter(self, predicate: Callable[[Package], bool]) -> "Packages":
        """Sublist of packages matching predicate, in order."""
        return Packages(p for p in self if predicate(p))

    def no_stdlib(self) -> "Packages":
        """Drop packages from GOROOT. Only reads build metadata."""
        return self.filter(lambda p: not p.build.goroot)

    def has_files_matching(self, *tags: str) -> "Packages":
        """Packages with at least one file constrained to match tags."""
        return self.filter(lambda p: len(p.files_matching(*tags)) > 0)

    def uniq(self) -> "Packages":
        """Remove later duplicates by import path, keeping first-occurrence order."""
        seen: Set[str] = set()
        out = Packages()
        for p in self:
            if p.import_path not in seen:
                seen.add(p.import_path)
                out.append(p)
        return out

    def union(self, other: Iterable[Package]) -> "Packages":
        return Packages(list(self) + list(other)).uniq()

    def import_paths(self) -> Set[str]:
        """Every import path named in the direct imports of any package."""
        paths: Set[str] = set()
        for p in self:
            paths.update(p.build.imports)
        return paths


def flatten(lists: Iterable[Iterable[Package]]) -> Packages:
    """Concatenate lists of packages and remove duplicates."""
    out = Packages()
    for ps in lists:
        if ps:
            out.extend(ps)
    return out.uniq()
