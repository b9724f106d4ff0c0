"""
Process-wide store of imported packages.

Keys are (BuildContext, import path) pairs. BuildContext hashes by identity,
so two contexts with equal fields never share entries. There is no
eviction: the code under analysis is assumed not to change during a run.
"""

import threading
from typing import TYPE_CHECKING, Dict, Optional, Tuple

from goresolve.context import BuildContext

if TYPE_CHECKING:
    from goresolve.package import Package

CacheKey = Tuple[BuildContext, str]


class PackageCache:
    """
    Thread-safe map from (context, import path) to Package.

    A single coarse lock guards every access and is held only for one read or
    write. Loading metadata happens outside the lock (see Importer), so two
    threads missing the same key may both store; the last store wins.
    """

    def __init__(self):
        self._packages: Dict[CacheKey, "Package"] = {}
        self.lock = threading.Lock()

    def get(self, key: CacheKey) -> Optional["Package"]:
        with self.lock:
            return self._packages.get(key)

    def put(self, key: CacheKey, pkg: "Package") -> None:
        with self.lock:
            self._packages[key] = pkg

    def clear(self) -> None:
        """Drop every entry."""
        with self.lock:
            self._packages.clear()

    def __len__(self) -> int:
        with self.lock:
            return len(self._packages)

    def __contains__(self, key: CacheKey) -> bool:
        with self.lock:
            return key in self._packages
