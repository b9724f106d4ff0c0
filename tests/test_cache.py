"""
Tests for the per-context package cache.
"""

import threading

import pytest

from goresolve.cache import PackageCache
from goresolve.context import BuildContext
from goresolve.package import Package
from goresolve.schemas import BuildPackage

pytestmark = pytest.mark.fast


def _pkg(ctx, import_path="example.com/x"):
    return Package(ctx, BuildPackage(import_path=import_path, dir="/src/" + import_path, name="x"))


def test_get_missing_returns_none():
    cache = PackageCache()
    assert cache.get((BuildContext(), "fmt")) is None
    assert len(cache) == 0


def test_put_then_get():
    cache = PackageCache()
    ctx = BuildContext()
    pkg = _pkg(ctx)
    cache.put((ctx, "example.com/x"), pkg)
    assert cache.get((ctx, "example.com/x")) is pkg
    assert (ctx, "example.com/x") in cache
    assert len(cache) == 1


def test_equal_contexts_do_not_share_entries():
    cache = PackageCache()
    a = BuildContext(goos="linux", goarch="amd64", goroot="/go", gopath=["/gp"])
    b = BuildContext(goos="linux", goarch="amd64", goroot="/go", gopath=["/gp"])
    cache.put((a, "example.com/x"), _pkg(a))
    assert cache.get((b, "example.com/x")) is None
    assert a != b


def test_clear():
    cache = PackageCache()
    ctx = BuildContext()
    cache.put((ctx, "a"), _pkg(ctx, "a"))
    cache.put((ctx, "b"), _pkg(ctx, "b"))
    cache.clear()
    assert len(cache) == 0


def test_concurrent_puts():
    cache = PackageCache()
    ctx = BuildContext()

    def worker(n):
        for i in range(50):
            path = f"pkg{n}/{i}"
            cache.put((ctx, path), _pkg(ctx, path))

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(cache) == 400
