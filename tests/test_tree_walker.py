"""
Tests for best-effort tree imports.
"""

import os

import pytest

from conftest import go_source
from goresolve.exceptions import PackageImportError, PartialWalkError
from goresolve.imports import TreeWalker, import_all, import_tree

pytestmark = pytest.mark.fast


def _paths(packages):
    return [p.import_path for p in packages]


def test_walk_user_tree(workspace):
    walker = TreeWalker(workspace.importer())
    result = walker.import_tree(str(workspace.gopath_src))
    assert result.error is None
    assert _paths(result.packages) == ["example.com/app", "example.com/lib", "example.com/util"]


def test_walk_is_preorder_with_sorted_names(workspace):
    workspace.user("example.com/lib/inner", "inner.go", go_source("inner"))
    workspace.user("example.com/lib/a", "a.go", go_source("a"))
    result = TreeWalker(workspace.importer()).import_tree(str(workspace.gopath_src / "example.com" / "lib"))
    assert _paths(result.packages) == ["example.com/lib", "example.com/lib/a", "example.com/lib/inner"]


def test_walk_returns_cached_packages(workspace):
    importer = workspace.importer()
    lib = importer.import_package("example.com/lib")
    result = TreeWalker(importer).import_tree(str(workspace.gopath_src))
    assert result.packages[1] is lib


def test_walk_does_not_import_dependencies(workspace):
    importer = workspace.importer()
    TreeWalker(importer).import_tree(str(workspace.gopath_src / "example.com" / "app"))
    assert len(importer.cache) == 1


def test_directories_without_go_files_are_skipped(workspace):
    (workspace.gopath_src / "example.com" / "assets" / "img").mkdir(parents=True)
    (workspace.gopath_src / "example.com" / "assets" / "logo.txt").write_text("x")
    result = TreeWalker(workspace.importer()).import_tree(str(workspace.gopath_src))
    assert result.error is None
    assert "example.com/assets" not in _paths(result.packages)


def test_failure_does_not_stop_walk(workspace):
    workspace.user("example.com/bad", "a.go", go_source("one"))
    workspace.user("example.com/bad", "b.go", go_source("two"))
    workspace.user("example.com/bad/child", "c.go", go_source("child"))
    workspace.user("example.com/worse", "x.go", "garbage\n")

    result = TreeWalker(workspace.importer()).import_tree(str(workspace.gopath_src))

    assert _paths(result.packages) == [
        "example.com/app",
        "example.com/bad/child",
        "example.com/lib",
        "example.com/util",
    ]
    assert isinstance(result.error, PartialWalkError)
    assert result.error.directory == str(workspace.gopath_src / "example.com" / "bad")
    assert isinstance(result.error.cause, PackageImportError)


def test_symlinked_directories_not_followed(workspace):
    link = workspace.gopath_src / "example.com" / "link"
    os.symlink(workspace.gopath_src / "example.com" / "util", link)
    result = TreeWalker(workspace.importer()).import_tree(str(workspace.gopath_src))
    assert "example.com/link" not in _paths(result.packages)


def test_missing_root(workspace):
    result = TreeWalker(workspace.importer()).import_tree(str(workspace.gopath_src / "nowhere"))
    assert result.packages == []
    assert isinstance(result.error, PartialWalkError)


def test_tree_outside_roots(tmp_path, workspace):
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "x.go").write_text("package x\n")
    result = TreeWalker(workspace.importer()).import_tree(str(outside))
    assert result.packages == []
    assert result.error is not None


def test_import_all(workspace):
    result = TreeWalker(workspace.importer()).import_all()
    assert result.error is None
    assert _paths(result.packages) == [
        "errors",
        "fmt",
        "example.com/app",
        "example.com/lib",
        "example.com/util",
    ]


def test_import_all_reports_first_error(workspace):
    workspace.std("broken", "a.go", "not go\n")
    workspace.user("example.com/broken", "a.go", "not go either\n")
    result = TreeWalker(workspace.importer()).import_all()
    assert result.error.directory == str(workspace.goroot_src / "broken")
    assert "example.com/app" in _paths(result.packages)


def test_module_level_functions(go_env):
    result = import_tree(str(go_env.gopath_src / "example.com"))
    assert _paths(result.packages) == ["example.com/app", "example.com/lib", "example.com/util"]
    assert len(import_all().packages) == 5
