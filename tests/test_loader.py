"""
Tests for GoSourceLoader file selection and header reading.
"""

import os

import pytest

from conftest import go_source
from goresolve.exceptions import (
    AmbiguousPackageNameError,
    DirectoryReadError,
    MetadataParseError,
    NoBuildableSourceFilesError,
    NoSuchDirectoryError,
)
from goresolve.loader import GoSourceLoader, read_header
from goresolve.loader import facade as loader_facade
from goresolve.loader.source import HeaderError

pytestmark = pytest.mark.fast


def _load(workspace, import_path, **ctx):
    return GoSourceLoader().load(import_path, str(workspace.gopath_src), workspace.context(**ctx))


class TestReadHeader:

    def test_single_and_grouped_imports(self):
        header = read_header(
            'package foo\n\nimport "os"\nimport (\n\t"fmt"\n\tstr "strings"\n\t_ "embed"\n\t. "math"\n)\n\nfunc F() {}\n'
        )
        assert header.package_name == "foo"
        assert header.imports == ["os", "fmt", "strings", "embed", "math"]

    def test_raw_string_and_semicolons(self):
        header = read_header("package foo; import `net/http`; import (\"io\"; \"bufio\")\n")
        assert header.imports == ["net/http", "io", "bufio"]

    def test_comments_everywhere(self):
        header = read_header(
            "// Package foo does things.\n/* block */\npackage /* x */ foo // trailing\n\n"
            "import (\n\t// the os\n\t\"os\" /* c */\n)\n"
        )
        assert header.package_name == "foo"
        assert header.imports == ["os"]

    def test_stops_at_first_declaration(self):
        header = read_header('package foo\n\nvar x = 1\n\nimport "os"\n')
        assert header.imports == []

    def test_constraint_lines(self):
        header = read_header("//go:build linux && !cgo\n// +build linux,!cgo\n\npackage foo\n")
        assert header.go_build == "linux && !cgo"
        assert header.plus_build == ["linux,!cgo"]

    def test_constraints_after_package_are_ignored(self):
        header = read_header("package foo\n\n// +build ignore\n")
        assert header.plus_build == []

    def test_cgo(self):
        header = read_header('package foo\n\n// #include <stdio.h>\nimport "C"\n')
        assert header.imports_cgo

    def test_missing_package_clause(self):
        with pytest.raises(HeaderError):
            read_header("// just a comment\n")

    def test_unterminated_import_block(self):
        with pytest.raises(HeaderError):
            read_header('package foo\nimport (\n\t"fmt"\n')

    def test_unterminated_string(self):
        with pytest.raises(HeaderError):
            read_header('package foo\nimport "fmt\n')

    def test_empty_import_path(self):
        with pytest.raises(HeaderError):
            read_header('package foo\nimport ""\n')


class TestFileSelection:

    def test_test_and_xtest_files(self, workspace):
        workspace.user("example.com/pkg", "a.go", go_source("pkg", "os"))
        workspace.user("example.com/pkg", "a_test.go", go_source("pkg", "testing"))
        workspace.user("example.com/pkg", "b_test.go", go_source("pkg_test", "example.com/pkg", "testing"))
        build = _load(workspace, "example.com/pkg")
        assert build.name == "pkg"
        assert build.go_files == ["a.go"]
        assert build.test_go_files == ["a_test.go"]
        assert build.xtest_go_files == ["b_test.go"]
        assert build.imports == ["os"]
        assert build.test_imports == ["testing"]
        assert build.xtest_imports == ["example.com/pkg", "testing"]

    def test_only_test_files_is_buildable(self, workspace):
        workspace.user("example.com/onlytests", "x_test.go", go_source("onlytests", "testing"))
        build = _load(workspace, "example.com/onlytests")
        assert build.go_files == []
        assert build.test_go_files == ["x_test.go"]

    def test_imports_are_sorted_and_unique(self, workspace):
        workspace.user("example.com/pkg", "a.go", go_source("pkg", "os", "fmt"))
        workspace.user("example.com/pkg", "b.go", go_source("pkg", "fmt", "bytes"))
        assert _load(workspace, "example.com/pkg").imports == ["bytes", "fmt", "os"]

    def test_underscore_and_dot_files_skipped(self, workspace):
        workspace.user("example.com/pkg", "a.go", go_source("pkg"))
        workspace.user("example.com/pkg", "_skip.go", go_source("other"))
        workspace.user("example.com/pkg", ".hidden.go", go_source("other"))
        build = _load(workspace, "example.com/pkg")
        assert build.go_files == ["a.go"]
        assert build.ignored_go_files == []

    def test_os_arch_suffixes(self, workspace):
        workspace.user("example.com/pkg", "a.go", go_source("pkg"))
        workspace.user("example.com/pkg", "a_linux.go", go_source("pkg"))
        workspace.user("example.com/pkg", "a_windows.go", go_source("pkg"))
        workspace.user("example.com/pkg", "a_linux_arm64.go", go_source("pkg"))
        workspace.user("example.com/pkg", "a_amd64.go", go_source("pkg"))
        build = _load(workspace, "example.com/pkg")
        assert build.go_files == ["a.go", "a_amd64.go", "a_linux.go"]
        assert build.ignored_go_files == ["a_linux_arm64.go", "a_windows.go"]

    def test_go_build_constraint(self, workspace):
        workspace.user("example.com/pkg", "a.go", go_source("pkg"))
        workspace.user("example.com/pkg", "b.go", go_source("pkg", header="//go:build windows || darwin"))
        workspace.user("example.com/pkg", "c.go", go_source("pkg", header="//go:build linux && go1.18"))
        build = _load(workspace, "example.com/pkg")
        assert build.go_files == ["a.go", "c.go"]
        assert build.ignored_go_files == ["b.go"]

    def test_plus_build_lines_are_anded(self, workspace):
        workspace.user("example.com/pkg", "a.go", go_source("pkg"))
        workspace.user("example.com/pkg", "b.go", go_source("pkg", header="// +build linux darwin\n// +build arm64"))
        build = _load(workspace, "example.com/pkg")
        assert build.ignored_go_files == ["b.go"]

    def test_build_tags_from_context(self, workspace):
        workspace.user("example.com/pkg", "a.go", go_source("pkg"))
        workspace.user("example.com/pkg", "extra.go", go_source("pkg", "os", header="//go:build extra"))
        assert _load(workspace, "example.com/pkg").imports == []
        build = _load(workspace, "example.com/pkg", build_tags=["extra"])
        assert build.go_files == ["a.go", "extra.go"]
        assert build.imports == ["os"]

    def test_excluded_file_imports_not_counted(self, workspace):
        workspace.user("example.com/pkg", "a.go", go_source("pkg"))
        workspace.user("example.com/pkg", "a_windows.go", go_source("pkg", "syscall"))
        assert _load(workspace, "example.com/pkg").imports == []

    def test_cgo_files(self, workspace):
        workspace.user("example.com/pkg", "a.go", go_source("pkg"))
        workspace.user("example.com/pkg", "c.go", go_source("pkg", "C", "unsafe"))
        build = _load(workspace, "example.com/pkg")
        assert build.go_files == ["a.go"]
        assert build.cgo_files == ["c.go"]
        assert build.imports == ["C", "unsafe"]
        assert build.source_files == ["a.go", "c.go"]

    def test_cgo_disabled(self, workspace):
        workspace.user("example.com/pkg", "a.go", go_source("pkg"))
        workspace.user("example.com/pkg", "c.go", go_source("pkg", "C"))
        build = _load(workspace, "example.com/pkg", cgo_enabled=False)
        assert build.cgo_files == []
        assert build.ignored_go_files == ["c.go"]
        assert build.imports == []

    def test_documentation_package_ignored(self, workspace):
        workspace.user("example.com/pkg", "a.go", go_source("pkg"))
        workspace.user("example.com/pkg", "doc.go", go_source("documentation"))
        build = _load(workspace, "example.com/pkg")
        assert build.name == "pkg"
        assert build.ignored_go_files == ["doc.go"]

    def test_standard_library_flag(self, workspace):
        ctx = workspace.context()
        build = GoSourceLoader().load("fmt", str(workspace.goroot_src) + "/", ctx)
        assert build.goroot is True
        assert build.root == str(workspace.goroot_src)


class TestLoaderErrors:

    def test_no_such_directory(self, workspace):
        with pytest.raises(NoSuchDirectoryError):
            _load(workspace, "example.com/nowhere")

    def test_no_go_files(self, workspace):
        (workspace.gopath_src / "example.com" / "docs").mkdir()
        with pytest.raises(NoBuildableSourceFilesError):
            _load(workspace, "example.com/docs")

    def test_all_files_excluded(self, workspace):
        workspace.user("example.com/win", "a_windows.go", go_source("win"))
        with pytest.raises(NoBuildableSourceFilesError) as exc_info:
            _load(workspace, "example.com/win")
        assert exc_info.value.import_path == "example.com/win"

    def test_ambiguous_package_name(self, workspace):
        workspace.user("example.com/pkg", "a.go", go_source("one"))
        workspace.user("example.com/pkg", "b.go", go_source("two"))
        with pytest.raises(AmbiguousPackageNameError) as exc_info:
            _load(workspace, "example.com/pkg")
        assert exc_info.value.names == ["one", "two"]
        assert exc_info.value.files == ["a.go", "b.go"]

    def test_excluded_file_with_other_name_is_fine(self, workspace):
        workspace.user("example.com/pkg", "a.go", go_source("pkg"))
        workspace.user("example.com/pkg", "gen.go", go_source("main", header="//go:build ignore"))
        build = _load(workspace, "example.com/pkg")
        assert build.ignored_go_files == ["gen.go"]

    def test_malformed_header(self, workspace):
        workspace.user("example.com/pkg", "a.go", "this is not go\n")
        with pytest.raises(MetadataParseError) as exc_info:
            _load(workspace, "example.com/pkg")
        assert exc_info.value.filename == "a.go"

    def test_malformed_constraint(self, workspace):
        workspace.user("example.com/pkg", "a.go", go_source("pkg", header="//go:build linux &&"))
        with pytest.raises(MetadataParseError):
            _load(workspace, "example.com/pkg")

    def test_unlistable_directory(self, workspace, monkeypatch):
        workspace.user("example.com/pkg", "a.go", go_source("pkg"))

        def deny(directory):
            raise PermissionError(13, "Permission denied", directory)

        monkeypatch.setattr(loader_facade, "_go_files", deny)
        with pytest.raises(DirectoryReadError) as exc_info:
            _load(workspace, "example.com/pkg")
        assert exc_info.value.import_path == "example.com/pkg"
        assert isinstance(exc_info.value.cause, PermissionError)

    @pytest.mark.skipif(not hasattr(os, "geteuid") or os.geteuid() == 0, reason="root ignores directory permissions")
    def test_directory_without_read_permission(self, workspace):
        path = workspace.user("example.com/secret", "s.go", go_source("secret"))
        os.chmod(path.parent, 0o111)
        try:
            with pytest.raises(DirectoryReadError):
                _load(workspace, "example.com/secret")
        finally:
            os.chmod(path.parent, 0o755)


class TestByteOrderMark:

    def test_header_after_bom(self, workspace):
        path = workspace.gopath_src / "example.com" / "bom"
        path.mkdir(parents=True)
        (path / "b.go").write_bytes(b"\xef\xbb\xbf" + go_source("bom", "os").encode())
        build = _load(workspace, "example.com/bom")
        assert build.name == "bom"
        assert build.imports == ["os"]

    def test_constraint_after_bom(self, workspace):
        path = workspace.gopath_src / "example.com" / "bom"
        path.mkdir(parents=True)
        (path / "a.go").write_text(go_source("bom"))
        (path / "b.go").write_bytes(b"\xef\xbb\xbf" + go_source("bom", header="//go:build windows").encode())
        assert _load(workspace, "example.com/bom").ignored_go_files == ["b.go"]
