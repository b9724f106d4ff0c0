"""
Pytest configuration for the goresolve test suite.

This conftest.py provides:
- Machine-mode logging (suppresses console output)
- A throwaway GOROOT/GOPATH workspace with a few small packages
- Reset of every process-wide singleton between tests
"""

import os
from dataclasses import dataclass
from pathlib import Path

import pytest

from goresolve.cli.config import CLIConfig
from goresolve.context import BuildContext, reset_default_context
from goresolve.gopath import SearchPath
from goresolve.imports import Importer, reset_importer
from goresolve.logging_config import setup_logging


# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

def pytest_configure(config):
    """Keep log output off the console during test runs."""
    os.environ.setdefault("GORESOLVE_MACHINE_MODE", "1")


# ============================================================================
# LOGGING AND SINGLETON FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def setup_test_logging():
    """
    Machine mode by default - suppress console logs for clean test output.
    """
    setup_logging(level="DEBUG", suppress_console=True, force=True)


@pytest.fixture(autouse=True)
def reset_singletons():
    """Every test starts with a fresh default context, importer and output mode."""
    reset_default_context()
    reset_importer()
    CLIConfig.set_machine_mode(False)
    yield
    reset_default_context()
    reset_importer()
    CLIConfig.set_machine_mode(None)


# ============================================================================
# WORKSPACE FIXTURES
# ============================================================================

@dataclass
class GoWorkspace:
    """A GOROOT and a single-entry GOPATH under a temp directory."""

    goroot: Path
    gopath: Path

    @property
    def goroot_src(self) -> Path:
        return self.goroot / "src"

    @property
    def gopath_src(self) -> Path:
        return self.gopath / "src"

    def write(self, src: Path, import_path: str, filename: str, text: str) -> Path:
        """Write a Go file into the package directory of import_path under src."""
        directory = src.joinpath(*import_path.split("/"))
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / filename
        path.write_text(text)
        return path

    def std(self, import_path: str, filename: str, text: str) -> Path:
        return self.write(self.goroot_src, import_path, filename, text)

    def user(self, import_path: str, filename: str, text: str) -> Path:
        return self.write(self.gopath_src, import_path, filename, text)

    def context(self, **overrides) -> BuildContext:
        values = dict(
            goos="linux",
            goarch="amd64",
            goroot=str(self.goroot),
            gopath=[str(self.gopath)],
            cgo_enabled=True,
        )
        values.update(overrides)
        return BuildContext(**values)

    def importer(self, ctx: BuildContext = None) -> Importer:
        ctx = ctx or self.context()
        return Importer(search_path=SearchPath.from_context(ctx), context=ctx)


def go_source(package: str, *imports: str, header: str = "", body: str = "") -> str:
    """Render a minimal Go file."""
    lines = []
    if header:
        lines.extend([header, ""])
    lines.append(f"package {package}")
    if imports:
        lines.append("")
        lines.append("import (")
        lines.extend(f'\t"{imp}"' for imp in imports)
        lines.append(")")
    if body:
        lines.extend(["", body])
    return "\n".join(lines) + "\n"


@pytest.fixture
def workspace(tmp_path):
    """
    Create a workspace with a tiny standard library and a user project.

    Layout:
        goroot/src/errors            (no imports)
        goroot/src/fmt               -> errors
        gopath/src/example.com/util  -> errors
        gopath/src/example.com/lib   -> example.com/util, fmt
        gopath/src/example.com/app   -> example.com/lib, fmt
    """
    root = tmp_path.resolve()
    ws = GoWorkspace(goroot=root / "goroot", gopath=root / "gopath")
    ws.goroot_src.mkdir(parents=True)
    ws.gopath_src.mkdir(parents=True)

    ws.std("errors", "errors.go", go_source("errors", body="func New(text string) error { return nil }"))
    ws.std("fmt", "print.go", go_source("fmt", "errors", body="func Println(a ...any) {}"))

    ws.user("example.com/util", "util.go", go_source("util", "errors", body="func Check() error { return errors.New(\"x\") }"))
    ws.user("example.com/lib", "lib.go", go_source("lib", "example.com/util", "fmt", body="func Run() { fmt.Println(util.Check()) }"))
    ws.user("example.com/lib", "lib_test.go", go_source("lib", "testing", body="func TestRun(t *testing.T) {}"))
    ws.user("example.com/app", "main.go", go_source("main", "example.com/lib", "fmt", body="func main() { lib.Run() }"))
    return ws


@pytest.fixture
def go_env(workspace, monkeypatch):
    """Point the GO* environment variables at the workspace."""
    monkeypatch.setenv("GOROOT", str(workspace.goroot))
    monkeypatch.setenv("GOPATH", str(workspace.gopath))
    monkeypatch.setenv("GOOS", "linux")
    monkeypatch.setenv("GOARCH", "amd64")
    monkeypatch.setenv("CGO_ENABLED", "1")
    reset_default_context()
    reset_importer()
    return workspace
