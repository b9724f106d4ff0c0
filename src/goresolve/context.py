"""
Go build contexts.

A BuildContext is the environment packages are imported under: target
platform, GOROOT/GOPATH and extra build tags. Values come from the GO*
environment variables, or sensible host defaults.

Environment Variables:
    GOROOT: Go installation root (default: derived from `go` on PATH, else /usr/local/go)
    GOPATH: os.pathsep separated workspaces (default: ~/go)
    GOOS / GOARCH: target platform (default: the host)
    CGO_ENABLED: "0" disables cgo (default: enabled)

Contexts are compared and hashed by identity, never by value: the package
cache is partitioned per context object. Never modify a context after it
has been used to import packages.
"""

import os
import platform
import shutil
import sys
import threading
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import List, Optional, Set

from goresolve.exceptions import ConfigError
from goresolve.logging_config import logger


DEFAULT_GOROOT = "/usr/local/go"
DEFAULT_COMPILER = "gc"
MAX_RELEASE_MINOR = 23

UNIX_OS = {
    "aix", "android", "darwin", "dragonfly", "freebsd", "hurd", "illumos",
    "ios", "linux", "netbsd", "openbsd", "solaris",
}

_HOST_OS = {
    "linux": "linux",
    "darwin": "darwin",
    "win32": "windows",
    "cygwin": "windows",
    "freebsd": "freebsd",
    "openbsd": "openbsd",
    "netbsd": "netbsd",
    "aix": "aix",
}

_HOST_ARCH = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "armv7l": "arm",
    "armv6l": "arm",
    "ppc64le": "ppc64le",
    "s390x": "s390x",
    "riscv64": "riscv64",
}


def _env_str(key: str, default: str) -> str:
    """Read a non-empty string from an environment variable."""
    value = os.getenv(key)
    if not value:
        return default
    return value


def _env_bool(key: str, default: bool) -> bool:
    """Read boolean from environment variable."""
    value = os.getenv(key, "").lower()
    if value in ("true", "1", "yes"):
        return True
    if value in ("false", "0", "no"):
        return False
    return default


def _host_goos() -> str:
    for prefix, goos in _HOST_OS.items():
        if sys.platform.startswith(prefix):
            return goos
    return sys.platform


def _host_goarch() -> str:
    machine = platform.machine().lower()
    return _HOST_ARCH.get(machine, machine)


def _default_goroot() -> str:
    go = shutil.which("go")
    if go:
        # <GOROOT>/bin/go, following symlinks such as /usr/bin/go
        return str(Path(go).resolve().parent.parent)
    return DEFAULT_GOROOT


def _default_gopath() -> List[str]:
    value = os.getenv("GOPATH")
    if value:
        entries = [p for p in value.split(os.pathsep) if p]
        for entry in entries:
            if not os.path.isabs(entry):
                raise ConfigError(f"GOPATH entry is relative; must be absolute path: {entry!r}")
        return entries
    return [str(Path.home() / "go")]


def _release_tags() -> List[str]:
    return [f"go1.{minor}" for minor in range(1, MAX_RELEASE_MINOR + 1)]


@dataclass(eq=False)
class BuildContext:
    """
    The environment Go packages are imported under.

    eq=False keeps object identity as both equality and hash, which is what
    the package cache keys on.
    """

    goos: str = field(default_factory=lambda: _env_str("GOOS", _host_goos()))
    goarch: str = field(default_factory=lambda: _env_str("GOARCH", _host_goarch()))
    goroot: str = field(default_factory=lambda: _env_str("GOROOT", _default_goroot()))
    gopath: List[str] = field(default_factory=_default_gopath)
    build_tags: List[str] = field(default_factory=list)
    cgo_enabled: bool = field(default_factory=lambda: _env_bool("CGO_ENABLED", True))
    compiler: str = DEFAULT_COMPILER
    release_tags: List[str] = field(default_factory=_release_tags)

    def goroot_src(self) -> str:
        """The standard library root, $GOROOT/src."""
        return os.path.join(self.goroot, "src")

    def src_dirs(self) -> List[str]:
        """
        Existing source roots in search order: $GOROOT/src, then each $GOPATH/src.
        """
        candidates = [self.goroot_src()]
        candidates.extend(os.path.join(p, "src") for p in self.gopath if p != self.goroot)
        dirs = [d for d in candidates if os.path.isdir(d)]
        if not dirs:
            logger.warning(f"No source roots found (GOROOT={self.goroot}, GOPATH={os.pathsep.join(self.gopath)})")
        return dirs

    def match_tag(self, name: str) -> bool:
        """Report whether a single build tag is satisfied by this context."""
        return name in tags_of(self)


# Global instance for convenience
_default_context: Optional[BuildContext] = None
_default_lock = threading.Lock()


def default_context() -> BuildContext:
    """Get the process-wide default build context, created on first use."""
    global _default_context
    with _default_lock:
        if _default_context is None:
            _default_context = BuildContext()
            logger.debug(
                f"Default build context: {_default_context.goos}/{_default_context.goarch} "
                f"GOROOT={_default_context.goroot}"
            )
        return _default_context


def reset_default_context() -> None:
    """Reset the default context (useful after env var changes or for testing)."""
    global _default_context
    with _default_lock:
        _default_context = None


def context(*tags: str) -> BuildContext:
    """
    Return a build context with the given extra build tags.

    This does not change GOOS or GOARCH, it only adds tags. With no tags the
    default context itself is returned. Every call with tags returns a new
    context object, and therefore a separate cache partition.
    """
    base = default_context()
    if not tags:
        return base
    return replace(
        base,
        gopath=list(base.gopath),
        build_tags=list(base.build_tags) + list(tags),
        release_tags=list(base.release_tags),
    )


def tags_of(ctx: BuildContext) -> Set[str]:
    """
    The complete set of build tags a context satisfies.
    """
    tags = set(ctx.build_tags)
    tags.update((ctx.goos, ctx.goarch, ctx.compiler))
    tags.update(ctx.release_tags)
    if ctx.cgo_enabled:
        tags.add("cgo")
    if ctx.goos in UNIX_OS:
        tags.add("unix")
    return tags
