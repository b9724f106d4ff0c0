"""
Constants for reading Go package directories.
"""

# Extension recognized as Go source
GO_SOURCE_SUFFIX = ".go"
GO_TEST_SUFFIX = "_test.go"

# Pseudo-package through which Go code calls C (cgo)
CGO_PSEUDO_IMPORT = "C"

# Files in this package are package documentation, never part of a build
DOCUMENTATION_PACKAGE = "documentation"

# File name prefixes the go tool ignores outright
IGNORED_FILE_PREFIXES = ("_", ".")

# Values of GOOS recognized in file name suffixes (e.g. foo_linux.go)
KNOWN_OS = frozenset({
    "aix", "android", "darwin", "dragonfly", "freebsd", "hurd", "illumos",
    "ios", "js", "linux", "nacl", "netbsd", "openbsd", "plan9", "solaris",
    "wasip1", "windows", "zos",
})

# Values of GOARCH recognized in file name suffixes (e.g. foo_amd64.go)
KNOWN_ARCH = frozenset({
    "386", "amd64", "amd64p32", "arm", "armbe", "arm64", "arm64be", "loong64",
    "mips", "mipsle", "mips64", "mips64le", "mips64p32", "mips64p32le",
    "ppc", "ppc64", "ppc64le", "riscv", "riscv64", "s390", "s390x", "sparc",
    "sparc64", "wasm",
})
