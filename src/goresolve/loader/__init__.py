"""
This facade exposes the public API for the loader module.

The loader turns a directory under a source root into BuildPackage
metadata. The importer only depends on the MetadataLoader protocol, so a
different loader can be plugged in.
"""
from .facade import GoSourceLoader, MetadataLoader
from .config import CGO_PSEUDO_IMPORT, GO_SOURCE_SUFFIX
from .constraints import (
    Tag,
    Atom,
    Not,
    And,
    Or,
    parse_tags,
    parse_go_build,
    parse_plus_build,
    good_os_arch_file,
)
from .source import GoFileHeader, read_header

__all__ = [
    "GoSourceLoader",
    "MetadataLoader",
    "CGO_PSEUDO_IMPORT",
    "GO_SOURCE_SUFFIX",
    "Tag",
    "Atom",
    "Not",
    "And",
    "Or",
    "parse_tags",
    "parse_go_build",
    "parse_plus_build",
    "good_os_arch_file",
    "GoFileHeader",
    "read_header",
]
