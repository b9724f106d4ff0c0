"""
This facade exposes the public API for the gopath module.
"""
from .search_path import SearchPath

__all__ = ["SearchPath"]
