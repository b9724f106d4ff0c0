"""
CLI support modules: argument importing, output and configuration.
"""

from goresolve.cli import args, config, output

__all__ = ["args", "config", "output"]
