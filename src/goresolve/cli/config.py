"""
CLI Configuration

Output mode switches for the goresolve CLI.
"""

import os
from typing import Optional


class CLIConfig:
    """Configuration for CLI commands"""

    # Machine mode: JSON output, no tables or colors
    _machine_mode: Optional[bool] = None

    @classmethod
    def set_machine_mode(cls, enabled: Optional[bool]) -> None:
        """Set machine mode (pure data output, no presentation). None restores the default."""
        cls._machine_mode = enabled

    @classmethod
    def is_machine_mode(cls) -> bool:
        """
        Check if machine mode is active.

        Human mode is the default; GORESOLVE_MACHINE_MODE opts into machine mode.
        """
        if cls._machine_mode is not None:
            return cls._machine_mode
        return os.getenv("GORESOLVE_MACHINE_MODE", "").lower() in ("1", "true", "yes")
