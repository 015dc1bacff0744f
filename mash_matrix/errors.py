"""
Exception types raised by mash_matrix.

Configuration and input problems are detected before Mash is started;
MashExecutionError is raised for a failed external run and is kept separate
from DistanceTableError, which covers a table that cannot be reshaped.
"""

from __future__ import annotations

from typing import List, Optional, Sequence


class MashMatrixError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(MashMatrixError, ValueError):
    """Bad parameters, unsupported platform or sequence type, missing binary."""


class InputError(MashMatrixError, ValueError):
    """The genome file list is empty, incomplete or ambiguous."""


class MashExecutionError(MashMatrixError, RuntimeError):
    def __init__(self, message: str, cmd: Optional[Sequence[str]] = None,
                 returncode: Optional[int] = None, stderr: str = ""):
        self.cmd: List[str] = [str(c) for c in cmd] if cmd else []
        self.returncode = returncode
        self.stderr = stderr or ""
        detail = message
        if returncode is not None:
            detail += f" (exit code {returncode})"
        tail = self.stderr.strip().splitlines()[-5:]
        if tail:
            detail += ": " + " | ".join(tail)
        super().__init__(detail)


class DistanceTableError(MashMatrixError):
    """The Mash distance table is missing, empty or malformed."""
