"""Exceptions shared by the engine, the problem parsers and the batch runner."""

from __future__ import annotations

from typing import Optional


class AnnealConfigurationError(ValueError):
    """Raised before the search starts when the engine cannot run as configured."""


class TimerStateError(RuntimeError):
    """Raised when `SolveTimer.begin`/`finish` are called out of order."""


class InstanceParseError(ValueError):
    """A malformed line in an instance file.

    The whole file is rejected; there is no partial-instance recovery.
    """

    def __init__(self, message: str, *, path: Optional[str] = None, line_no: Optional[int] = None):
        self.path = path
        self.line_no = line_no
        location = ""
        if path is not None:
            location = f"{path}:"
        if line_no is not None:
            location += f"{line_no}:"
        super().__init__(f"{location} {message}" if location else message)
