# playdiag/domain/errors.py
from __future__ import annotations

from typing import Optional


class DiagnosticError(RuntimeError):
    """
    Structural failure of an analysis run. Anything raised from here aborts the
    run; problems *inside* the media file are reported as Issues instead.
    """

    def __init__(self, message: str, *, stderr: Optional[str] = None, rc: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.stderr = stderr
        self.rc = rc


class InputNotFound(DiagnosticError):
    """The input path does not exist or is not a regular file."""


class ProbeUnavailable(DiagnosticError):
    """The probe tool could not be run (missing binary, timeout, failing exit with no output)."""


class ProbeParseError(DiagnosticError):
    """Probe output was not valid structured data or lacked required fields."""


class IntegrityCheckTimeout(DiagnosticError):
    """The bounded decode-validation pass did not finish in time."""


class IntegrityCheckError(DiagnosticError):
    """The decode-validation tool could not be run."""


class AnalysisCancelled(DiagnosticError):
    """The caller aborted the run; partial results were discarded."""
