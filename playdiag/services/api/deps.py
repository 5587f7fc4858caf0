# playdiag/services/api/deps.py
from __future__ import annotations

from playdiag.services.diagnostics.service import DiagnosticService


def get_diagnostic_service() -> DiagnosticService:
    """
    Provide a DiagnosticService wired to the ffprobe/ffmpeg adapters via DI.
    Tests override this with fakes.
    """
    return DiagnosticService()
