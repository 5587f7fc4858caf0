# playdiag/services/probe/ffmpeg_validator.py
from __future__ import annotations

import shlex
import shutil
import subprocess
import threading
from pathlib import Path
from typing import List, Optional

from playdiag.common.logging import get_logger
from playdiag.common.probe.ffprobe_helpers import build_decode_cmd
from playdiag.common.probe.process import run_cancellable
from playdiag.common.settings import get_settings
from playdiag.domain.entities.frames import DecodeValidation
from playdiag.domain.errors import IntegrityCheckError, IntegrityCheckTimeout
from playdiag.domain.ports.integrity import DecodeValidatorPort

logger = get_logger(__name__)


class FFmpegDecodeValidator(DecodeValidatorPort):
    """
    Decodes the first N seconds of a file to the null muxer and reports what
    the decoder complained about. Bounded by its own timeout: damaged files
    can make ffmpeg spin forever.
    """

    def __init__(
        self,
        ffmpeg_bin: Optional[str] = None,
        timeout_sec: Optional[int] = None,
        max_error_lines: Optional[int] = None,
    ):
        cfg = get_settings()
        candidate = ffmpeg_bin or cfg.ffmpeg.bin
        self.ffmpeg_bin: Optional[str] = shutil.which(candidate) or (candidate if Path(candidate).is_file() else None)
        self._requested_bin = candidate
        self.timeout_sec = int(timeout_sec or cfg.ffmpeg.timeout_sec)
        self.max_error_lines = int(max_error_lines or cfg.ffmpeg.max_error_lines)

    def validate(
        self,
        path: Path,
        max_duration_sec: int,
        stop_event: Optional[threading.Event] = None,
    ) -> DecodeValidation:
        if not self.ffmpeg_bin:
            raise IntegrityCheckError(f"ffmpeg not found ({self._requested_bin}); set FFMPEG__BIN or install ffmpeg.")

        cmd = build_decode_cmd(path, max_duration_sec, ffmpeg_bin=self.ffmpeg_bin)
        logger.debug("ffmpeg cmd: %s", " ".join(shlex.quote(p) for p in cmd))
        try:
            proc = run_cancellable(cmd, timeout=self.timeout_sec, stop_event=stop_event)
        except subprocess.TimeoutExpired as e:
            raise IntegrityCheckTimeout(
                f"decode validation did not finish within {self.timeout_sec}s", stderr=str(e)
            ) from e
        except OSError as e:
            raise IntegrityCheckError("Failed to execute ffmpeg (OS error).", stderr=str(e)) from e

        lines = self._error_lines(proc.stderr)
        if proc.returncode != 0 or lines:
            logger.info("decode validation of %s: exit=%s, %d error line(s)", path, proc.returncode, len(lines))
        return DecodeValidation(exit_status=proc.returncode, error_lines=tuple(lines), window_sec=max_duration_sec)

    def _error_lines(self, stderr: Optional[str]) -> List[str]:
        out: List[str] = []
        for raw in (stderr or "").splitlines():
            line = raw.strip()
            if not line:
                continue
            out.append(line)
            if len(out) >= self.max_error_lines:
                break
        return out
