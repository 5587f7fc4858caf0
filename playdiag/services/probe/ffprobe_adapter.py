# playdiag/services/probe/ffprobe_adapter.py
from __future__ import annotations

import shlex
import shutil
import subprocess
import threading
from pathlib import Path
from typing import List, Optional

from playdiag.common.logging import get_logger
from playdiag.common.probe.ffprobe_helpers import (
    build_ffprobe_cmd,
    build_frames_cmd,
    parse_ffprobe_json,
    parse_frames_json,
)
from playdiag.common.probe.process import run_cancellable
from playdiag.common.settings import get_settings
from playdiag.domain.entities.frames import FrameSample
from playdiag.domain.entities.probe import ProbeData
from playdiag.domain.errors import ProbeUnavailable
from playdiag.domain.ports.probe import FrameSamplerPort, MediaProbePort

logger = get_logger(__name__)


class FFprobeAdapter(MediaProbePort, FrameSamplerPort):
    """
    Infrastructure adapter implementing MediaProbePort and FrameSamplerPort using `ffprobe`.
    Safe for use from ThreadManager (I/O-bound).
    """

    def __init__(self, ffprobe_bin: Optional[str] = None, timeout_sec: Optional[int] = None):
        cfg = get_settings()
        candidate = ffprobe_bin or cfg.ffprobe.bin
        # resolve absolute path for nicer errors; a miss is reported when we actually run
        self.ffprobe_bin: Optional[str] = shutil.which(candidate) or (candidate if Path(candidate).is_file() else None)
        self._requested_bin = candidate
        self.timeout_sec = int(timeout_sec or cfg.ffprobe.timeout_sec)
        self.log_level = cfg.ffprobe.log_level

    # ---- Port API -------------------------------------------------------------
    def probe(self, path: Path) -> ProbeData:
        cmd = build_ffprobe_cmd(path, ffprobe_bin=self._bin(), log_level=self.log_level)
        stdout = self._run(cmd)
        return parse_ffprobe_json(stdout)

    def sample_frames(
        self,
        path: Path,
        stream_index: int,
        max_samples: int,
        stop_event: Optional[threading.Event] = None,
    ) -> List[FrameSample]:
        cmd = build_frames_cmd(path, stream_index, max_samples, ffprobe_bin=self._bin(), log_level=self.log_level)
        stdout = self._run(cmd, stop_event)
        return parse_frames_json(stdout, stream_index=stream_index, max_samples=max_samples)

    # ---- internals ------------------------------------------------------------
    def _bin(self) -> str:
        if not self.ffprobe_bin:
            raise ProbeUnavailable(f"ffprobe not found ({self._requested_bin}); set FFPROBE__BIN or install ffmpeg.")
        return self.ffprobe_bin

    def _run(self, cmd: List[str], stop_event: Optional[threading.Event] = None) -> str:
        logger.debug("ffprobe cmd: %s", " ".join(shlex.quote(p) for p in cmd))
        try:
            # rc is handled below so stderr can be attached
            proc = run_cancellable(cmd, timeout=self.timeout_sec, stop_event=stop_event)
        except subprocess.TimeoutExpired as e:
            raise ProbeUnavailable(f"ffprobe timed out after {self.timeout_sec}s", stderr=str(e)) from e
        except OSError as e:
            raise ProbeUnavailable("Failed to execute ffprobe (OS error).", stderr=str(e)) from e

        if proc.returncode != 0:
            if not (proc.stdout or "").strip():
                raise ProbeUnavailable("ffprobe returned non-zero exit code", stderr=proc.stderr, rc=proc.returncode)
            logger.warning("ffprobe exited %s but produced output; parsing it anyway", proc.returncode)
        return proc.stdout
