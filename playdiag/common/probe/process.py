# playdiag/common/probe/process.py
from __future__ import annotations

import subprocess
import threading
import time
from typing import List, Optional

from playdiag.common.logging import get_logger
from playdiag.domain.errors import AnalysisCancelled

logger = get_logger(__name__)


def _kill(proc: subprocess.Popen) -> None:
    proc.kill()
    # reap the child and close its pipes
    proc.communicate()


def run_cancellable(
    cmd: List[str],
    *,
    timeout: float,
    stop_event: Optional[threading.Event] = None,
    poll_sec: float = 0.1,
) -> subprocess.CompletedProcess:
    """
    Like `subprocess.run(cmd, capture_output=True, text=True, timeout=...)`, but
    the child is killed as soon as `stop_event` is set.

    Raises subprocess.TimeoutExpired on timeout, OSError if the binary cannot
    be started, AnalysisCancelled when stopped. Output is decoded with
    errors="replace" so odd bytes in tool output never raise here.
    """
    proc = subprocess.Popen(
        cmd,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        errors="replace",
    )
    deadline = time.monotonic() + timeout
    while True:
        try:
            out, err = proc.communicate(timeout=poll_sec)
            return subprocess.CompletedProcess(cmd, proc.returncode, out, err)
        except subprocess.TimeoutExpired:
            if stop_event is not None and stop_event.is_set():
                logger.debug("stop requested; killing %s (pid %s)", cmd[0], proc.pid)
                _kill(proc)
                raise AnalysisCancelled(f"{cmd[0]} stopped before it finished")
            if time.monotonic() >= deadline:
                _kill(proc)
                raise subprocess.TimeoutExpired(cmd, timeout)
