import subprocess
import sys
import threading
import time

import pytest

from playdiag.common.probe.process import run_cancellable
from playdiag.domain.errors import AnalysisCancelled

SLEEPER = [sys.executable, "-c", "import time; time.sleep(30)"]


def test_captures_output_and_exit_status():
    cmd = [sys.executable, "-c", "import sys; print('out'); print('err', file=sys.stderr); sys.exit(3)"]
    proc = run_cancellable(cmd, timeout=10)
    assert proc.returncode == 3
    assert proc.stdout.strip() == "out"
    assert proc.stderr.strip() == "err"


def test_undecodable_output_is_replaced():
    cmd = [sys.executable, "-c", "import sys; sys.stdout.buffer.write(b'ok \\xff\\xfe')"]
    proc = run_cancellable(cmd, timeout=10)
    assert proc.stdout.startswith("ok ")
    assert "�" in proc.stdout


def test_stop_event_kills_child_promptly():
    stop = threading.Event()
    threading.Timer(0.2, stop.set).start()
    started = time.monotonic()
    with pytest.raises(AnalysisCancelled):
        run_cancellable(SLEEPER, timeout=30, stop_event=stop, poll_sec=0.05)
    assert time.monotonic() - started < 5


def test_timeout_kills_child():
    started = time.monotonic()
    with pytest.raises(subprocess.TimeoutExpired):
        run_cancellable(SLEEPER, timeout=0.3, poll_sec=0.05)
    assert time.monotonic() - started < 5


def test_missing_binary_raises_os_error():
    with pytest.raises(OSError):
        run_cancellable(["/definitely/not/a/binary"], timeout=1)
