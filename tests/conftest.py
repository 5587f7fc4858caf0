# tests/conftest.py
from __future__ import annotations
import threading
from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional, Sequence

import pytest

from playdiag.common.probe.ffprobe_helpers import parse_ffprobe
from playdiag.common.settings import Settings, get_settings
from playdiag.domain.entities.frames import DecodeValidation, FrameSample
from playdiag.domain.entities.probe import ProbeData
from playdiag.services.diagnostics.service import DiagnosticService


# ---------------------------- fake collaborators ----------------------------

class FakeProbe:
    def __init__(self, data: ProbeData | Exception):
        self.data = data
        self.calls: List[Path] = []

    def probe(self, path: Path) -> ProbeData:
        self.calls.append(path)
        if isinstance(self.data, Exception):
            raise self.data
        return self.data


class FakeFrames:
    def __init__(self, by_index: Optional[Mapping[int, List[FrameSample]]] = None):
        self.by_index = dict(by_index or {})
        self.calls: List[tuple] = []

    def sample_frames(
        self,
        path: Path,
        stream_index: int,
        max_samples: int,
        stop_event: Optional[threading.Event] = None,
    ) -> List[FrameSample]:
        self.calls.append((path, stream_index, max_samples))
        return list(self.by_index.get(stream_index, []))[:max_samples]


class FakeValidator:
    def __init__(self, result: DecodeValidation | Exception | None = None, gate: Optional[threading.Event] = None):
        self.result = result if result is not None else DecodeValidation(exit_status=0)
        self.gate = gate
        self.calls: List[tuple] = []
        self.stop_event: Optional[threading.Event] = None

    def validate(
        self,
        path: Path,
        max_duration_sec: int,
        stop_event: Optional[threading.Event] = None,
    ) -> DecodeValidation:
        self.calls.append((path, max_duration_sec))
        self.stop_event = stop_event
        if self.gate is not None:
            self.gate.wait(5)
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


class FakeSidecars:
    def __init__(self, names: Sequence[str] = ()):
        self.names = list(names)
        self.calls: List[tuple] = []

    def list_matching(self, directory: Path, base_name: str) -> List[str]:
        self.calls.append((directory, base_name))
        return list(self.names)


# ---------------------------- fixtures ----------------------------

@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def settings() -> Settings:
    return Settings()


@pytest.fixture()
def media_file(tmp_path) -> Path:
    f = tmp_path / "movie.mkv"
    f.write_bytes(b"\x1a\x45\xdf\xa3")
    return f


@pytest.fixture()
def make_service(settings) -> Callable[..., DiagnosticService]:
    """
    Build a DiagnosticService over fakes. `payload` is ffprobe-shaped JSON and
    goes through the real parsing boundary.
    """
    def _make(
        payload: Mapping[str, Any] | Exception,
        *,
        frames: Optional[Mapping[int, List[FrameSample]]] = None,
        validation: DecodeValidation | Exception | None = None,
        sidecars: Sequence[str] = (),
        gate: Optional[threading.Event] = None,
    ) -> DiagnosticService:
        data = payload if isinstance(payload, Exception) else parse_ffprobe(payload)
        return DiagnosticService(
            probe=FakeProbe(data),
            frames=FakeFrames(frames),
            validator=FakeValidator(validation, gate=gate),
            sidecars=FakeSidecars(sidecars),
            settings=settings,
        )

    return _make


@pytest.fixture()
def api_client_for():
    """
    Build a TestClient whose `get_diagnostic_service` dependency is overridden
    to return the given service (usually one built by `make_service`).
    """
    from starlette.testclient import TestClient

    from playdiag.services.api.app import create_app
    from playdiag.services.api.deps import get_diagnostic_service

    apps = []

    def _client(service: DiagnosticService) -> TestClient:
        app = create_app()
        app.dependency_overrides[get_diagnostic_service] = lambda: service
        apps.append(app)
        return TestClient(app)

    yield _client
    for app in apps:
        app.dependency_overrides.clear()
