from __future__ import annotations
import threading
from pathlib import Path
from typing import List, Optional, Protocol
from playdiag.domain.entities.frames import FrameSample
from playdiag.domain.entities.probe import ProbeData

class MediaProbePort(Protocol):
    def probe(self, path: Path) -> ProbeData: ...

class FrameSamplerPort(Protocol):
    def sample_frames(
        self,
        path: Path,
        stream_index: int,
        max_samples: int,
        stop_event: Optional[threading.Event] = None,
    ) -> List[FrameSample]: ...
