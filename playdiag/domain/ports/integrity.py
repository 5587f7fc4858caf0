from __future__ import annotations
import threading
from pathlib import Path
from typing import Optional, Protocol
from playdiag.domain.entities.frames import DecodeValidation

class DecodeValidatorPort(Protocol):
    def validate(
        self,
        path: Path,
        max_duration_sec: int,
        stop_event: Optional[threading.Event] = None,
    ) -> DecodeValidation: ...
