# playdiag/domain/entities/probe.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from playdiag.domain.entities.streams import StreamRecord


@dataclass(frozen=True)
class ProbeResult:
    """
    Normalized, framework-free container facts from a media probe (e.g., ffprobe).
    Per-stream facts live in StreamRecords; see ProbeData.
    """
    format_names: Tuple[str, ...] = ()
    format_long_name: Optional[str] = None
    duration_sec: Optional[float] = None
    bitrate: Optional[int] = None
    size_bytes: Optional[int] = None
    nb_streams: Optional[int] = None

    @property
    def format_name(self) -> str:
        return ",".join(self.format_names)

    def has_format(self, *tags: str) -> bool:
        return any(t in self.format_names for t in tags)


# ContainerFormat is what the rule evaluators talk about; same value.
ContainerFormat = ProbeResult


@dataclass(frozen=True)
class ProbeData:
    """What crosses the parsing boundary: one container plus its ordered streams."""
    container: ProbeResult
    streams: Tuple[StreamRecord, ...] = field(default_factory=tuple)
