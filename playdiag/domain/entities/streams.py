# playdiag/domain/entities/streams.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Optional, Tuple, Union

from playdiag.domain.enums.stream_kind import StreamKind

# Matched case-insensitively against SideData.side_data_type.
DOLBY_VISION_MARKERS: Tuple[str, ...] = ("dovi", "dolby vision")


@dataclass(frozen=True)
class FrameRate:
    num: int
    den: int

    @property
    def fps(self) -> Optional[float]:
        if self.den == 0:
            return None
        return self.num / self.den

    def __str__(self) -> str:
        return f"{self.num}/{self.den}"


@dataclass(frozen=True)
class SideData:
    """One entry of a video stream's side-data list (ffprobe `side_data_list`)."""
    side_data_type: str
    dv_profile: Optional[int] = None
    dv_level: Optional[int] = None
    bl_present_flag: Optional[int] = None
    dv_bl_signal_compatibility_id: Optional[int] = None

    @property
    def is_dolby_vision(self) -> bool:
        t = self.side_data_type.lower()
        return any(marker in t for marker in DOLBY_VISION_MARKERS)


@dataclass(frozen=True)
class _StreamBase:
    index: int
    codec_name: str
    codec_long_name: Optional[str] = None


@dataclass(frozen=True)
class VideoStream(_StreamBase):
    kind: ClassVar[StreamKind] = StreamKind.video

    width: Optional[int] = None
    height: Optional[int] = None
    pix_fmt: Optional[str] = None
    frame_rate: Optional[FrameRate] = None
    bitrate: Optional[int] = None
    profile: Optional[str] = None
    level: Optional[int] = None
    color_space: Optional[str] = None
    color_transfer: Optional[str] = None
    color_primaries: Optional[str] = None
    color_range: Optional[str] = None
    field_order: Optional[str] = None
    side_data: Tuple[SideData, ...] = field(default_factory=tuple)
    attached_pic: bool = False

    @property
    def dolby_vision(self) -> Optional[SideData]:
        return next((sd for sd in self.side_data if sd.is_dolby_vision), None)

    @property
    def resolution(self) -> Optional[str]:
        if self.width is None or self.height is None:
            return None
        return f"{self.width}x{self.height}"


@dataclass(frozen=True)
class AudioStream(_StreamBase):
    kind: ClassVar[StreamKind] = StreamKind.audio

    language: Optional[str] = None
    title: Optional[str] = None
    channels: Optional[int] = None
    channel_layout: Optional[str] = None
    sample_rate: Optional[int] = None
    bitrate: Optional[int] = None
    profile: Optional[str] = None


@dataclass(frozen=True)
class SubtitleStream(_StreamBase):
    kind: ClassVar[StreamKind] = StreamKind.subtitle

    language: Optional[str] = None
    title: Optional[str] = None
    forced: bool = False
    default: bool = False


StreamRecord = Union[VideoStream, AudioStream, SubtitleStream]
