# playdiag/domain/policies/stream_classifier.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from playdiag.domain.entities.streams import AudioStream, StreamRecord, SubtitleStream, VideoStream
from playdiag.domain.policies.compat_tables import IMAGE_VIDEO_CODECS


@dataclass(frozen=True)
class ClassifiedStreams:
    """
    Streams grouped by kind, original order kept within each group.

    `video` holds every video entry (cover art included) and drives the
    "no video stream" check; `playable_video` is what the video rules look at.
    """
    video: Tuple[VideoStream, ...] = ()
    audio: Tuple[AudioStream, ...] = ()
    subtitle: Tuple[SubtitleStream, ...] = ()

    @property
    def video_count(self) -> int:
        return len(self.video)

    @property
    def playable_video(self) -> Tuple[VideoStream, ...]:
        return tuple(v for v in self.video if not is_cover_art(v))


def is_cover_art(stream: VideoStream) -> bool:
    return stream.codec_name in IMAGE_VIDEO_CODECS or stream.attached_pic


def classify_streams(streams: Iterable[StreamRecord]) -> ClassifiedStreams:
    video: List[VideoStream] = []
    audio: List[AudioStream] = []
    subtitle: List[SubtitleStream] = []
    for s in streams:
        if isinstance(s, VideoStream):
            video.append(s)
        elif isinstance(s, AudioStream):
            audio.append(s)
        elif isinstance(s, SubtitleStream):
            subtitle.append(s)
    return ClassifiedStreams(video=tuple(video), audio=tuple(audio), subtitle=tuple(subtitle))
