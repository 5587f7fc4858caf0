# playdiag/domain/policies/video_rules.py
from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Mapping, Optional, Sequence

from playdiag.domain.entities.frames import FrameSample
from playdiag.domain.entities.issue import Issue
from playdiag.domain.entities.probe import ContainerFormat
from playdiag.domain.entities.report import VideoEvaluation
from playdiag.domain.entities.streams import VideoStream
from playdiag.domain.enums.issue_category import IssueCategory
from playdiag.domain.enums.picture_type import PictureType
from playdiag.domain.policies.compat_tables import (
    B_FRAME_STRAIN_PROFILES,
    DEPRECATED_VIDEO_CODECS,
    HDR_PIXEL_FORMATS,
    HDR_TRANSFERS,
    INCOMPATIBLE_VIDEO_CODECS,
    INTERLACED_UNKNOWN,
    LEGACY_AVI_TAGS,
    LEGACY_CONTAINER_TAGS,
    LEVEL_CEILINGS,
    MODERN_CONTAINER_TAGS,
    MODERN_VIDEO_CODECS,
    WEBM_FAMILY_TAGS,
    WEBM_NATIVE_VIDEO_CODECS,
    WINDOWS_MEDIA_TAGS,
)

CONTAINER = IssueCategory.container
VIDEO = IssueCategory.video

DEFAULT_GOP_WARN_FRAMES = 250
DEFAULT_HIGH_BITRATE_BPS = 60_000_000


# ---------------------------------------------------------------------------
# Container
# ---------------------------------------------------------------------------
def evaluate_container(container: ContainerFormat) -> List[Issue]:
    out: List[Issue] = []
    name = container.format_name or "unknown"

    if container.has_format(*WINDOWS_MEDIA_TAGS):
        out.append(Issue.critical(
            CONTAINER, "container.windows_media",
            f"Windows Media container ({name}) is not supported by streaming clients",
        ))
    elif container.has_format(*LEGACY_AVI_TAGS):
        out.append(Issue.warning(
            CONTAINER, "container.legacy_avi",
            "AVI container is archaic: no reliable seeking, timestamps or modern codec support",
        ))
    elif container.has_format(*MODERN_CONTAINER_TAGS):
        out.append(Issue.good(CONTAINER, "container.ok", f"Container format {name} is widely supported"))
    elif container.has_format(*LEGACY_CONTAINER_TAGS):
        out.append(Issue.warning(
            CONTAINER, "container.legacy",
            f"Legacy container ({name}) often needs remuxing before direct play",
        ))
    else:
        out.append(Issue.warning(CONTAINER, "container.unknown", f"Uncommon container format ({name})"))
    return out


def check_presence(video_count: int) -> Optional[Issue]:
    """
    `video_count` must include cover-art streams: a file whose only video is
    a poster image still "has video" here.
    """
    if video_count == 0:
        return Issue.critical(VIDEO, "video.missing", "No video stream present")
    return None


# ---------------------------------------------------------------------------
# Per-stream checks; each returns at most one Issue
# ---------------------------------------------------------------------------
def check_codec(stream: VideoStream, container: ContainerFormat) -> Optional[Issue]:
    codec = stream.codec_name
    idx = stream.index
    if codec in INCOMPATIBLE_VIDEO_CODECS:
        return Issue.critical(VIDEO, "video.codec_incompatible", f"{INCOMPATIBLE_VIDEO_CODECS[codec]} ({codec})", idx)
    if codec in DEPRECATED_VIDEO_CODECS:
        return Issue.warning(VIDEO, "video.codec_deprecated", f"{DEPRECATED_VIDEO_CODECS[codec]} ({codec})", idx)
    if codec in WEBM_NATIVE_VIDEO_CODECS:
        if container.has_format(*WEBM_FAMILY_TAGS):
            return Issue.good(VIDEO, "video.codec_ok", f"{codec.upper()} in a WebM/Matroska container", idx)
        return Issue.warning(
            VIDEO, "video.codec_container_mismatch",
            f"{codec.upper()} outside its native WebM/Matroska container ({container.format_name})", idx,
        )
    if codec in MODERN_VIDEO_CODECS:
        return Issue.good(VIDEO, "video.codec_ok", f"Video codec {codec} is broadly supported", idx)
    return Issue.warning(VIDEO, "video.codec_uncommon", f"Uncommon video codec ({codec})", idx)


def is_hdr(stream: VideoStream) -> bool:
    return (stream.color_transfer or "").lower() in HDR_TRANSFERS


def check_hdr(stream: VideoStream) -> Optional[Issue]:
    if not is_hdr(stream):
        return None
    transfer = (stream.color_transfer or "").lower()
    label = HDR_TRANSFERS[transfer]
    if stream.pix_fmt not in HDR_PIXEL_FORMATS:
        return Issue.warning(
            VIDEO, "video.hdr_pixel_format",
            f"{label} content with unusual pixel format for HDR ({stream.pix_fmt or 'unknown'})",
            stream.index,
        )
    return Issue.good(VIDEO, "video.hdr_ok", f"{label} with {stream.pix_fmt}", stream.index)


def check_dolby_vision(stream: VideoStream) -> Optional[Issue]:
    # Side data only; the transfer function says nothing about Dolby Vision.
    dv = stream.dolby_vision
    if dv is None:
        return None
    if dv.dv_profile is not None:
        msg = f"Dolby Vision profile {dv.dv_profile} present; most clients cannot direct-play it"
    else:
        msg = "Dolby Vision metadata present; most clients cannot direct-play it"
    return Issue.critical(VIDEO, "video.dolby_vision", msg, stream.index)


def check_interlace(stream: VideoStream) -> Issue:
    order = (stream.field_order or "").lower()
    if order and order != "progressive" and order not in INTERLACED_UNKNOWN:
        return Issue.critical(
            VIDEO, "video.interlaced",
            f"Interlaced video ({order}); clients must deinterlace or transcode", stream.index,
        )
    return Issue.good(VIDEO, "video.progressive", "Progressive scan", stream.index)


def check_level(stream: VideoStream) -> Optional[Issue]:
    if stream.level is None:
        return None
    ceiling = LEVEL_CEILINGS.get(stream.codec_name)
    if ceiling is None:
        return None
    limit, label = ceiling
    if stream.level > limit:
        return Issue.warning(
            VIDEO, "video.level_high",
            f"{stream.codec_name} level {stream.level} exceeds level {label}; older devices may refuse it",
            stream.index,
        )
    return None


def check_bitrate(stream: VideoStream, high_bitrate_bps: int) -> Optional[Issue]:
    if stream.bitrate is None or stream.bitrate <= high_bitrate_bps:
        return None
    return Issue.warning(
        VIDEO, "video.bitrate_high",
        f"Video bitrate {stream.bitrate / 1_000_000:.1f} Mbps may exceed client bandwidth",
        stream.index,
    )


def picture_type_counts(frames: Sequence[FrameSample]) -> Counter:
    return Counter(f.pict_type for f in frames)


def estimate_gop_size(frames: Sequence[FrameSample]) -> Optional[int]:
    """
    round(sample size / I-frame count), or None with no I-frames in the sample.
    The sample window is not adjusted for clips shorter than the window.
    """
    i_count = picture_type_counts(frames)[PictureType.I]
    if i_count == 0:
        return None
    return round(len(frames) / i_count)


def check_gop(stream: VideoStream, frames: Sequence[FrameSample], gop_warn_frames: int) -> Optional[Issue]:
    gop = estimate_gop_size(frames)
    if gop is None or gop <= gop_warn_frames:
        return None
    fps = stream.frame_rate.fps if stream.frame_rate else None
    secs = f" (~{gop / fps:.1f}s)" if fps else ""
    return Issue.warning(
        VIDEO, "video.gop_large",
        f"Large GOP of about {gop} frames{secs}; seeking will be slow",
        stream.index,
    )


def check_b_frames(stream: VideoStream, frames: Sequence[FrameSample]) -> Optional[Issue]:
    profiles = B_FRAME_STRAIN_PROFILES.get(stream.codec_name)
    if not profiles or (stream.profile or "").lower() not in profiles:
        return None
    if not any(f.pict_type is PictureType.B for f in frames):
        return None
    return Issue.warning(
        VIDEO, "video.b_frames_profile",
        f"B-frames in {stream.codec_name} {stream.profile} strain older hardware decoders",
        stream.index,
    )


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------
def evaluate_video_stream(
    stream: VideoStream,
    container: ContainerFormat,
    frames: Sequence[FrameSample] = (),
    *,
    gop_warn_frames: int = DEFAULT_GOP_WARN_FRAMES,
    high_bitrate_bps: int = DEFAULT_HIGH_BITRATE_BPS,
) -> VideoEvaluation:
    """Every check runs; none short-circuits another."""
    found = [
        check_codec(stream, container),
        check_hdr(stream),
        check_dolby_vision(stream),
        check_interlace(stream),
        check_level(stream),
        check_bitrate(stream, high_bitrate_bps),
        check_gop(stream, frames, gop_warn_frames),
        check_b_frames(stream, frames),
    ]
    dv = stream.dolby_vision
    return VideoEvaluation(
        issues=tuple(i for i in found if i is not None),
        is_hdr=is_hdr(stream),
        has_dolby_vision=dv is not None,
        dolby_vision_profile=dv.dv_profile if dv is not None else None,
    )


def evaluate_video(
    streams: Iterable[VideoStream],
    container: ContainerFormat,
    frames_by_index: Optional[Mapping[int, Sequence[FrameSample]]] = None,
    *,
    video_count: Optional[int] = None,
    gop_warn_frames: int = DEFAULT_GOP_WARN_FRAMES,
    high_bitrate_bps: int = DEFAULT_HIGH_BITRATE_BPS,
) -> VideoEvaluation:
    """
    Evaluate the playable video streams and fold the per-stream flags together.

    Callers pass ClassifiedStreams.playable_video as `streams` and
    ClassifiedStreams.video_count as `video_count`; the presence check counts
    cover art, the detailed checks never see it.
    """
    frames_by_index = frames_by_index or {}
    issues: List[Issue] = []
    if video_count is not None:
        presence = check_presence(video_count)
        if presence is not None:
            issues.append(presence)
    hdr = False
    dv = False
    dv_profile: Optional[int] = None
    for s in streams:
        ev = evaluate_video_stream(
            s, container, frames_by_index.get(s.index, ()),
            gop_warn_frames=gop_warn_frames,
            high_bitrate_bps=high_bitrate_bps,
        )
        issues.extend(ev.issues)
        hdr = hdr or ev.is_hdr
        if ev.has_dolby_vision and not dv:
            dv = True
            dv_profile = ev.dolby_vision_profile
    return VideoEvaluation(issues=tuple(issues), is_hdr=hdr, has_dolby_vision=dv, dolby_vision_profile=dv_profile)
