# playdiag/domain/policies/report_aggregator.py
from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, List, Optional, Sequence, Tuple

from playdiag.domain.entities.issue import Issue
from playdiag.domain.entities.probe import ProbeResult
from playdiag.domain.entities.report import DiagnosticReport, VideoEvaluation
from playdiag.domain.enums.severity import Severity

# issue code -> recommendation (Warning/Critical issues only)
RECOMMENDATIONS = MappingProxyType({
    "container.windows_media": "Remux to a modern container (MKV or MP4)",
    "container.legacy_avi": "Remux to a modern container (MKV or MP4)",
    "container.legacy": "Remux to a modern container (MKV or MP4)",
    "container.unknown": "Remux to a modern container (MKV or MP4)",
    "video.missing": "Verify the source file; it contains no video stream",
    "video.codec_incompatible": "Re-encode the video to H.264 or HEVC",
    "video.codec_deprecated": "Re-encode the video to H.264 or HEVC",
    "video.codec_uncommon": "Re-encode the video to H.264 or HEVC",
    "video.codec_container_mismatch": "Remux VP8/VP9 video into WebM or MKV",
    "video.hdr_pixel_format": "Re-encode HDR video as 10-bit yuv420p10le",
    "video.interlaced": "Deinterlace the video (e.g. yadif/bwdif) before serving",
    "video.level_high": "Re-encode at a lower codec level for older devices",
    "video.bitrate_high": "Lower the video bitrate or provide an optimized version",
    "video.gop_large": "Re-encode with a keyframe interval of 2-5 seconds",
    "video.b_frames_profile": "Re-encode as H.264 High profile (8-bit)",
    "audio.missing": "Check whether the file is meant to have audio",
    "audio.lossless_surround": "Add a secondary AAC stereo track",
    "audio.dts": "Transcode DTS audio to AC-3 or E-AC-3",
    "audio.pcm": "Compress PCM audio to AAC or FLAC",
    "audio.lossless_open": "Add a secondary AAC track for clients without lossless support",
    "audio.container_mismatch": "Remux into a container that supports the audio codec, or transcode to AAC",
    "audio.uncommon": "Transcode audio to AAC",
    "audio.channels_high": "Add a 5.1 or stereo downmix track",
    "subtitle.image_based": "Convert image-based subtitles to SRT (OCR) to avoid burn-in",
    "subtitle.uncommon": "Convert subtitles to SRT",
    "subtitle.forced_not_default": "Set the default flag on forced subtitle tracks",
    "integrity.decode_error": "Re-mux or re-encode from a clean source; the file has decode errors",
    "integrity.failed": "Re-mux or re-encode from a clean source; the file has decode errors",
})

DV_KEEP_HDR10 = "Remove Dolby Vision, keep HDR10"
DV_NO_HDR_BASE = "Re-encode without Dolby Vision; there is no HDR10 base layer to keep"


def derive_recommendations(issues: Sequence[Issue], video: Optional[VideoEvaluation] = None) -> Tuple[str, ...]:
    """
    Pure function of (issues, video flags): same inputs in the same order give
    the same recommendations in the same order, deduplicated by first appearance.
    """
    out: List[str] = []

    def _add(rec: str) -> None:
        if rec not in out:
            out.append(rec)

    for issue in issues:
        if not issue.is_problem:
            continue
        if issue.code == "video.dolby_vision":
            hdr_base = video.is_hdr if video is not None else True
            _add(DV_KEEP_HDR10 if hdr_base else DV_NO_HDR_BASE)
            continue
        rec = RECOMMENDATIONS.get(issue.code)
        if rec:
            _add(rec)
    return tuple(out)


def aggregate_report(
    path: str,
    container: ProbeResult,
    *,
    container_issues: Iterable[Issue] = (),
    video: Optional[VideoEvaluation] = None,
    audio_issues: Iterable[Issue] = (),
    subtitle_issues: Iterable[Issue] = (),
    integrity_issues: Iterable[Issue] = (),
) -> DiagnosticReport:
    """Concatenate container -> video -> audio -> subtitle -> integrity and summarize."""
    issues: Tuple[Issue, ...] = (
        *container_issues,
        *(video.issues if video is not None else ()),
        *audio_issues,
        *subtitle_issues,
        *integrity_issues,
    )
    return DiagnosticReport(
        path=path,
        size_bytes=container.size_bytes,
        duration_sec=container.duration_sec,
        bitrate=container.bitrate,
        issues=issues,
        critical_count=sum(1 for i in issues if i.severity is Severity.critical),
        warning_count=sum(1 for i in issues if i.severity is Severity.warning),
        recommendations=derive_recommendations(issues, video),
        is_hdr=video.is_hdr if video is not None else False,
        has_dolby_vision=video.has_dolby_vision if video is not None else False,
    )
