# playdiag/domain/policies/subtitle_rules.py
from __future__ import annotations

from pathlib import PurePath
from typing import Iterable, List, Optional

from playdiag.domain.entities.issue import Issue
from playdiag.domain.entities.streams import SubtitleStream
from playdiag.domain.enums.issue_category import IssueCategory
from playdiag.domain.policies.compat_tables import (
    IMAGE_SUBTITLE_CODECS,
    SIDECAR_SUBTITLE_EXTS,
    TEXT_SUBTITLE_CODECS,
)

SUBTITLE = IssueCategory.subtitle


def check_format(stream: SubtitleStream) -> Issue:
    codec = stream.codec_name
    lang = f" ({stream.language})" if stream.language else ""
    if codec in IMAGE_SUBTITLE_CODECS:
        return Issue.warning(
            SUBTITLE, "subtitle.image_based",
            f"Image-based {IMAGE_SUBTITLE_CODECS[codec]} subtitles{lang} must be burned in; "
            f"expect transcoding and poor scaling",
            stream.index,
        )
    if codec in TEXT_SUBTITLE_CODECS:
        return Issue.good(SUBTITLE, "subtitle.text_ok", f"Text-based {TEXT_SUBTITLE_CODECS[codec]} subtitles{lang}", stream.index)
    return Issue.warning(SUBTITLE, "subtitle.uncommon", f"Uncommon subtitle format ({codec}){lang}", stream.index)


def check_disposition(stream: SubtitleStream) -> Optional[Issue]:
    if stream.forced and not stream.default:
        return Issue.warning(
            SUBTITLE, "subtitle.forced_not_default",
            "Subtitle is flagged forced but not default; it may not display automatically",
            stream.index,
        )
    return None


def find_sidecars(sidecar_files: Iterable[str], input_name: str) -> List[str]:
    """
    Subtitle files next to the input that share its base name, e.g.
    'movie.srt' or 'movie.en.forced.srt' for 'movie.mkv'. Order is kept.
    """
    stem = PurePath(input_name).stem
    out: List[str] = []
    for name in sidecar_files:
        p = PurePath(name)
        if p.name == input_name:
            continue
        if p.suffix.lstrip(".").lower() not in SIDECAR_SUBTITLE_EXTS:
            continue
        if p.name == f"{stem}{p.suffix}" or p.name.startswith(f"{stem}."):
            if p.name not in out:
                out.append(p.name)
    return out


def evaluate_subtitles(
    streams: Iterable[SubtitleStream],
    sidecar_files: Iterable[str] = (),
    *,
    input_name: str = "",
) -> List[Issue]:
    out: List[Issue] = []
    for s in streams:
        out.append(check_format(s))
        disp = check_disposition(s)
        if disp is not None:
            out.append(disp)
    if input_name:
        for name in find_sidecars(sidecar_files, input_name):
            out.append(Issue.good(SUBTITLE, "subtitle.sidecar", f"External subtitle file found: {name}"))
    return out
