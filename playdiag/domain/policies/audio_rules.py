# playdiag/domain/policies/audio_rules.py
from __future__ import annotations

from typing import Iterable, List, Optional

from playdiag.domain.entities.issue import Issue
from playdiag.domain.entities.probe import ContainerFormat
from playdiag.domain.entities.streams import AudioStream
from playdiag.domain.enums.issue_category import IssueCategory
from playdiag.domain.policies.compat_tables import (
    BROADLY_SUPPORTED_AUDIO,
    DTS_FAMILY_AUDIO,
    LOSSLESS_OPEN_AUDIO,
    LOSSLESS_SURROUND_AUDIO,
    MAX_AUDIO_CHANNELS,
    OPEN_AUDIO_NATIVE_CONTAINERS,
    PCM_PREFIX,
)

AUDIO = IssueCategory.audio


def _label(stream: AudioStream) -> str:
    parts = [f"#{stream.index}"]
    if stream.language:
        parts.append(stream.language)
    if stream.title:
        parts.append(f'"{stream.title}"')
    return " ".join(parts)


def check_codec(stream: AudioStream, container: ContainerFormat) -> Issue:
    codec = stream.codec_name
    idx = stream.index
    label = _label(stream)

    if codec in LOSSLESS_SURROUND_AUDIO:
        return Issue.warning(
            AUDIO, "audio.lossless_surround",
            f"{LOSSLESS_SURROUND_AUDIO[codec]} track {label} will force a transcode; "
            f"add a secondary AAC track",
            idx,
        )
    if codec in DTS_FAMILY_AUDIO:
        variant = stream.profile or "DTS"
        return Issue.warning(
            AUDIO, "audio.dts",
            f"{variant} track {label} is unsupported by most clients; transcode to AC-3/E-AC-3",
            idx,
        )
    if codec.startswith(PCM_PREFIX):
        return Issue.warning(
            AUDIO, "audio.pcm",
            f"Uncompressed PCM ({codec}) track {label} uses a lot of bandwidth",
            idx,
        )
    if codec in LOSSLESS_OPEN_AUDIO:
        return Issue.warning(
            AUDIO, "audio.lossless_open",
            f"{LOSSLESS_OPEN_AUDIO[codec]} track {label} has limited client support",
            idx,
        )
    if codec in OPEN_AUDIO_NATIVE_CONTAINERS:
        if container.has_format(*OPEN_AUDIO_NATIVE_CONTAINERS[codec]):
            return Issue.good(AUDIO, "audio.ok", f"{codec.capitalize()} track {label} in its native container", idx)
        return Issue.warning(
            AUDIO, "audio.container_mismatch",
            f"{codec.capitalize()} track {label} outside its native container ({container.format_name})",
            idx,
        )
    if codec in BROADLY_SUPPORTED_AUDIO:
        return Issue.good(AUDIO, "audio.ok", f"{BROADLY_SUPPORTED_AUDIO[codec]} track {label} is broadly supported", idx)
    return Issue.warning(AUDIO, "audio.uncommon", f"Uncommon audio codec ({codec}) on track {label}", idx)


def check_channels(stream: AudioStream) -> Optional[Issue]:
    if stream.channels is None or stream.channels <= MAX_AUDIO_CHANNELS:
        return None
    return Issue.warning(
        AUDIO, "audio.channels_high",
        f"Track {_label(stream)} has {stream.channels} channels; clients downmix or transcode above {MAX_AUDIO_CHANNELS}",
        stream.index,
    )


def evaluate_audio(streams: Iterable[AudioStream], container: ContainerFormat) -> List[Issue]:
    out: List[Issue] = []
    seen = False
    for s in streams:
        seen = True
        out.append(check_codec(s, container))
        ch = check_channels(s)
        if ch is not None:
            out.append(ch)
    if not seen:
        out.append(Issue.warning(AUDIO, "audio.missing", "No audio stream present"))
    return out
