# playdiag/common/probe/ffprobe_helpers.py
from __future__ import annotations
from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple
import json

from playdiag.common.logging import get_logger
from playdiag.common.strings.splitters import csv_to_tags
from playdiag.domain.entities.frames import FrameSample
from playdiag.domain.entities.probe import ProbeData, ProbeResult
from playdiag.domain.entities.streams import (
    AudioStream,
    FrameRate,
    SideData,
    StreamRecord,
    SubtitleStream,
    VideoStream,
)
from playdiag.domain.enums.picture_type import PictureType
from playdiag.domain.errors import ProbeParseError

logger = get_logger(__name__)


# ---- command builders ---------------------------------------------------------

def build_ffprobe_cmd(
    input_path: str | Path,
    *,
    ffprobe_bin: str = "ffprobe",
    log_level: str = "error",
) -> List[str]:
    """
    Build an ffprobe command that emits container + stream JSON we can parse consistently.
    """
    if isinstance(input_path, Path):
        input_path = str(input_path)
    return [
        ffprobe_bin,
        "-v", log_level,
        "-show_streams",
        "-show_format",
        "-print_format", "json",
        "--",  # Stop option parsing in case of weird filenames
        input_path,
    ]


def build_frames_cmd(
    input_path: str | Path,
    stream_index: int,
    max_samples: int,
    *,
    ffprobe_bin: str = "ffprobe",
    log_level: str = "error",
) -> List[str]:
    """
    Frame-type listing for one stream, bounded to the first `max_samples` packets.
    """
    return [
        ffprobe_bin,
        "-v", log_level,
        "-select_streams", str(stream_index),
        "-read_intervals", f"%+#{max_samples}",
        "-show_entries", "frame=pict_type,stream_index",
        "-print_format", "json",
        "--",
        str(input_path),
    ]


def build_decode_cmd(
    input_path: str | Path,
    max_duration_sec: int,
    *,
    ffmpeg_bin: str = "ffmpeg",
) -> List[str]:
    """
    Decode the first `max_duration_sec` seconds to the null muxer; errors go to stderr.
    """
    return [
        ffmpeg_bin,
        "-nostdin",
        "-hide_banner",
        "-v", "error",
        "-t", str(max_duration_sec),
        "-i", str(input_path),
        "-f", "null",
        "-",
    ]


# ---- tiny parse helpers -------------------------------------------------------

def _parse_float(x) -> Optional[float]:
    try:
        if x is None:
            return None
        return float(x)
    except (TypeError, ValueError):
        return None

def _parse_int(x) -> Optional[int]:
    try:
        if x is None:
            return None
        return int(float(x))
    except (TypeError, ValueError):
        return None

def _parse_rate(rate: Any) -> Optional[FrameRate]:
    if not rate or "/" not in str(rate):
        return None
    n, d = str(rate).split("/", 1)
    num, den = _parse_int(n), _parse_int(d)
    if num is None or den is None or den == 0 or num == 0:
        return None
    return FrameRate(num=num, den=den)

def _get_str(obj: Mapping[str, Any], key: str) -> Optional[str]:
    val = obj.get(key)
    if val is None:
        return None
    s = str(val).strip()
    return s or None

def _get_tag(obj: Mapping[str, Any], key: str) -> Optional[str]:
    tags = obj.get("tags") or {}
    if not isinstance(tags, Mapping):
        return None
    # Matroska tags are sometimes upper-case (LANGUAGE, TITLE).
    val = tags.get(key, tags.get(key.upper()))
    return str(val) if val is not None else None

def _flag(obj: Mapping[str, Any], key: str) -> bool:
    disp = obj.get("disposition") or {}
    if not isinstance(disp, Mapping):
        return False
    return _parse_int(disp.get(key)) == 1


# ---- parsing boundary ---------------------------------------------------------

def load_json_object(text: str | bytes | None, *, what: str = "ffprobe") -> Mapping[str, Any]:
    if not text:
        raise ProbeParseError(f"{what} produced no output")
    try:
        data = json.loads(text)
    except ValueError as e:  # JSONDecodeError, or UnicodeDecodeError for non-UTF-8 bytes
        raise ProbeParseError(f"{what} produced invalid JSON", stderr=str(e)) from e
    if not isinstance(data, Mapping):
        raise ProbeParseError(f"{what} output is not a JSON object")
    return data


def parse_ffprobe_json(text: str | bytes | None) -> ProbeData:
    return parse_ffprobe(load_json_object(text))


def parse_ffprobe(data: Mapping[str, Any]) -> ProbeData:
    """
    Validate ffprobe's `-show_format -show_streams` JSON into the typed model.
    Safe to call in unit tests with fixture JSON. Nothing untyped gets past here.
    """
    if not isinstance(data, Mapping):
        raise ProbeParseError("probe data is not a mapping")

    fmt = data.get("format")
    if not isinstance(fmt, Mapping):
        raise ProbeParseError("probe data has no 'format' object")
    if not _get_str(fmt, "format_name"):
        raise ProbeParseError("probe data has no format.format_name")

    raw_streams = data.get("streams", [])
    if raw_streams is None:
        raw_streams = []
    if not isinstance(raw_streams, list):
        raise ProbeParseError("probe data 'streams' is not a list")

    container = ProbeResult(
        format_names=csv_to_tags(_get_str(fmt, "format_name")),
        format_long_name=_get_str(fmt, "format_long_name"),
        duration_sec=_parse_float(fmt.get("duration")),
        bitrate=_parse_int(fmt.get("bit_rate")),
        size_bytes=_parse_int(fmt.get("size")),
        nb_streams=_parse_int(fmt.get("nb_streams")),
    )

    streams: List[StreamRecord] = []
    for pos, s in enumerate(raw_streams):
        rec = _parse_stream(s, pos)
        if rec is not None:
            streams.append(rec)

    return ProbeData(container=container, streams=tuple(streams))


def _parse_stream(s: Any, pos: int) -> Optional[StreamRecord]:
    if not isinstance(s, Mapping):
        raise ProbeParseError(f"stream #{pos} is not an object")
    index = _parse_int(s.get("index"))
    if index is None:
        raise ProbeParseError(f"stream #{pos} has no index")
    codec_type = _get_str(s, "codec_type")
    if codec_type is None:
        raise ProbeParseError(f"stream {index} has no codec_type")

    common = dict(
        index=index,
        codec_name=(_get_str(s, "codec_name") or "unknown").lower(),
        codec_long_name=_get_str(s, "codec_long_name"),
    )

    if codec_type == "video":
        return VideoStream(
            **common,
            width=_parse_int(s.get("width")),
            height=_parse_int(s.get("height")),
            pix_fmt=_get_str(s, "pix_fmt"),
            frame_rate=_parse_rate(s.get("avg_frame_rate")) or _parse_rate(s.get("r_frame_rate")),
            bitrate=_parse_int(s.get("bit_rate")),
            profile=_get_str(s, "profile"),
            level=_parse_int(s.get("level")),
            color_space=_get_str(s, "color_space"),
            color_transfer=_get_str(s, "color_transfer"),
            color_primaries=_get_str(s, "color_primaries"),
            color_range=_get_str(s, "color_range"),
            field_order=_get_str(s, "field_order"),
            side_data=_parse_side_data(s.get("side_data_list")),
            attached_pic=_flag(s, "attached_pic"),
        )
    if codec_type == "audio":
        return AudioStream(
            **common,
            language=_get_tag(s, "language"),
            title=_get_tag(s, "title"),
            channels=_parse_int(s.get("channels")),
            channel_layout=_get_str(s, "channel_layout"),
            sample_rate=_parse_int(s.get("sample_rate")),
            bitrate=_parse_int(s.get("bit_rate")),
            profile=_get_str(s, "profile"),
        )
    if codec_type == "subtitle":
        return SubtitleStream(
            **common,
            language=_get_tag(s, "language"),
            title=_get_tag(s, "title"),
            forced=_flag(s, "forced"),
            default=_flag(s, "default"),
        )

    logger.debug("Dropping stream %s of type %s", index, codec_type)
    return None


def _parse_side_data(raw: Any) -> Tuple[SideData, ...]:
    if not raw:
        return ()
    if not isinstance(raw, list):
        raise ProbeParseError("side_data_list is not a list")
    out: List[SideData] = []
    for entry in raw:
        if not isinstance(entry, Mapping):
            continue
        sd_type = _get_str(entry, "side_data_type")
        if not sd_type:
            continue
        out.append(
            SideData(
                side_data_type=sd_type,
                dv_profile=_parse_int(entry.get("dv_profile")),
                dv_level=_parse_int(entry.get("dv_level")),
                bl_present_flag=_parse_int(entry.get("bl_present_flag")),
                dv_bl_signal_compatibility_id=_parse_int(entry.get("dv_bl_signal_compatibility_id")),
            )
        )
    return tuple(out)


def parse_frames_json(text: str | bytes | None, *, stream_index: int, max_samples: int) -> List[FrameSample]:
    data = load_json_object(text, what="ffprobe frame listing")
    return parse_frames(data, stream_index=stream_index, max_samples=max_samples)


def parse_frames(data: Mapping[str, Any], *, stream_index: int, max_samples: int) -> List[FrameSample]:
    """
    Turn `-show_entries frame=pict_type` output into at most `max_samples` samples.
    Frames with an unknown picture type ("?", "S", ...) are skipped.
    """
    frames = data.get("frames", [])
    if frames is None:
        frames = []
    if not isinstance(frames, list):
        raise ProbeParseError("frame listing 'frames' is not a list")

    out: List[FrameSample] = []
    for f in frames:
        if len(out) >= max_samples:
            break
        if not isinstance(f, Mapping):
            continue
        idx = _parse_int(f.get("stream_index"))
        if idx is not None and idx != stream_index:
            continue
        pict = (_get_str(f, "pict_type") or "").upper()
        if pict not in PictureType.__members__:
            continue
        out.append(FrameSample(pict_type=PictureType(pict), stream_index=stream_index, ordinal=len(out)))
    return out
