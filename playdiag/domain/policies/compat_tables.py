# playdiag/domain/policies/compat_tables.py
"""
Read-only compatibility tables shared by every analysis.

Everything here is a frozenset or a MappingProxyType so concurrent
analyses can read without locking.
"""
from __future__ import annotations

from types import MappingProxyType

# ---- containers ---------------------------------------------------------------
LEGACY_AVI_TAGS = frozenset({"avi"})
WINDOWS_MEDIA_TAGS = frozenset({"asf"})
LEGACY_CONTAINER_TAGS = frozenset({"flv", "mpeg", "mpegts", "vob", "rm", "3gp"})
MODERN_CONTAINER_TAGS = frozenset({"matroska", "webm", "mov", "mp4", "m4a"})

# Containers where VP8/VP9 and Opus/Vorbis are at home.
WEBM_FAMILY_TAGS = frozenset({"webm", "matroska"})
OGG_FAMILY_TAGS = frozenset({"ogg"})

# ---- video --------------------------------------------------------------------
# Still-image codecs show up as "video" when a file carries cover art.
IMAGE_VIDEO_CODECS = frozenset({"mjpeg", "png", "bmp", "gif", "webp"})

MODERN_VIDEO_CODECS = frozenset({"h264", "hevc", "av1"})
DEPRECATED_VIDEO_CODECS = MappingProxyType({
    "mpeg2video": "MPEG-2 video is poorly supported by streaming clients",
    "mpeg1video": "MPEG-1 video is poorly supported by streaming clients",
    "mpeg4": "MPEG-4 Part 2 (DivX/Xvid) is poorly supported by modern clients",
})
INCOMPATIBLE_VIDEO_CODECS = MappingProxyType({
    "vc1": "VC-1 has almost no client-side decode support",
    "wmv1": "Windows Media Video 7 is not supported by streaming clients",
    "wmv2": "Windows Media Video 8 is not supported by streaming clients",
    "wmv3": "Windows Media Video 9 is not supported by streaming clients",
    "msmpeg4v1": "MS-MPEG4 v1 is not supported by streaming clients",
    "msmpeg4v2": "MS-MPEG4 v2 is not supported by streaming clients",
    "msmpeg4v3": "MS-MPEG4 v3 is not supported by streaming clients",
})
WEBM_NATIVE_VIDEO_CODECS = frozenset({"vp8", "vp9"})

HDR_TRANSFERS = MappingProxyType({
    "smpte2084": "HDR10 (PQ)",
    "arib-std-b67": "HLG",
})
HDR_PIXEL_FORMATS = frozenset({"yuv420p10le", "yuv420p10be", "p010le", "yuv420p12le"})

# ffprobe reports H.264 level as 10*level (51 == 5.1) and HEVC as 30*level (153 == 5.1).
LEVEL_CEILINGS = MappingProxyType({
    "h264": (51, "5.1"),
    "hevc": (153, "5.1"),
})

INTERLACED_UNKNOWN = frozenset({"unknown"})

# B-frames in these H.264 profiles are beyond most hardware decoders.
B_FRAME_STRAIN_PROFILES = MappingProxyType({
    "h264": frozenset({"high 10", "high 4:2:2", "high 4:4:4 predictive"}),
})

# ---- audio --------------------------------------------------------------------
BROADLY_SUPPORTED_AUDIO = MappingProxyType({
    "aac": "AAC",
    "ac3": "Dolby Digital (AC-3)",
    "eac3": "Dolby Digital Plus (E-AC-3)",
    "mp3": "MP3",
})
LOSSLESS_SURROUND_AUDIO = MappingProxyType({
    "truehd": "Dolby TrueHD",
    "mlp": "Meridian Lossless Packing",
})
DTS_FAMILY_AUDIO = frozenset({"dts"})
LOSSLESS_OPEN_AUDIO = MappingProxyType({
    "flac": "FLAC",
    "alac": "Apple Lossless",
})
OPEN_AUDIO_NATIVE_CONTAINERS = MappingProxyType({
    "opus": WEBM_FAMILY_TAGS | OGG_FAMILY_TAGS,
    "vorbis": WEBM_FAMILY_TAGS | OGG_FAMILY_TAGS,
})
PCM_PREFIX = "pcm_"
MAX_AUDIO_CHANNELS = 8

# ---- subtitles ----------------------------------------------------------------
IMAGE_SUBTITLE_CODECS = MappingProxyType({
    "hdmv_pgs_subtitle": "PGS (Blu-ray)",
    "dvd_subtitle": "VobSub (DVD)",
    "dvb_subtitle": "DVB",
    "xsub": "XSUB",
})
TEXT_SUBTITLE_CODECS = MappingProxyType({
    "ass": "ASS",
    "ssa": "SSA",
    "subrip": "SRT",
    "srt": "SRT",
    "webvtt": "WebVTT",
    "mov_text": "MP4 timed text",
    "text": "plain text",
})
SIDECAR_SUBTITLE_EXTS = frozenset({"srt", "ass", "ssa", "vtt", "sub", "idx", "sup"})
