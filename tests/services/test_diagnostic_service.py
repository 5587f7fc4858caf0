# tests/services/test_diagnostic_service.py
from __future__ import annotations
import threading
import time

import pytest
from _payloads import (
    audio_stream,
    frames_of,
    probe_payload,
    subtitle_stream,
    video_stream,
)

from playdiag.domain.entities.frames import DecodeValidation
from playdiag.domain.enums import IssueCategory as C
from playdiag.domain.enums import Severity
from playdiag.domain.errors import (
    AnalysisCancelled,
    InputNotFound,
    IntegrityCheckTimeout,
    ProbeParseError,
    ProbeUnavailable,
)
from playdiag.domain.policies.report_aggregator import DV_KEEP_HDR10


def _codes(report, category=None):
    return [i.code for i in report.issues if category is None or i.category is category]


# ---------------------------- end-to-end scenarios ----------------------------

def test_clean_modern_file_has_no_problems(make_service, media_file):
    svc = make_service(
        probe_payload("matroska,webm", [video_stream(0), audio_stream(1), subtitle_stream(2)]),
        frames={0: frames_of(("I" + "PBB" * 16) * 4)},
    )
    report = svc.analyze(media_file)

    assert report.ok
    assert report.critical_count == 0
    assert report.warning_count == 0
    assert report.recommendations == ()
    assert report.path == str(media_file)
    assert report.size_bytes == 5400500000
    assert report.duration_sec == pytest.approx(5400.5)
    assert report.bitrate == 8000000
    # category order is fixed: container, video, audio, subtitle, integrity
    cats = [i.category for i in report.issues]
    assert cats == sorted(cats, key=[C.container, C.video, C.audio, C.subtitle, C.integrity].index)


def test_hdr10_dolby_vision_recommends_keeping_hdr10(make_service, media_file):
    hevc = video_stream(
        0, "hevc",
        pix_fmt="yuv420p10le",
        profile="Main 10",
        level=150,
        color_transfer="smpte2084",
        side_data_list=[{"side_data_type": "DOVI configuration record", "dv_profile": 8, "dv_level": 6}],
    )
    report = make_service(probe_payload("matroska,webm", [hevc, audio_stream(1, "eac3")])).analyze(media_file)

    assert report.is_hdr and report.has_dolby_vision
    dv = [i for i in report.issues if i.code == "video.dolby_vision"]
    assert len(dv) == 1 and dv[0].severity is Severity.critical
    assert "profile 8" in dv[0].message
    assert DV_KEEP_HDR10 in report.recommendations
    assert not report.ok


def test_avi_with_clean_h264_and_aac_is_one_container_warning(make_service, media_file):
    report = make_service(probe_payload("avi", [video_stream(0), audio_stream(1)])).analyze(media_file)

    container = report.issues_for(C.container)
    assert [i.severity for i in container] == [Severity.warning]
    assert report.issues_for(C.video, Severity.critical) == []
    assert [i.severity for i in report.issues_for(C.audio)] == [Severity.good]
    assert "AAC" in report.issues_for(C.audio)[0].message


def test_interlaced_avi_reports_container_and_video(make_service, media_file):
    mpeg4 = video_stream(0, "mpeg4", profile="Advanced Simple Profile", level=5, field_order="tt")
    report = make_service(probe_payload("avi", [mpeg4, audio_stream(1, "mp3")])).analyze(media_file)

    assert _codes(report, C.container) == ["container.legacy_avi"]
    assert "video.interlaced" in _codes(report, C.video)
    assert "video.codec_deprecated" in _codes(report, C.video)
    assert report.critical_count == 1
    assert any("Deinterlace" in r for r in report.recommendations)
    assert any("Remux" in r for r in report.recommendations)


def test_truehd_and_pgs_are_warnings(make_service, media_file):
    streams = [
        video_stream(0),
        audio_stream(1, "truehd", channels=8, channel_layout="7.1"),
        subtitle_stream(2, "hdmv_pgs_subtitle", default=1),
    ]
    report = make_service(probe_payload("matroska,webm", streams)).analyze(media_file)

    assert report.ok
    assert [i.severity for i in report.issues_for(C.audio)] == [Severity.warning]
    assert [i.code for i in report.issues_for(C.subtitle)] == ["subtitle.image_based"]
    assert "Add a secondary AAC stereo track" in report.recommendations


def test_decode_errors_are_critical_integrity_issues(make_service, media_file):
    validation = DecodeValidation(
        exit_status=1,
        error_lines=("[h264 @ 0x55] error while decoding MB 4 7", "[h264 @ 0x55] concealing 120 DC errors"),
    )
    report = make_service(
        probe_payload("matroska,webm", [video_stream(0), audio_stream(1)]),
        validation=validation,
    ).analyze(media_file)

    integrity = report.issues_for(C.integrity)
    assert [i.severity for i in integrity] == [Severity.critical] * 3
    assert report.critical_count == 3
    assert not report.ok


def test_sidecar_files_are_reported(make_service, media_file):
    report = make_service(
        probe_payload("matroska,webm", [video_stream(0), audio_stream(1)]),
        sidecars=["movie.mkv", "movie.en.srt", "movie.nfo"],
    ).analyze(media_file)
    sidecar = [i for i in report.issues if i.code == "subtitle.sidecar"]
    assert [i.message for i in sidecar] == ["External subtitle file found: movie.en.srt"]


def test_cover_art_is_present_but_not_evaluated(make_service, media_file):
    art = video_stream(1, "mjpeg", disposition={"attached_pic": 1})
    svc = make_service(probe_payload("matroska,webm", [video_stream(0), art, audio_stream(2)]))
    report = svc.analyze(media_file)
    assert {i.stream_index for i in report.issues_for(C.video)} == {0}
    assert [c[1] for c in svc.frames.calls] == [0]

    only_art = make_service(probe_payload("matroska,webm", [art, audio_stream(2)])).analyze(media_file)
    assert "video.missing" not in _codes(only_art)


def test_no_video_is_critical(make_service, media_file):
    report = make_service(probe_payload("matroska,webm", [audio_stream(0)])).analyze(media_file)
    assert _codes(report, C.video) == ["video.missing"]
    assert not report.ok


def test_analysis_is_idempotent(make_service, media_file):
    svc = make_service(
        probe_payload("avi", [video_stream(0, field_order="bt"), audio_stream(1, "dts", profile="DTS")]),
        frames={0: frames_of("I" + "P" * 599)},
    )
    assert svc.analyze(media_file) == svc.analyze(media_file)


def test_service_passes_configured_limits_to_collaborators(make_service, media_file, settings):
    svc = make_service(probe_payload("matroska,webm", [video_stream(0), audio_stream(1)]))
    svc.analyze(media_file)
    assert svc.probe.calls == [media_file]
    assert svc.frames.calls == [(media_file, 0, settings.analysis.gop_sample_frames)]
    assert svc.validator.calls == [(media_file, settings.ffmpeg.integrity_window_sec)]
    assert svc.sidecars.calls == [(media_file.parent, media_file.name)]


# ---------------------------- structural failures ----------------------------

def test_missing_input_raises(make_service, tmp_path):
    svc = make_service(probe_payload("matroska,webm", [video_stream(0)]))
    with pytest.raises(InputNotFound):
        svc.analyze(tmp_path / "nope.mkv")
    with pytest.raises(InputNotFound):
        svc.analyze(tmp_path)
    assert svc.probe.calls == []


@pytest.mark.parametrize("err", [ProbeUnavailable("no ffprobe"), ProbeParseError("garbage")])
def test_probe_failures_propagate(make_service, media_file, err):
    svc = make_service(err)
    with pytest.raises(type(err)):
        svc.analyze(media_file)
    assert svc.validator.calls == []


def test_integrity_timeout_propagates(make_service, media_file):
    svc = make_service(
        probe_payload("matroska,webm", [video_stream(0), audio_stream(1)]),
        validation=IntegrityCheckTimeout("decode validation did not finish within 120s"),
    )
    with pytest.raises(IntegrityCheckTimeout):
        svc.analyze(media_file)


def test_cancellation_discards_partial_results(make_service, media_file):
    gate = threading.Event()
    cancel = threading.Event()
    svc = make_service(probe_payload("matroska,webm", [video_stream(0), audio_stream(1)]), gate=gate)

    threading.Timer(0.1, cancel.set).start()
    started = time.monotonic()
    try:
        with pytest.raises(AnalysisCancelled):
            svc.analyze(media_file, cancel_event=cancel)
        # returned while the decode was still blocked
        assert time.monotonic() - started < 2
        assert not gate.is_set()
        assert svc.validator.stop_event is not None and svc.validator.stop_event.is_set()
    finally:
        gate.set()
