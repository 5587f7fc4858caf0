from playdiag.domain.entities.streams import SubtitleStream
from playdiag.domain.enums import IssueCategory, Severity
from playdiag.domain.policies.subtitle_rules import evaluate_subtitles, find_sidecars


def test_image_based_subtitles_warn_text_based_are_good():
    issues = evaluate_subtitles([
        SubtitleStream(index=2, codec_name="hdmv_pgs_subtitle", default=True),
        SubtitleStream(index=3, codec_name="dvd_subtitle", default=True),
        SubtitleStream(index=4, codec_name="ass", default=True),
        SubtitleStream(index=5, codec_name="subrip"),
    ])
    assert [(i.stream_index, i.severity) for i in issues] == [
        (2, Severity.warning),
        (3, Severity.warning),
        (4, Severity.good),
        (5, Severity.good),
    ]
    assert all(i.category is IssueCategory.subtitle for i in issues)


def test_forced_without_default_warns():
    issues = evaluate_subtitles([SubtitleStream(index=2, codec_name="subrip", forced=True, default=False)])
    assert [i.code for i in issues] == ["subtitle.text_ok", "subtitle.forced_not_default"]

    ok = evaluate_subtitles([SubtitleStream(index=2, codec_name="subrip", forced=True, default=True)])
    assert [i.code for i in ok] == ["subtitle.text_ok"]


def test_sidecars_reported_as_good():
    siblings = ["movie.mkv", "movie.srt", "movie.en.forced.ass", "movie.nfo", "other.srt", "movie-extras.srt"]
    assert find_sidecars(siblings, "movie.mkv") == ["movie.srt", "movie.en.forced.ass"]

    issues = evaluate_subtitles([], siblings, input_name="movie.mkv")
    assert [(i.severity, i.code) for i in issues] == [
        (Severity.good, "subtitle.sidecar"),
        (Severity.good, "subtitle.sidecar"),
    ]


def test_no_subtitles_and_no_sidecars_is_not_an_issue():
    assert evaluate_subtitles([], [], input_name="movie.mkv") == []
