from playdiag.domain.entities.streams import AudioStream, SubtitleStream, VideoStream
from playdiag.domain.policies.stream_classifier import classify_streams


def test_partitions_by_kind_preserving_order():
    streams = [
        AudioStream(index=0, codec_name="aac"),
        VideoStream(index=1, codec_name="h264"),
        SubtitleStream(index=2, codec_name="subrip"),
        AudioStream(index=3, codec_name="ac3"),
        VideoStream(index=4, codec_name="hevc"),
    ]
    c = classify_streams(streams)
    assert [s.index for s in c.video] == [1, 4]
    assert [s.index for s in c.audio] == [0, 3]
    assert [s.index for s in c.subtitle] == [2]


def test_cover_art_counts_for_presence_but_not_for_detail():
    streams = [
        VideoStream(index=0, codec_name="h264"),
        VideoStream(index=1, codec_name="mjpeg"),
        VideoStream(index=2, codec_name="png", attached_pic=True),
    ]
    c = classify_streams(streams)
    assert c.video_count == 3
    assert [s.index for s in c.playable_video] == [0]


def test_only_cover_art_still_has_video():
    c = classify_streams([VideoStream(index=0, codec_name="mjpeg")])
    assert c.video_count == 1
    assert c.playable_video == ()
