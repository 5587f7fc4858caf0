from playdiag.common.settings import get_settings


def test_settings_defaults():
    cfg = get_settings()
    assert cfg.app_name == "playdiag"
    assert cfg.api.prefix == "/api"
    assert cfg.ffmpeg.integrity_window_sec == 60
    assert cfg.analysis.gop_sample_frames == 1000
    assert cfg.analysis.high_bitrate_bps == int(cfg.analysis.high_bitrate_mbps * 1_000_000)
    # collaborator timeouts are their own knobs
    assert cfg.ffprobe.timeout_sec >= 1
    assert cfg.ffmpeg.timeout_sec >= 1


def test_settings_nested_env_override(monkeypatch):
    monkeypatch.setenv("FFPROBE__TIMEOUT_SEC", "7")
    monkeypatch.setenv("ANALYSIS__GOP_WARN_FRAMES", "120")
    monkeypatch.setenv("APP_ENV", "test")

    cfg = get_settings()
    assert cfg.ffprobe.timeout_sec == 7
    assert cfg.analysis.gop_warn_frames == 120
    assert cfg.app_env == "test"


def test_settings_are_cached():
    assert get_settings() is get_settings()
