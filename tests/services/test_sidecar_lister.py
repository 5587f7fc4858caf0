from playdiag.services.filesystem.sidecars import LocalSidecarLister


def test_lists_only_files_sharing_the_base_name(tmp_path):
    for name in ("movie.mkv", "movie.srt", "movie.en.ass", "movies.srt", "other.srt"):
        (tmp_path / name).write_text("x")
    (tmp_path / "movie.d").mkdir()

    names = LocalSidecarLister().list_matching(tmp_path, "movie.mkv")

    assert names == ["movie.en.ass", "movie.mkv", "movie.srt"]


def test_missing_directory_is_empty(tmp_path):
    assert LocalSidecarLister().list_matching(tmp_path / "gone", "movie.mkv") == []
