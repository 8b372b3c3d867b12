import os
import stat
from pathlib import Path

import pytest

from formcov import paths
from formcov.paths import artifact_path, artifact_paths, relative_path, write_artifact


def test_relative_path_same_dir(tmp_path):
    assert relative_path(tmp_path, tmp_path) == ""


@pytest.mark.parametrize("target,base,expected", [
    ("/r", "/r/a/b", "../../"),
    ("/r/a/b", "/r", "a/b/"),
    ("/r/a", "/r/b", "../a/"),
    ("/r/x/y", "/r/long-name", "../x/y/"),
])
def test_relative_path(target, base, expected):
    assert relative_path(target, base) == expected


@pytest.mark.parametrize("target,base", [
    ("out", "out/app/deep"),
    ("out/app", "out/lib/x"),
    ("out/a/b/c", "out"),
])
def test_relative_path_resolves_back_to_target(tmp_path, target, base):
    target_dir = tmp_path / target
    base_dir = tmp_path / base
    rel = relative_path(target_dir, base_dir)
    assert os.path.normpath(os.path.join(base_dir, rel)) == os.path.normpath(target_dir)


def test_artifact_path_stays_under_out_dir(tmp_path):
    assert artifact_path(tmp_path, "app/core.clj", ".html") == tmp_path / "app" / "core.clj.html"
    assert artifact_path(tmp_path, "/abs/src/x.clj") == tmp_path / "abs" / "src" / "x.clj"
    assert artifact_path(tmp_path, "../escape.clj") == tmp_path / "escape.clj"


def test_write_artifact_creates_parents(tmp_path):
    path = write_artifact(tmp_path / "a" / "b" / "out.txt", "hello\n")
    assert path.read_text() == "hello\n"
    assert list(path.parent.iterdir()) == [path]


def test_write_artifact_leaves_nothing_on_failure(tmp_path, monkeypatch):
    target = tmp_path / "report.txt"

    def broken_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(paths.os, "replace", broken_replace)
    with pytest.raises(OSError, match="disk full"):
        write_artifact(target, "data")
    assert not target.exists()
    assert list(Path(tmp_path).iterdir()) == []


def test_write_artifact_mode_follows_umask(tmp_path):
    old = os.umask(0o022)
    try:
        plain_022 = tmp_path / "plain-022.txt"
        plain_022.write_text("x")
        written = write_artifact(tmp_path / "report.txt", "x")
    finally:
        os.umask(old)

    assert stat.S_IMODE(written.stat().st_mode) == stat.S_IMODE(plain_022.stat().st_mode) == 0o644


def test_artifact_paths_rejects_report_files(tmp_path):
    with pytest.raises(ValueError, match="report file coverage.txt"):
        artifact_paths(tmp_path, ["coverage.txt"])
    with pytest.raises(ValueError, match="report file index.html"):
        artifact_paths(tmp_path, ["index"], ".html")


def test_artifact_paths_rejects_collapsed_names(tmp_path):
    with pytest.raises(ValueError, match="would overwrite a/x.clj"):
        artifact_paths(tmp_path, ["a/x.clj", "../a/x.clj"])

    placed = artifact_paths(tmp_path, ["a/x.clj", "b/x.clj"], ".html")
    assert placed == {"a/x.clj": tmp_path / "a" / "x.clj.html",
                      "b/x.clj": tmp_path / "b" / "x.clj.html"}
