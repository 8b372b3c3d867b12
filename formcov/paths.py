"""Path helpers for report output."""

import os
import tempfile
from pathlib import Path

REPORT_FILES = (
    "coverage.txt",
    "coverage.css",
    "index.html",
    "coverage.xml",
    "raw-data.json",
    "raw-stats.json",
)


def relative_path(target_dir, base_dir) -> str:
    """Return the path to target_dir relative to base_dir.

    Walks both absolute paths up towards their common ancestor, stripping a
    segment from whichever is longer. The result ends in "/" unless it is empty.
    """
    target = os.path.abspath(str(target_dir))
    base = os.path.abspath(str(base_dir))
    prepend = ""
    postpend = ""

    while target != base:
        if len(base) > len(target):
            parent = os.path.dirname(base)
            if parent == base:
                raise ValueError(f"{target_dir} and {base_dir} share no common root")
            base = parent
            prepend += "../"
        else:
            parent = os.path.dirname(target)
            if parent == target:
                raise ValueError(f"{target_dir} and {base_dir} share no common root")
            segment = target[len(parent):].lstrip(os.sep)
            postpend = segment + "/" + postpend
            target = parent

    return prepend + postpend


def artifact_path(out_dir, filename: str, suffix: str = "") -> Path:
    """Place a per-file artifact under out_dir, even for absolute file names."""
    rel = Path(filename)
    if rel.is_absolute():
        rel = rel.relative_to(rel.anchor)
    parts = [p for p in rel.parts if p not in ("", ".", "..")]
    if not parts:
        raise ValueError(f"Cannot place an artifact for file name {filename!r}")
    return Path(out_dir).joinpath(*parts[:-1], parts[-1] + suffix)


def artifact_paths(out_dir, filenames, suffix: str = "") -> dict:
    """Map file names to artifact paths, refusing any that would overwrite another.

    Names clash when they collapse to the same path (for example after ".."
    segments are dropped) or land on one of the report's own files.
    """
    out_dir = Path(out_dir)
    taken = {out_dir / name: f"report file {name}" for name in REPORT_FILES}
    placed = {}
    for filename in filenames:
        path = artifact_path(out_dir, filename, suffix)
        if path in taken:
            raise ValueError(f"Artifact for {filename} would overwrite {taken[path]} at {path}")
        taken[path] = filename
        placed[filename] = path
    return placed


def current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def write_artifact(path, text: str) -> Path:
    """Write text to path, creating parent directories.

    The content goes to a temporary sibling first and is moved into place, so
    a failed write leaves no partial file behind.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.chmod(tmp_name, 0o666 & ~current_umask())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return path
