"""Source file access for merging coverage records with literal source text."""

from pathlib import Path
from typing import List


class SourceUnavailableError(FileNotFoundError):
    """Raised when a covered file cannot be found under any source root."""


class SourceReader:
    """Resolve file names against a list of source roots and read their lines."""

    def __init__(self, roots=None):
        self.roots = [Path(r) for r in (roots or ["."])]

    def resolve(self, filename: str) -> Path:
        candidate = Path(filename)
        if candidate.is_absolute():
            if candidate.is_file():
                return candidate
        else:
            for root in self.roots:
                path = root / candidate
                if path.is_file():
                    return path
        searched = ", ".join(str(r) for r in self.roots)
        raise SourceUnavailableError(f"Source for {filename} not found (searched: {searched})")

    def read_lines(self, filename: str) -> List[str]:
        """Return the file's lines without line terminators.

        Only \\n, \\r and \\r\\n end a line; form feeds and Unicode line
        separators stay part of the line text.
        """
        path = self.resolve(filename)
        try:
            with open(path, encoding="utf-8", errors="replace") as f:
                return [line.rstrip("\n") for line in f]
        except OSError as e:
            raise SourceUnavailableError(f"Cannot read source {path}: {e}") from e
