"""
Coverage data structures and aggregation logic shared by all formcov reports.

Raw form records are merged with their file's source lines, grouped by line
and by file, and rolled up into per-library counters.
"""

from dataclasses import dataclass, field, fields
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Dict, List


@dataclass
class RawForm:
    file: str
    line: Optional[int]
    lib: str = ""
    tracked: bool = False
    covered: bool = False
    text: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "RawForm":
        if "file" not in data or "line" not in data:
            raise ValueError(f"Raw form record needs 'file' and 'line': {data!r}")
        line = data["line"]
        # null lines are allowed and dropped when merging with the source
        if line is not None and (isinstance(line, bool) or not isinstance(line, int) or line < 1):
            raise ValueError(f"Raw form line must be a positive integer: {data!r}")
        return cls(
            file=data["file"],
            line=data["line"],
            lib=data.get("lib") or "",
            tracked=bool(data.get("tracked", False)),
            covered=bool(data.get("covered", False)),
            text=data.get("text"),
        )


@dataclass
class MergedFile:
    file: str
    lib: str
    records: list = field(default_factory=list)


@dataclass
class LineStat:
    line: int
    text: str
    total: int
    hit: int
    blank: bool
    covered: bool
    partial: bool
    instrumented: bool

    @property
    def status(self) -> str:
        """CSS-style status name; blank wins over coverage."""
        if self.blank:
            return "blank"
        if self.covered:
            return "covered"
        if self.partial:
            return "partial"
        if self.instrumented:
            return "not-covered"
        return "not-tracked"


@dataclass
class FileStat:
    file: str
    lib: str
    forms: int = 0
    covered_forms: int = 0
    lines: int = 0
    blank_lines: int = 0
    instrd_lines: int = 0
    covered_lines: int = 0
    partial_lines: int = 0

    @property
    def missed_forms(self) -> int:
        return self.forms - self.covered_forms

    @property
    def missed_lines(self) -> int:
        return self.instrd_lines - self.covered_lines - self.partial_lines

    @property
    def form_coverage_pct(self) -> Decimal:
        return percent(self.covered_forms, self.forms)

    @property
    def line_coverage_pct(self) -> Decimal:
        return percent(self.covered_lines + self.partial_lines, self.instrd_lines)

    @classmethod
    def from_dict(cls, data: dict) -> "FileStat":
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})


@dataclass
class Counters:
    lib: str = ""
    form_count: int = 0
    cov_form_count: int = 0
    line_count: int = 0
    cov_line_count: int = 0

    def __add__(self, other: "Counters") -> "Counters":
        return Counters(
            lib=self.lib if self.lib == other.lib else "",
            form_count=self.form_count + other.form_count,
            cov_form_count=self.cov_form_count + other.cov_form_count,
            line_count=self.line_count + other.line_count,
            cov_line_count=self.cov_line_count + other.cov_line_count,
        )


def percent(left: int, right: int, places: int = 2) -> Decimal:
    """Return 100 * left / right rounded half-up, or zero when right is zero."""
    quantum = Decimal(1).scaleb(-places)
    if right == 0:
        return Decimal(0).quantize(quantum)
    return (Decimal(100) * left / right).quantize(quantum, rounding=ROUND_HALF_UP)


def group_by_line(records) -> Dict[int, list]:
    """Group records by line number, ascending."""
    grouped: Dict[int, list] = {}
    for rec in records:
        grouped.setdefault(rec.line, []).append(rec)
    return {line: grouped[line] for line in sorted(grouped)}


def group_by_file(records) -> Dict[str, list]:
    """Group records by file, keeping the order files are first seen."""
    grouped: Dict[str, list] = {}
    for rec in records:
        grouped.setdefault(rec.file, []).append(rec)
    return grouped


def merge_source(file: str, lib: str, forms, lines: List[str]) -> List[RawForm]:
    """Merge a file's forms with its source lines.

    Every line of the file gets at least one record. Lines without forms get a
    synthesized untracked record. All records take the line's literal text and
    the file's lib, so any record of a line can stand for the others.
    """
    forms_by_line = group_by_line(f for f in forms if f.line is not None)
    merged = []
    for line_no, text in enumerate(lines, 1):
        line_forms = forms_by_line.get(line_no)
        if not line_forms:
            merged.append(RawForm(file=file, line=line_no, lib=lib, text=text))
            continue
        for form in line_forms:
            merged.append(RawForm(
                file=file,
                line=line_no,
                lib=lib,
                tracked=form.tracked,
                covered=form.covered,
                text=text,
            ))
    return merged


def gather_stats(forms, source) -> List[MergedFile]:
    """Merge all raw forms with their sources, one MergedFile per file.

    `source` must provide read_lines(file). A missing source file propagates
    its error; a report cannot be built without it.
    """
    merged = []
    for file, file_forms in group_by_file(forms).items():
        libs = {f.lib for f in file_forms}
        if len(libs) > 1:
            raise ValueError(f"Forms for {file} disagree on lib: {sorted(libs)}")
        lib = file_forms[0].lib
        lines = source.read_lines(file)
        merged.append(MergedFile(file=file, lib=lib,
                                 records=merge_source(file, lib, file_forms, lines)))
    return merged


def line_stats(records) -> List[LineStat]:
    """Compute per-line stats for one file's merged records."""
    stats = []
    for line, line_forms in group_by_line(records).items():
        total = sum(1 for f in line_forms if f.tracked)
        hit = sum(1 for f in line_forms if f.tracked and f.covered)
        text = line_forms[0].text or ""
        stats.append(LineStat(
            line=line,
            text=text,
            total=total,
            hit=hit,
            blank=text == "",
            covered=total > 0 and hit == total,
            partial=0 < hit < total,
            instrumented=total > 0,
        ))
    return stats


def file_stat(file: str, lib: str, records) -> FileStat:
    records = list(records)
    lines = line_stats(records)
    return FileStat(
        file=file,
        lib=lib,
        forms=sum(1 for f in records if f.tracked),
        covered_forms=sum(1 for f in records if f.tracked and f.covered),
        lines=len(lines),
        blank_lines=sum(1 for l in lines if l.blank),
        instrd_lines=sum(1 for l in lines if l.instrumented),
        covered_lines=sum(1 for l in lines if l.covered),
        partial_lines=sum(1 for l in lines if l.partial),
    )


def file_stats(merged_files) -> List[FileStat]:
    return [file_stat(mf.file, mf.lib, mf.records) for mf in merged_files]


def roll(stats, lib: str = "") -> Counters:
    """Sum a set of FileStats into one Counters."""
    counters = Counters(lib=lib)
    for fs in stats:
        counters.form_count += fs.forms
        counters.cov_form_count += fs.covered_forms
        counters.line_count += fs.instrd_lines
        counters.cov_line_count += fs.covered_lines
    return counters


def roll_by_lib(stats) -> List[Counters]:
    """Per-library counters, in the order libraries are first seen."""
    by_lib: Dict[str, list] = {}
    for fs in stats:
        by_lib.setdefault(fs.lib, []).append(fs)
    return [roll(lib_stats, lib) for lib, lib_stats in by_lib.items()]
