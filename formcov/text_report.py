"""Plain-text coverage reports: the coverage.txt table and annotated listings."""

from pathlib import Path

from formcov.paths import artifact_paths, write_artifact
from formcov.stats import file_stats, line_stats, percent, roll, roll_by_lib

STATS_FILE = "coverage.txt"

MARKERS = {
    "blank": " ",
    "covered": "✔",
    "partial": "~",
    "not-covered": "✘",
    "not-tracked": "?",
}


def stats_table(stats) -> str:
    rows = ["Lines Non-Blank Instrumented Covered Partial"]
    for fs in stats:
        rows.append("%5d %9d %7d %10d %10d %s" % (
            fs.lines,
            fs.lines - fs.blank_lines,
            fs.instrd_lines,
            fs.covered_lines,
            fs.partial_lines,
            fs.file,
        ))
    return "\n".join(rows) + "\n"


def stats_report(path, stats) -> Path:
    """Write the fixed-width per-file summary table."""
    return write_artifact(path, stats_table(stats))


def annotate(records) -> str:
    """Render one file's merged records as a marker-prefixed listing."""
    out = []
    for ls in line_stats(records):
        out.append(f"{MARKERS[ls.status]} {ls.text}")
    return "\n".join(out) + "\n" if out else ""


def text_report(out_dir, merged_files):
    """Write coverage.txt and one annotated listing per file under out_dir."""
    out_dir = Path(out_dir)
    listings = artifact_paths(out_dir, [mf.file for mf in merged_files])
    stats_report(out_dir / STATS_FILE, file_stats(merged_files))
    for mf in merged_files:
        write_artifact(listings[mf.file], annotate(mf.records))


def summary_table(stats) -> str:
    """Console table of form and line coverage per library, plus a total row."""
    rows = [(c.lib or "-", percent(c.cov_form_count, c.form_count),
             line_pct(stats, c.lib)) for c in roll_by_lib(stats)]
    total = roll(stats)
    covered_or_partial = sum(fs.covered_lines + fs.partial_lines for fs in stats)
    rows.append(("ALL FILES", percent(total.cov_form_count, total.form_count),
                 percent(covered_or_partial, total.line_count)))

    width = max([len("Namespace")] + [len(name) for name, _, _ in rows])
    sep = f"|-{'-' * width}-|---------|---------|"
    lines = [sep, f"| {'Namespace':<{width}} | % Forms | % Lines |", sep]
    for name, forms_pct, lines_pct in rows[:-1]:
        lines.append(f"| {name:<{width}} | {forms_pct:7} | {lines_pct:7} |")
    lines.append(sep)
    name, forms_pct, lines_pct = rows[-1]
    lines.append(f"| {name:<{width}} | {forms_pct:7} | {lines_pct:7} |")
    lines.append(sep)
    return "\n".join(lines)


def line_pct(stats, lib):
    lib_stats = [fs for fs in stats if fs.lib == lib]
    covered_or_partial = sum(fs.covered_lines + fs.partial_lines for fs in lib_stats)
    return percent(covered_or_partial, sum(fs.instrd_lines for fs in lib_stats))
