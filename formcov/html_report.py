"""
HTML coverage report: one annotated page per source file, a shared
stylesheet and an index.html summarizing every file.
"""

from importlib import resources
from pathlib import Path

from formcov.paths import artifact_path, artifact_paths, relative_path, write_artifact
from formcov.stats import file_stats, line_stats, percent, roll
from formcov.text_report import STATS_FILE, stats_report

CSS_FILE = "coverage.css"
INDEX_FILE = "index.html"

_HTML_ESCAPES = str.maketrans({
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
})


def escape_html(text) -> str:
    return str(text).translate(_HTML_ESCAPES)


def html_spaces(text: str) -> str:
    return text.replace(" ", "&nbsp;")


def copy_stylesheet(out_dir) -> Path:
    css = resources.files("formcov").joinpath(CSS_FILE).read_text(encoding="utf-8")
    return write_artifact(Path(out_dir) / CSS_FILE, css)


def page_link(out_dir, filename: str) -> str:
    """Link to a file's page, relative to the report root."""
    out_dir = Path(out_dir)
    return artifact_path(out_dir, filename, ".html").relative_to(out_dir).as_posix()


def generate_file_html(filename: str, records, out_dir, page=None) -> Path:
    """Generate the annotated HTML page for a single file."""
    out_dir = Path(out_dir)
    if page is None:
        page = artifact_path(out_dir, filename, ".html")
    rootpath = relative_path(out_dir, page.parent)

    lines_html = []
    for ls in line_stats(records):
        lines_html.append(
            f'<span class="{ls.status}" title="{ls.hit} out of {ls.total} forms covered">'
            f'{ls.line:03d}&nbsp;&nbsp;{html_spaces(escape_html(ls.text))}'
            f'</span><br/>'
        )

    body = "\n".join(lines_html)
    page_html = f'''<html>
 <head>
  <meta charset="UTF-8">
  <link rel="stylesheet" href="{escape_html(rootpath)}{CSS_FILE}"/>
  <title>{escape_html(filename)}</title>
 </head>
 <body>
{body}
 </body>
</html>
'''
    return write_artifact(page, page_html)


def html_report(out_dir, merged_files):
    """Write the stylesheet, coverage.txt and one HTML page per file."""
    out_dir = Path(out_dir)
    pages = artifact_paths(out_dir, [mf.file for mf in merged_files], ".html")
    copy_stylesheet(out_dir)
    stats_report(out_dir / STATS_FILE, file_stats(merged_files))
    for mf in merged_files:
        generate_file_html(mf.file, mf.records, out_dir, pages[mf.file])


def td_bar(total: int, *parts) -> str:
    """A table cell holding a stacked bar; each part is (css class, count)."""
    segments = []
    for cls, count in parts:
        if count > 0:
            width = percent(count, total)
            segments.append(f'<div class="{cls}" style="width:{width}%;float:left;"> {count} </div>')
    return f'<td class="with-bar">{"".join(segments)}</td>'


def td_num(content) -> str:
    return f'<td class="with-number">{content}</td>'


def summary_row(link, label, forms, cov_forms, instrd, covered, partial, lines, blank, css_class=""):
    missed = instrd - partial - covered
    name_cell = f'<a href="{escape_html(link)}">{escape_html(label)}</a>' if link else escape_html(label)
    row_open = f'<tr class="{css_class}">' if css_class else "<tr>"
    return "\n".join([
        row_open,
        f" <td>{name_cell}</td>",
        td_bar(forms, ("covered", cov_forms), ("not-covered", forms - cov_forms)),
        td_num(f"{percent(cov_forms, forms)} %"),
        td_bar(instrd, ("covered", covered), ("partial", partial), ("not-covered", missed)),
        td_num(f"{percent(covered + partial, instrd)} %"),
        "".join(td_num(n) for n in (lines, blank, instrd)),
        "</tr>",
    ])


def html_summary(out_dir, merged_files) -> str:
    """Write index.html with one row per file and a totals row."""
    out_dir = Path(out_dir)
    stats = file_stats(merged_files)

    rows = []
    for fs in stats:
        rows.append(summary_row(
            page_link(out_dir, fs.file), fs.lib,
            fs.forms, fs.covered_forms,
            fs.instrd_lines, fs.covered_lines, fs.partial_lines,
            fs.lines, fs.blank_lines,
        ))

    total = roll(stats)
    rows.append(summary_row(
        None, "Totals",
        total.form_count, total.cov_form_count,
        total.line_count, total.cov_line_count, sum(fs.partial_lines for fs in stats),
        sum(fs.lines for fs in stats), sum(fs.blank_lines for fs in stats),
        css_class="totals",
    ))

    rows_html = "\n".join(rows)
    header = "".join(td_num(h) for h in ("Total", "Blank", "Instrumented"))
    index_html = f'''<html>
 <head>
  <meta charset="UTF-8">
  <link rel="stylesheet" href="./{CSS_FILE}"/>
  <title>Coverage Summary</title>
 </head>
 <body>
  <table>
   <thead><tr>
    <td class="ns-name"> Namespace </td>
    <td class="with-bar"> Forms </td>
    {td_num("Forms %")}
    <td class="with-bar"> Lines </td>
    {td_num("Lines %")}
    {header}
   </tr></thead>
{rows_html}
  </table>
 </body>
</html>
'''
    index = write_artifact(out_dir / INDEX_FILE, index_html)
    return f"HTML: file://{index.resolve()}"
