"""
Coverage report generator for formcov

Generates text, HTML, EMMA XML and raw reports from raw form coverage dumps
and the matching source files.

Output: target/coverage/index.html (and friends) by default
"""

import argparse
import sys
from pathlib import Path

from formcov.html_report import html_report, html_summary
from formcov.raw_report import load_raw_data, merge_raw_data, raw_report
from formcov.source import SourceReader, SourceUnavailableError
from formcov.stats import file_stats, gather_stats
from formcov.text_report import summary_table, text_report
from formcov.xml_report import emma_xml_report

DEFAULT_OUTPUT = "target/coverage"


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Generate coverage reports from raw form coverage data")
    parser.add_argument("raw_data", nargs="+", help="Raw coverage dump(s) (JSON, optionally .gz); several are merged")
    parser.add_argument("--src-dir", action="append", dest="src_dirs",
                        help="Source root to resolve file names against (repeatable, default: .)")
    parser.add_argument("--output", "-o", default=DEFAULT_OUTPUT, help=f"Output directory (default: {DEFAULT_OUTPUT})")
    parser.add_argument("--text", action="store_true", help="Generate text report")
    parser.add_argument("--html", action="store_true", help="Generate HTML report")
    parser.add_argument("--emma-xml", action="store_true", help="Generate EMMA XML report")
    parser.add_argument("--raw", action="store_true", help="Dump raw coverage data and stats")
    parser.add_argument("--no-summary", action="store_true", help="Do not print the coverage summary table")
    args = parser.parse_args(argv)
    if not (args.text or args.html or args.emma_xml or args.raw):
        args.html = True
    return args


def main(argv=None):
    args = parse_args(argv)

    output_dir = Path(args.output).resolve()
    src_dirs = args.src_dirs or ["."]

    print("Collecting coverage data...")
    for raw in args.raw_data:
        print(f"  Raw data:     {raw}")
    print(f"  Source roots: {', '.join(src_dirs)}")
    print(f"  Output:       {output_dir}")

    try:
        forms = merge_raw_data(load_raw_data(p) for p in args.raw_data)
    except (OSError, ValueError) as e:
        print(f"Error: cannot load raw coverage data: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"  Found {len(forms)} forms")

    try:
        merged = gather_stats(forms, SourceReader(src_dirs))
    except SourceUnavailableError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: invalid coverage data: {e}", file=sys.stderr)
        sys.exit(1)
    stats = file_stats(merged)
    print(f"  Found {len(stats)} files")

    def generate_html():
        html_report(output_dir, merged)
        print(f"  {html_summary(output_dir, merged)}")

    reports = []
    if args.text:
        reports.append(("text", lambda: text_report(output_dir, merged)))
    if args.html:
        reports.append(("HTML", generate_html))
    if args.emma_xml:
        reports.append(("EMMA XML", lambda: emma_xml_report(output_dir, merged)))
    if args.raw:
        reports.append(("raw", lambda: raw_report(output_dir, stats, forms)))

    failed = []
    for name, generate in reports:
        print(f"\nGenerating {name} report...")
        try:
            generate()
        except (OSError, ValueError) as e:
            print(f"Error: {name} report failed: {e}", file=sys.stderr)
            failed.append(name)

    if not args.no_summary:
        print()
        print(summary_table(stats))

    if failed:
        print(f"\n{len(failed)} report(s) failed: {', '.join(failed)}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
