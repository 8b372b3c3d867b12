"""
Coverage gate checker for formcov

Reads raw-stats.json and enforces minimum form and line coverage.

Exit code 0 = pass, 1 = fail (blocks CI)
"""

import argparse
import sys

from formcov.raw_report import load_raw_stats
from formcov.stats import percent, roll

DEFAULT_FORM_THRESHOLD = 0
DEFAULT_LINE_THRESHOLD = 0


def check_thresholds(stats, form_threshold=DEFAULT_FORM_THRESHOLD,
                     line_threshold=DEFAULT_LINE_THRESHOLD, show_passing: bool = False) -> bool:
    """Check total coverage against thresholds. Returns True if both pass.

    Files below a threshold are listed as failing, but only the totals decide
    the result.
    """
    failures = []
    passes = []

    print("=" * 80)
    print("COVERAGE GATE CHECK")
    print("=" * 80)
    print()
    print(f"Required: {form_threshold}% forms, {line_threshold}% lines")
    print()

    for fs in stats:
        form_pct = fs.form_coverage_pct
        line_pct = fs.line_coverage_pct
        form_pass = form_pct >= form_threshold
        line_pass = line_pct >= line_threshold
        status = "✓" if (form_pass and line_pass) else "✗"
        line = f"  {fs.file:40s} {status}  {form_pct:6}% forms, {line_pct:6}% lines"
        if form_pass and line_pass:
            passes.append(line)
        else:
            failures.append(line)

    if failures:
        print("BELOW THRESHOLD:")
        for line in failures:
            print(line)
        print()

    if show_passing and passes:
        print("PASSING FILES:")
        for line in passes:
            print(line)
        print()

    total = roll(stats)
    total_form_pct = percent(total.cov_form_count, total.form_count)
    total_line_pct = percent(sum(fs.covered_lines + fs.partial_lines for fs in stats), total.line_count)
    all_pass = total_form_pct >= form_threshold and total_line_pct >= line_threshold

    print("=" * 80)
    print(f"Total: {total_form_pct}% forms, {total_line_pct}% lines "
          f"({len(passes)} files passing, {len(failures)} below threshold)")
    print()
    if all_pass:
        print("✓ ALL COVERAGE REQUIREMENTS MET")
    else:
        print("✗ COVERAGE REQUIREMENTS NOT MET")
    print("=" * 80)
    print()

    return all_pass


def main(argv=None):
    parser = argparse.ArgumentParser(description="Check coverage against minimum thresholds")
    parser.add_argument("raw_stats", help="Path to raw-stats.json produced by formcov-report --raw")
    parser.add_argument("--fail-threshold", type=float, default=DEFAULT_FORM_THRESHOLD,
                        help="Minimum form coverage percentage (default: 0)")
    parser.add_argument("--line-fail-threshold", type=float, default=DEFAULT_LINE_THRESHOLD,
                        help="Minimum line coverage percentage (default: 0)")
    parser.add_argument("--show-passing", action="store_true",
                        help="Show passing files (default: only show failures)")
    args = parser.parse_args(argv)

    try:
        stats = load_raw_stats(args.raw_stats)
    except (OSError, ValueError) as e:
        print(f"Error: cannot load {args.raw_stats}: {e}", file=sys.stderr)
        sys.exit(1)

    if not stats:
        print("Error: No coverage data found", file=sys.stderr)
        sys.exit(1)

    passed = check_thresholds(stats, args.fail_threshold, args.line_fail_threshold, args.show_passing)
    sys.exit(0 if passed else 1)


if __name__ == "__main__":
    main()
