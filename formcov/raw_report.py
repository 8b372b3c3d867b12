"""
Raw coverage dumps for programmatic consumers.

raw-data.json maps a record index to each raw form; raw-stats.json holds the
computed per-file stats. Both can be read back, and several raw-data dumps of
the same instrumentation can be merged into one.
"""

import gzip
import json
from dataclasses import asdict
from pathlib import Path
from typing import List

from formcov.paths import write_artifact
from formcov.stats import FileStat, RawForm

RAW_DATA_FILE = "raw-data.json"
RAW_STATS_FILE = "raw-stats.json"


def raw_report(out_dir, stats, forms):
    """Write raw-data.json and raw-stats.json under out_dir."""
    out_dir = Path(out_dir)
    data = {str(i): asdict(form) for i, form in enumerate(forms)}
    write_artifact(out_dir / RAW_DATA_FILE, json.dumps(data, indent=2, ensure_ascii=False) + "\n")
    write_artifact(out_dir / RAW_STATS_FILE,
                   json.dumps([asdict(fs) for fs in stats], indent=2, ensure_ascii=False) + "\n")


def _load_json(path):
    path = Path(path)
    opener = gzip.open if path.suffix == ".gz" else open
    with opener(path, "rt", encoding="utf-8") as f:
        return json.load(f)


def load_raw_data(path) -> List[RawForm]:
    """Load raw forms from an index mapping or a plain list of records."""
    data = _load_json(path)
    if isinstance(data, dict):
        records = [data[k] for k in sorted(data, key=int)]
    elif isinstance(data, list):
        records = data
    else:
        raise ValueError(f"{path}: expected an object or a list of raw forms")
    return [RawForm.from_dict(r) for r in records]


def load_raw_stats(path) -> List[FileStat]:
    data = _load_json(path)
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of file stats")
    return [FileStat.from_dict(d) for d in data]


def merge_raw_data(runs) -> List[RawForm]:
    """Merge raw forms from several runs of the same instrumentation.

    Records are matched by index. A form is tracked or covered in the result
    if it was in any run.
    """
    runs = [list(r) for r in runs]
    if not runs:
        return []
    merged = [RawForm(**asdict(f)) for f in runs[0]]
    for n, run in enumerate(runs[1:], 2):
        if len(run) != len(merged):
            raise ValueError(f"Run {n} has {len(run)} forms, expected {len(merged)}")
        for i, (base, form) in enumerate(zip(merged, run)):
            if (base.file, base.line, base.lib) != (form.file, form.line, form.lib):
                raise ValueError(
                    f"Run {n} form {i} is {form.file}:{form.line}, "
                    f"expected {base.file}:{base.line}")
            base.tracked = base.tracked or form.tracked
            base.covered = base.covered or form.covered
    return merged
