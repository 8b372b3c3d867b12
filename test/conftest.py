"""
Shared pytest fixtures for formcov tests.
"""

import pytest

from formcov.source import SourceReader
from formcov.stats import RawForm, gather_stats

SAMPLE_SOURCES = {
    "app/core.clj": "(ns app.core)\n(defn f [x]\n\n  (inc x))\n",
    "app/util.clj": "(ns app.util)\n(def y 1)\n",
}


def sample_forms():
    return [
        RawForm(file="app/core.clj", line=1, lib="app.core", tracked=True, covered=True),
        RawForm(file="app/core.clj", line=2, lib="app.core", tracked=True, covered=True),
        RawForm(file="app/core.clj", line=2, lib="app.core", tracked=True, covered=False),
        RawForm(file="app/core.clj", line=4, lib="app.core", tracked=True, covered=False),
        RawForm(file="app/util.clj", line=1, lib="app.util", tracked=True, covered=True),
        RawForm(file="app/util.clj", line=2, lib="app.util", tracked=False, covered=False),
    ]


@pytest.fixture
def src_root(tmp_path):
    root = tmp_path / "src"
    for name, text in SAMPLE_SOURCES.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


@pytest.fixture
def source(src_root):
    return SourceReader([src_root])


@pytest.fixture
def forms():
    return sample_forms()


@pytest.fixture
def merged(forms, source):
    return gather_stats(forms, source)


@pytest.fixture
def out_dir(tmp_path):
    return tmp_path / "out"
