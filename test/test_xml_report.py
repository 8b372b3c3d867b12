from xml.etree import ElementTree as ET

from formcov.stats import MergedFile, RawForm, merge_source
from formcov.xml_report import emma_xml_report


def coverage_values(node):
    return {c.get("type"): c.get("value") for c in node.findall("coverage")}


def test_emma_xml_report(merged, out_dir):
    path = emma_xml_report(out_dir, merged)
    assert path == out_dir / "coverage.xml"

    root = ET.parse(path).getroot()
    assert root.tag == "report"

    stats = root.find("stats")
    assert [(e.tag, e.get("value")) for e in stats] == [
        ("packages", "2"),
        ("methods", "5"),
        ("srcfiles", "2"),
        ("srclines", "4"),
    ]

    all_node = root.find("data/all")
    assert all_node.get("name") == "total"
    assert coverage_values(all_node) == {
        "class, %": "0% (0/1)",
        "method, %": "0% (0/1)",
        "block, %": "60% (3/5)",
        "line, %": "50% (2/4)",
    }

    packages = all_node.findall("package")
    assert [p.get("name") for p in packages] == ["app.core", "app.util"]
    assert coverage_values(packages[0])["block, %"] == "50% (2/4)"
    assert coverage_values(packages[0])["line, %"] == "33% (1/3)"
    assert coverage_values(packages[1])["line, %"] == "100% (1/1)"


def test_emma_xml_zero_denominator(out_dir):
    records = merge_source("e.clj", "e", [], ["; only a comment"])
    path = emma_xml_report(out_dir, [MergedFile(file="e.clj", lib="e", records=records)])
    all_node = ET.parse(path).getroot().find("data/all")
    assert coverage_values(all_node)["block, %"] == "0% (0/0)"
    assert coverage_values(all_node)["line, %"] == "0% (0/0)"


def test_emma_xml_escapes_names(out_dir):
    lib = "<odd & 'lib' \"name\">"
    records = merge_source("o.clj", lib, [RawForm(file="o.clj", line=1, lib=lib, tracked=True)], ["(x)"])
    path = emma_xml_report(out_dir, [MergedFile(file="o.clj", lib=lib, records=records)])

    text = path.read_text(encoding="utf-8")
    assert "<odd" not in text
    package = ET.parse(path).getroot().find("data/all/package")
    assert package.get("name") == lib
