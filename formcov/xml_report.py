"""EMMA-compatible XML coverage report."""

from pathlib import Path
from xml.etree import ElementTree as ET

from formcov.paths import write_artifact
from formcov.stats import file_stats, percent, roll, roll_by_lib

XML_FILE = "coverage.xml"


def coverage_element(cov_type: str, left: int, right: int) -> ET.Element:
    elem = ET.Element("coverage")
    elem.set("type", cov_type)
    elem.set("value", f"{percent(left, right, 0)}% ({left}/{right})")
    return elem


def counters_element(tag: str, name: str, counters) -> ET.Element:
    """Coverage node for a counter set.

    Class and method granularity is not tracked, so those two entries are
    fixed 0/1 placeholders kept for EMMA consumers.
    """
    elem = ET.Element(tag)
    elem.set("name", name)
    elem.append(coverage_element("class, %", 0, 1))
    elem.append(coverage_element("method, %", 0, 1))
    elem.append(coverage_element("block, %", counters.cov_form_count, counters.form_count))
    elem.append(coverage_element("line, %", counters.cov_line_count, counters.line_count))
    return elem


def build_emma_tree(stats) -> ET.ElementTree:
    total = roll(stats)
    file_count = len({fs.file for fs in stats})
    lib_count = len({fs.lib for fs in stats})

    report = ET.Element("report")
    stats_elem = ET.SubElement(report, "stats")
    for tag, value in (("packages", lib_count),
                       ("methods", total.form_count),
                       ("srcfiles", file_count),
                       ("srclines", total.line_count)):
        ET.SubElement(stats_elem, tag).set("value", str(value))

    data = ET.SubElement(report, "data")
    all_elem = counters_element("all", "total", total)
    for counters in roll_by_lib(stats):
        all_elem.append(counters_element("package", counters.lib, counters))
    data.append(all_elem)

    tree = ET.ElementTree(report)
    ET.indent(tree, space="  ")
    return tree


def emma_xml_report(out_dir, merged_files) -> Path:
    """Write coverage.xml under out_dir."""
    tree = build_emma_tree(file_stats(merged_files))
    xml = ET.tostring(tree.getroot(), encoding="utf-8", xml_declaration=True)
    return write_artifact(Path(out_dir) / XML_FILE, xml.decode("utf-8") + "\n")
