"""Tests for gobertura/reports/cobertura_xml.py"""

import io
import math
import xml.etree.ElementTree as ET

from gobertura.models import Class, Coverage, Lines, Method, Source
from gobertura.reports.cobertura_xml import DOCTYPE, XML_HEADER, format_rate, render, write


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #

def _coverage() -> Coverage:
    cov = Coverage(
        package_path="example.com/m/",
        timestamp=1700000000123,
        sources=[Source(path="/src/m")],
    )
    lines = Lines()
    lines.add_or_update_line(5, 3)
    lines.add_or_update_line(6, 0)
    method = Method(name="Bar", lines=lines)
    method.line_rate = method.hit_rate()
    cls = Class(name="Foo", filename="foo/a.go")
    cls.add_method(method)
    empty = Class(name="-", filename="foo/b.go")
    empty.add_method(Method(name="Nothing"))
    pkg = cov.package("foo")
    pkg.classes.extend([cls, empty])
    pkg.line_rate = pkg.hit_rate()
    cov.update_totals()
    return cov


def _parse(text: str) -> ET.Element:
    # Drop the XML declaration and DOCTYPE lines
    return ET.fromstring(text.split("\n", 2)[2])


# --------------------------------------------------------------------------- #
# Document framing
# --------------------------------------------------------------------------- #

def test_header_and_doctype():
    text = render(_coverage())
    assert text.startswith(XML_HEADER + DOCTYPE + "<coverage ")
    assert text.endswith("</coverage>\n")


def test_tab_indentation():
    assert "\n\t<sources>" in render(_coverage())


def test_write_to_stream():
    buf = io.StringIO()
    write(_coverage(), buf)
    assert buf.getvalue() == render(_coverage())


# --------------------------------------------------------------------------- #
# Elements and attributes
# --------------------------------------------------------------------------- #

def test_root_attributes():
    root = _parse(render(_coverage()))
    assert root.tag == "coverage"
    assert root.get("line-rate") == "0.5"
    assert root.get("lines-valid") == "2"
    assert root.get("lines-covered") == "1"
    assert root.get("timestamp") == "1700000000123"
    assert root.get("branch-rate") == "0"
    assert root.get("branches-valid") == "0"
    assert root.get("version") == ""


def test_package_path_is_not_serialized():
    assert "example.com/m/" not in render(_coverage())


def test_sources():
    root = _parse(render(_coverage()))
    assert [s.text for s in root.findall("sources/source")] == ["/src/m"]


def test_class_and_method_tree():
    root = _parse(render(_coverage()))
    (pkg,) = root.findall("packages/package")
    assert pkg.get("name") == "foo"
    classes = pkg.findall("classes/class")
    assert [(c.get("name"), c.get("filename")) for c in classes] == [
        ("Foo", "foo/a.go"), ("-", "foo/b.go"),
    ]
    (method,) = classes[0].findall("methods/method")
    assert method.get("name") == "Bar"
    assert method.get("signature") == ""
    assert [(l.get("number"), l.get("hits")) for l in method.findall("lines/line")] == [
        ("5", "3"), ("6", "0"),
    ]
    assert len(classes[0].findall("lines/line")) == 2


def test_nan_rates_written_as_nan():
    root = _parse(render(_coverage()))
    empty = root.findall("packages/package/classes/class")[1]
    assert empty.get("line-rate") == "NaN"
    assert empty.find("methods/method").get("line-rate") == "NaN"


# --------------------------------------------------------------------------- #
# format_rate
# --------------------------------------------------------------------------- #

def test_format_rate():
    assert format_rate(1.0) == "1"
    assert format_rate(0.0) == "0"
    assert format_rate(0.75) == "0.75"
    assert format_rate(math.nan) == "NaN"
