"""Cobertura XML serializer.

Functions:
    render(coverage)           -> str
    write(coverage, stream)    -> None

Output matches the coverage-04 DTD consumed by CI dashboards: branch
figures and complexity are always zero, and method signatures are empty.
"""

import math
import xml.etree.ElementTree as ET
from typing import TextIO

from gobertura.models import Class, Coverage, Lines, Method, Package

XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'
DOCTYPE = '<!DOCTYPE coverage SYSTEM "http://cobertura.sourceforge.net/xml/coverage-04.dtd">\n'


# --------------------------------------------------------------------------- #
# Public API
# --------------------------------------------------------------------------- #

def render(coverage: Coverage) -> str:
    """Return the complete XML document for *coverage*."""
    root = _coverage_element(coverage)
    tree = ET.ElementTree(root)
    ET.indent(tree, space="\t")
    body = ET.tostring(root, encoding="unicode")
    return XML_HEADER + DOCTYPE + body + "\n"


def write(coverage: Coverage, stream: TextIO) -> None:
    stream.write(render(coverage))


def format_rate(value: float) -> str:
    """Format a line rate; an undefined rate is written as ``NaN``."""
    if math.isnan(value):
        return "NaN"
    return f"{value:g}"


# --------------------------------------------------------------------------- #
# Element builders
# --------------------------------------------------------------------------- #

def _coverage_element(coverage: Coverage) -> ET.Element:
    root = ET.Element("coverage", {
        "line-rate":        format_rate(coverage.line_rate),
        "branch-rate":      format_rate(coverage.branch_rate),
        "version":          coverage.version,
        "timestamp":        str(coverage.timestamp),
        "lines-covered":    str(coverage.lines_covered),
        "lines-valid":      str(coverage.lines_valid),
        "branches-covered": str(coverage.branches_covered),
        "branches-valid":   str(coverage.branches_valid),
        "complexity":       f"{coverage.complexity:g}",
    })
    sources = ET.SubElement(root, "sources")
    for src in coverage.sources:
        ET.SubElement(sources, "source").text = src.path

    packages = ET.SubElement(root, "packages")
    for pkg in coverage.packages:
        packages.append(_package_element(pkg))
    return root


def _package_element(pkg: Package) -> ET.Element:
    elem = ET.Element("package", {
        "name":        pkg.name,
        "line-rate":   format_rate(pkg.line_rate),
        "branch-rate": "0",
        "complexity":  "0",
    })
    classes = ET.SubElement(elem, "classes")
    for cls in pkg.classes:
        classes.append(_class_element(cls))
    return elem


def _class_element(cls: Class) -> ET.Element:
    elem = ET.Element("class", {
        "name":        cls.name,
        "filename":    cls.filename,
        "line-rate":   format_rate(cls.line_rate),
        "branch-rate": "0",
        "complexity":  "0",
    })
    methods = ET.SubElement(elem, "methods")
    for method in cls.methods:
        methods.append(_method_element(method))
    _add_lines(elem, cls.lines)
    return elem


def _method_element(method: Method) -> ET.Element:
    elem = ET.Element("method", {
        "name":        method.name,
        "signature":   method.signature,
        "line-rate":   format_rate(method.line_rate),
        "branch-rate": "0",
        "complexity":  "0",
    })
    _add_lines(elem, method.lines)
    return elem


def _add_lines(parent: ET.Element, lines: Lines) -> None:
    container = ET.SubElement(parent, "lines")
    for line in lines:
        ET.SubElement(container, "line", {
            "number": str(line.number),
            "hits":   str(line.hits),
        })
