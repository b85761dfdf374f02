"""JSON-friendly coverage summary.

Functions:
    build_summary(coverage)    -> dict

The summary mirrors the Cobertura tree down to class level, without the
per-line detail.  Undefined rates (containers with no attributed lines)
come back as ``None`` so the dict serializes to valid JSON.
"""

import math
from datetime import datetime, timezone

from gobertura.models import Class, Coverage, Package


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #

def _rate_value(rate: float):
    """Return *rate* rounded for display, or None when it is undefined."""
    if math.isnan(rate):
        return None
    return round(rate, 4)


def _class_summary(cls: Class) -> dict:
    return {
        "name": cls.name,
        "filename": cls.filename,
        "methods": len(cls.methods),
        "lines_valid": cls.num_lines(),
        "lines_covered": cls.num_lines_with_hits(),
        "line_rate": _rate_value(cls.line_rate),
    }


def _package_summary(pkg: Package) -> dict:
    return {
        "name": pkg.name,
        "lines_valid": pkg.num_lines(),
        "lines_covered": pkg.num_lines_with_hits(),
        "line_rate": _rate_value(pkg.line_rate),
        "classes": [_class_summary(c) for c in pkg.classes],
    }


# --------------------------------------------------------------------------- #
# Public API
# --------------------------------------------------------------------------- #

def build_summary(coverage: Coverage) -> dict:
    """Return a summary report dict for a populated *coverage* tree."""
    generated_at = datetime.fromtimestamp(coverage.timestamp / 1000, tz=timezone.utc)
    return {
        "report_type": "coverage_summary",
        "generated_at": generated_at.isoformat(),
        "sources": [s.path for s in coverage.sources],
        "summary": {
            "packages": len(coverage.packages),
            "lines_valid": coverage.lines_valid,
            "lines_covered": coverage.lines_covered,
            "line_rate": _rate_value(coverage.line_rate),
        },
        "packages": [_package_summary(p) for p in coverage.packages],
    }
