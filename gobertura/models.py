"""Data models for Cobertura coverage reports.

The in-memory report tree built by the conversion pass and read by the
serializers:

    Coverage  -> Package -> Class -> Method -> Lines
                                  -> Lines (all methods, concatenated)

Every container exposes the same three statistics: ``num_lines()``,
``num_lines_with_hits()`` and ``hit_rate()``.  A hit rate over zero lines is
``NaN`` rather than an error; serializers decide how to render it.
"""

import math
from dataclasses import dataclass, field


def _rate(covered: int, valid: int) -> float:
    """Return ``covered / valid``, or NaN when there is nothing to divide by."""
    if valid == 0:
        return math.nan
    return covered / valid


# ---------------------------------------------------------------------------
# Lines
# ---------------------------------------------------------------------------

@dataclass
class Line:
    number: int
    hits: int


class Lines(list):
    """Ordered list of :class:`Line` entries with coverage helpers."""

    def num_lines(self) -> int:
        return len(self)

    def num_lines_with_hits(self) -> int:
        return sum(1 for line in self if line.hits > 0)

    def hit_rate(self) -> float:
        """Fraction of lines with at least one hit (NaN when empty)."""
        return _rate(self.num_lines_with_hits(), self.num_lines())

    def add_or_update_line(self, number: int, hits: int) -> None:
        """Record *hits* for line *number*.

        A line already recorded keeps the lower of its old and new hit
        counts.  Lines arrive in non-decreasing order except where two
        blocks overlap, so only the tail of the list is searched.
        """
        i = len(self)
        while i > 0 and self[i - 1].number > number:
            i -= 1
        if i > 0 and self[i - 1].number == number:
            existing = self[i - 1]
            if hits < existing.hits:
                existing.hits = hits
            return
        self.insert(i, Line(number=number, hits=hits))


# ---------------------------------------------------------------------------
# Report tree
# ---------------------------------------------------------------------------

@dataclass
class Method:
    name: str
    signature: str = ""
    line_rate: float = math.nan
    lines: Lines = field(default_factory=Lines)

    def num_lines(self) -> int:
        return self.lines.num_lines()

    def num_lines_with_hits(self) -> int:
        return self.lines.num_lines_with_hits()

    def hit_rate(self) -> float:
        return self.lines.hit_rate()


@dataclass
class Class:
    """A receiver type, or ``"-"`` for the free functions of one file.

    ``lines`` is a view over the methods' lines, appended as each method is
    attributed; it is never de-duplicated.
    """

    name: str
    filename: str
    line_rate: float = math.nan
    methods: list[Method] = field(default_factory=list)
    lines: Lines = field(default_factory=Lines)

    def add_method(self, method: Method) -> None:
        """Append *method*, extend the lines view and refresh ``line_rate``."""
        self.methods.append(method)
        self.lines.extend(method.lines)
        self.line_rate = self.lines.hit_rate()

    def num_lines(self) -> int:
        return sum(m.num_lines() for m in self.methods)

    def num_lines_with_hits(self) -> int:
        return sum(m.num_lines_with_hits() for m in self.methods)

    def hit_rate(self) -> float:
        return _rate(self.num_lines_with_hits(), self.num_lines())


@dataclass
class Package:
    name: str
    line_rate: float = math.nan
    classes: list[Class] = field(default_factory=list)

    def num_lines(self) -> int:
        return sum(c.num_lines() for c in self.classes)

    def num_lines_with_hits(self) -> int:
        return sum(c.num_lines_with_hits() for c in self.classes)

    def hit_rate(self) -> float:
        return _rate(self.num_lines_with_hits(), self.num_lines())


@dataclass
class Source:
    path: str


@dataclass
class Coverage:
    """Root of the report.

    ``package_path`` is the import path prefix stripped from profile file
    names; it is not serialized.
    """

    package_path: str = ""
    timestamp: int = 0
    version: str = ""
    sources: list[Source] = field(default_factory=list)
    packages: list[Package] = field(default_factory=list)
    line_rate: float = math.nan
    lines_valid: int = 0
    lines_covered: int = 0
    branch_rate: float = 0.0
    branches_valid: int = 0
    branches_covered: int = 0
    complexity: float = 0.0

    def package(self, name: str) -> Package:
        """Return the package called *name*, creating it on first use."""
        for pkg in self.packages:
            if pkg.name == name:
                return pkg
        pkg = Package(name=name)
        self.packages.append(pkg)
        return pkg

    def num_lines(self) -> int:
        return sum(p.num_lines() for p in self.packages)

    def num_lines_with_hits(self) -> int:
        return sum(p.num_lines_with_hits() for p in self.packages)

    def hit_rate(self) -> float:
        return _rate(self.num_lines_with_hits(), self.num_lines())

    def update_totals(self) -> None:
        """Recompute the report-level line counters and rate."""
        self.lines_valid = self.num_lines()
        self.lines_covered = self.num_lines_with_hits()
        self.line_rate = _rate(self.lines_covered, self.lines_valid)
