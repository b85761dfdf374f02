"""Coverage attribution and aggregation.

Functions:
    attribute_blocks(decl, blocks)                      -> Lines
    convert_profiles(coverage, profiles, source_dir)    -> None

For every file in the profile, each top-level declaration collects the lines
of the blocks that overlap it.  Methods are grouped into classes by receiver
type, classes into packages by directory, and line rates are rolled up as
the pass goes: class rates after each method, package rates after each file,
and report totals once every file is done.
"""

import logging
from pathlib import Path
from typing import Callable, Iterable

from gobertura.models import Class, Coverage, Lines, Method, Package
from gobertura.parsing import Declaration, locate_declarations, parse_go_source
from gobertura.profile import Profile, ProfileBlock

logger = logging.getLogger(__name__)

SourceReader = Callable[[Path], bytes]


# ---------------------------------------------------------------------------
# Block attribution
# ---------------------------------------------------------------------------

def attribute_blocks(decl: Declaration, blocks: Iterable[ProfileBlock]) -> Lines:
    """Return the lines of *blocks* that fall inside *decl*.

    *blocks* must be sorted by start position.  A block that overlaps the
    declaration only partially still contributes every line it spans; a line
    seen in several blocks keeps the lowest count.
    """
    lines = Lines()
    for b in blocks:
        if b.start_line > decl.end_line or (
            b.start_line == decl.end_line and b.start_col >= decl.end_col
        ):
            # Past the end of the declaration; nothing later can match.
            break
        if b.end_line < decl.start_line or (
            b.end_line == decl.start_line and b.end_col <= decl.start_col
        ):
            continue
        for number in range(b.start_line, b.end_line + 1):
            lines.add_or_update_line(number, b.count)
    return lines


# ---------------------------------------------------------------------------
# Per-file pass
# ---------------------------------------------------------------------------

class FileAttribution:
    """Attributes one profile's blocks to the declarations of its file.

    The class map is local to the file: the same receiver type in two files
    of a package yields two classes, each with its own filename.
    """

    def __init__(self, file_name: str, data: bytes, pkg: Package, profile: Profile) -> None:
        self.file_name = file_name
        self.data = data
        self.pkg = pkg
        self.profile = profile
        self.classes: dict[str, Class] = {}

    def run(self) -> None:
        tree = parse_go_source(self.data, self.file_name)
        count = 0
        for decl in locate_declarations(tree.root_node, self.data):
            self.visit(decl)
            count += 1
        self.pkg.line_rate = self.pkg.hit_rate()
        logger.debug("%s: %d declaration(s) attributed", self.file_name, count)

    def visit(self, decl: Declaration) -> Method:
        cls = self.class_for(decl.owner)
        method = Method(name=decl.name, lines=attribute_blocks(decl, self.profile.blocks))
        method.line_rate = method.hit_rate()
        cls.add_method(method)
        return method

    def class_for(self, owner: str) -> Class:
        """Return the class for *owner*, creating it in the package if new."""
        cls = self.classes.get(owner)
        if cls is None:
            cls = Class(name=owner, filename=self.file_name)
            self.classes[owner] = cls
            self.pkg.classes.append(cls)
        return cls


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def convert_profiles(
    coverage: Coverage,
    profiles: Iterable[Profile],
    source_dir: str | Path | None = None,
    read_source: SourceReader | None = None,
) -> None:
    """Populate *coverage* from *profiles*.

    Profile file names have ``coverage.package_path`` stripped and are read
    relative to *source_dir* (the current directory when omitted).

    Raises:
        SourceParseError: a source file does not parse.
        OSError:          a source file cannot be read.
    """
    base = Path(source_dir) if source_dir is not None else Path()
    reader = read_source or _read_bytes
    coverage.packages = []

    for profile in profiles:
        file_name = _relative_name(profile.file_name, coverage.package_path)
        data = reader(base / file_name)
        pkg = coverage.package(_package_name(file_name))
        FileAttribution(file_name, data, pkg, profile).run()

    coverage.update_totals()
    logger.debug(
        "Report: %d package(s), %d/%d line(s) covered",
        len(coverage.packages), coverage.lines_covered, coverage.lines_valid,
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _read_bytes(path: Path) -> bytes:
    return path.read_bytes()


def _relative_name(file_name: str, package_path: str) -> str:
    if package_path and file_name.startswith(package_path):
        return file_name[len(package_path):]
    return file_name


def _package_name(file_name: str) -> str:
    directory, _, _ = file_name.rpartition("/")
    return directory.rstrip("/")
