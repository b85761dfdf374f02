"""Go cover profile reader.

Usage:
    profiles = parse_profiles("coverprofile.txt")
    for profile in profiles:
        profile.file_name, profile.mode, profile.blocks

The profile format is a ``mode:`` header followed by one line per block:

    file.go:startLine.startCol,endLine.endCol numStmts count

Blocks are grouped per file, sorted by start position and merged when the
same block appears more than once (e.g. profiles concatenated from several
``go test`` runs).  Profiles come back sorted by file name.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

_MODE_PREFIX = "mode: "

_BLOCK_RE = re.compile(r"^(.+):(\d+)\.(\d+),(\d+)\.(\d+) (\d+) (\d+)$")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class ProfileError(Exception):
    """Raised when a cover profile is malformed."""


# ---------------------------------------------------------------------------
# Data
# ---------------------------------------------------------------------------

@dataclass
class ProfileBlock:
    start_line: int
    start_col: int
    end_line: int
    end_col: int
    num_stmt: int
    count: int

    def same_range(self, other: "ProfileBlock") -> bool:
        return (
            self.start_line == other.start_line
            and self.start_col == other.start_col
            and self.end_line == other.end_line
            and self.end_col == other.end_col
        )


@dataclass
class Profile:
    file_name: str
    mode: str
    blocks: list[ProfileBlock] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_profiles(path: str | Path) -> list[Profile]:
    """Read and parse the cover profile at *path*.

    Raises:
        ProfileError: on a bad mode line, a malformed block line or
                      inconsistent duplicate blocks.
        OSError:      if the file cannot be read.
    """
    with Path(path).open(encoding="utf-8") as f:
        return parse_profile_lines(f)


def parse_profile_lines(lines) -> list[Profile]:
    """Parse an iterable of profile text lines (see :func:`parse_profiles`)."""
    mode = ""
    files: dict[str, Profile] = {}

    for lineno, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        if not line.strip():
            continue
        if not mode:
            if not line.startswith(_MODE_PREFIX) or line == _MODE_PREFIX:
                raise ProfileError(f"bad mode line: {line!r}")
            mode = line[len(_MODE_PREFIX):].strip()
            continue

        file_name, block = _parse_block_line(line, lineno)
        profile = files.get(file_name)
        if profile is None:
            profile = Profile(file_name=file_name, mode=mode)
            files[file_name] = profile
        profile.blocks.append(block)

    for profile in files.values():
        profile.blocks = _merge_blocks(profile.blocks, mode)
        logger.debug("Profile %s: %d block(s)", profile.file_name, len(profile.blocks))

    return sorted(files.values(), key=lambda p: p.file_name)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _parse_block_line(line: str, lineno: int) -> tuple[str, ProfileBlock]:
    match = _BLOCK_RE.match(line.strip())
    if match is None:
        raise ProfileError(
            f"line {lineno}: {line!r} doesn't match expected format "
            "'file:startLine.startCol,endLine.endCol numStmts count'"
        )
    file_name, *numbers = match.groups()
    sl, sc, el, ec, num_stmt, count = (int(n) for n in numbers)
    return file_name, ProfileBlock(sl, sc, el, ec, num_stmt, count)


def _merge_blocks(blocks: list[ProfileBlock], mode: str) -> list[ProfileBlock]:
    """Sort *blocks* by start position and fold repeated ranges together."""
    ordered = sorted(blocks, key=lambda b: (b.start_line, b.start_col))
    merged: list[ProfileBlock] = []
    for block in ordered:
        if merged and merged[-1].same_range(block):
            last = merged[-1]
            if block.num_stmt != last.num_stmt:
                raise ProfileError(
                    f"inconsistent NumStmt: changed from {last.num_stmt} to {block.num_stmt}"
                )
            if mode == "set":
                last.count |= block.count
            else:
                last.count += block.count
            continue
        merged.append(block)
    return merged
