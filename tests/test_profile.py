"""Tests for gobertura/profile.py"""

import textwrap

import pytest

from gobertura.profile import ProfileBlock, ProfileError, parse_profile_lines, parse_profiles


def _parse(text: str):
    return parse_profile_lines(textwrap.dedent(text).splitlines(keepends=True))


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------

def test_blocks_grouped_by_file():
    profiles = _parse("""\
        mode: set
        example.com/m/a.go:3.14,5.2 1 1
        example.com/m/b.go:7.10,9.2 2 0
        example.com/m/a.go:8.20,10.2 1 0
        """)
    assert [p.file_name for p in profiles] == ["example.com/m/a.go", "example.com/m/b.go"]
    assert profiles[0].blocks == [
        ProfileBlock(3, 14, 5, 2, 1, 1),
        ProfileBlock(8, 20, 10, 2, 1, 0),
    ]
    assert profiles[0].mode == "set"


def test_profiles_sorted_by_file_name():
    profiles = _parse("""\
        mode: count
        z/z.go:1.1,2.2 1 1
        a/a.go:1.1,2.2 1 1
        """)
    assert [p.file_name for p in profiles] == ["a/a.go", "z/z.go"]


def test_blocks_sorted_by_start_position():
    profiles = _parse("""\
        mode: count
        a.go:9.1,9.5 1 1
        a.go:3.7,4.1 1 2
        a.go:3.2,3.6 1 3
        """)
    starts = [(b.start_line, b.start_col) for b in profiles[0].blocks]
    assert starts == [(3, 2), (3, 7), (9, 1)]


def test_duplicate_blocks_or_in_set_mode():
    profiles = _parse("""\
        mode: set
        a.go:3.2,3.6 1 0
        a.go:3.2,3.6 1 1
        a.go:3.2,3.6 1 1
        """)
    assert len(profiles[0].blocks) == 1
    assert profiles[0].blocks[0].count == 1


def test_duplicate_blocks_summed_in_count_mode():
    profiles = _parse("""\
        mode: atomic
        a.go:3.2,3.6 1 4
        a.go:3.2,3.6 1 5
        """)
    assert profiles[0].blocks[0].count == 9


def test_blank_lines_are_ignored():
    profiles = _parse("mode: set\n\na.go:1.1,1.5 1 1\n\n")
    assert len(profiles[0].blocks) == 1


def test_windows_paths_with_drive_colon():
    profiles = _parse("mode: set\nC:/src/a.go:1.1,1.5 1 1\n")
    assert profiles[0].file_name == "C:/src/a.go"


def test_parse_profiles_reads_file(tmp_path):
    path = tmp_path / "cover.out"
    path.write_text("mode: set\na.go:1.1,1.5 1 1\n", encoding="utf-8")
    (profile,) = parse_profiles(path)
    assert profile.file_name == "a.go"


def test_header_only_profile_is_empty():
    assert _parse("mode: set\n") == []


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

def test_missing_mode_line():
    with pytest.raises(ProfileError, match="bad mode line"):
        _parse("a.go:1.1,1.5 1 1\n")


def test_empty_mode():
    with pytest.raises(ProfileError, match="bad mode line"):
        _parse("mode: \n")


def test_malformed_block_line_reports_line_number():
    with pytest.raises(ProfileError, match="line 3"):
        _parse("mode: set\na.go:1.1,1.5 1 1\na.go:1.1-1.5 1 1\n")


def test_inconsistent_num_stmt():
    with pytest.raises(ProfileError, match="inconsistent NumStmt"):
        _parse("mode: set\na.go:1.1,1.5 1 1\na.go:1.1,1.5 2 1\n")


def test_missing_profile_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        parse_profiles(tmp_path / "nope.out")
