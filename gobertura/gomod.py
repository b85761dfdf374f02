"""Module import path resolution from ``go.mod``.

Usage:
    prefix = read_module_path("go.mod")    # "github.com/acme/widget/"
"""

from pathlib import Path

_MODULE_DIRECTIVE = "module"


class GoModError(Exception):
    """Raised when go.mod is missing or has no module directive."""


def read_module_path(go_mod: str | Path = "go.mod") -> str:
    """Return the module path declared in *go_mod*, with a trailing slash.

    The result is the prefix the Go toolchain puts in front of every file
    name in a cover profile.
    """
    path = Path(go_mod)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise GoModError(f"Cannot read '{path}': {exc}") from exc

    for line in text.splitlines():
        module = _parse_module_line(line)
        if module:
            return module + "/"

    raise GoModError(f"No module directive found in '{path}'")


def _parse_module_line(line: str) -> str | None:
    # Drop trailing comments: module example.com/m // indirect note
    parts = line.split("//", 1)[0].split(None, 1)
    if len(parts) != 2 or parts[0] != _MODULE_DIRECTIVE:
        return None
    module = parts[1].strip().strip('"`')
    return module or None
