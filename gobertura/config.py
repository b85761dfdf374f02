"""Configuration loading and validation.

Usage:
    config = load()                          # gobertura.yaml if present, else defaults
    config = load("ci/gobertura.yaml")       # raises ConfigError if missing or invalid
    config = config.with_overrides(output="out.xml")
    generate_template("gobertura.yaml")      # writes example file to disk
"""

import os
from dataclasses import dataclass, replace
from pathlib import Path

import yaml

DEFAULT_CONFIG_PATH = "gobertura.yaml"

FORMATS = ("xml", "json")

_KEYS = ("profile", "output", "source", "package", "format")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class ConfigError(Exception):
    """Raised when the configuration is missing or invalid."""


# ---------------------------------------------------------------------------
# Config dataclass
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Config:
    profile: str = "coverprofile.txt"
    output: str = "coverage.xml"
    # Empty means: current working directory
    source: str = ""
    # Empty means: read the module path from go.mod
    package: str = ""
    format: str = "xml"

    def with_overrides(self, **overrides) -> "Config":
        """Return a copy with every non-None override applied, then validated."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        config = replace(self, **changes)
        _validate(config)
        return config

    def source_dir(self) -> str:
        """Return the configured source folder, defaulting to the working directory."""
        return self.source or os.getcwd()


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

def load(config_path: str | None = None) -> Config:
    """Load and validate configuration from a YAML file.

    With no *config_path*, ``gobertura.yaml`` is read when it exists and
    built-in defaults are used otherwise.  Environment variables
    GOBERTURA_SRC and GOBERTURA_PKG override file values.

    Raises:
        ConfigError: if an explicitly named file is missing, or any file is
                     malformed or holds invalid values.
    """
    raw: dict = {}
    if config_path is not None or Path(DEFAULT_CONFIG_PATH).exists():
        raw = _read_yaml(config_path or DEFAULT_CONFIG_PATH)

    unknown = sorted(set(raw) - set(_KEYS))
    if unknown:
        raise ConfigError(f"Unknown configuration key(s): {', '.join(unknown)}")

    values = {k: str(raw[k]).strip() for k in _KEYS if raw.get(k) is not None}
    source = os.environ.get("GOBERTURA_SRC")
    package = os.environ.get("GOBERTURA_PKG")
    if source:
        values["source"] = source
    if package:
        values["package"] = package

    config = Config(**values)
    _validate(config)
    return config


def _read_yaml(config_path: str) -> dict:
    path = Path(config_path)

    if not path.exists():
        raise ConfigError(
            f"Config file not found: '{config_path}'\n"
            "Run `gobertura init` to generate a template."
        )

    try:
        with path.open(encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse '{config_path}': {exc}") from exc

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"'{config_path}' must be a YAML mapping at the top level.")
    return raw


def _validate(config: Config) -> None:
    """Raise ConfigError if a field holds an unusable value."""
    errors: list[str] = []

    if not config.profile:
        errors.append("  - 'profile' is empty; point it at a Go cover profile")
    if not config.output:
        errors.append("  - 'output' is empty; use '-' to write to stdout")
    if config.format not in FORMATS:
        errors.append(
            f"  - 'format' must be one of {', '.join(FORMATS)} (got '{config.format}')"
        )

    if errors:
        raise ConfigError("Invalid configuration:\n" + "\n".join(errors))


# ---------------------------------------------------------------------------
# Template generator (used by `init` command)
# ---------------------------------------------------------------------------

TEMPLATE = """\
# Go cover profile, as written by `go test -coverprofile=...`
profile: "coverprofile.txt"

# Report path; "-" writes to stdout
output: "coverage.xml"

# Report format: xml (Cobertura) or json (summary)
format: "xml"

# Go source folder (defaults to the current directory)
# source: "/src/github.com/acme/widget"

# Module import path, with trailing slash (defaults to the go.mod module)
# package: "github.com/acme/widget/"
"""


def generate_template(output_path: str = DEFAULT_CONFIG_PATH) -> None:
    """Write a template gobertura.yaml to *output_path*.

    Raises:
        ConfigError: if the file already exists.
    """
    path = Path(output_path)
    if path.exists():
        raise ConfigError(
            f"'{output_path}' already exists. Remove it first or choose a different path."
        )
    path.write_text(TEMPLATE, encoding="utf-8")
