"""CLI entry point — command definitions using Click.

Commands:
    init          Generate a template config file
    convert       Convert a Go cover profile to a Cobertura XML (or JSON) report
    summary       Print a JSON coverage summary for a Go cover profile
"""

import functools
import json
import logging
import sys
import time
from pathlib import Path

import click

from gobertura import __version__
from gobertura.config import FORMATS


# ---------------------------------------------------------------------------
# Helpers shared by all data commands
# ---------------------------------------------------------------------------

def _verbose(ctx: click.Context, message: str) -> None:
    if ctx.obj["verbose"]:
        click.echo(f"[verbose] {message}", err=True)


def _load_config(ctx: click.Context, **overrides):
    """Load config and apply command-line overrides. Exits on error."""
    from gobertura.config import ConfigError, load

    try:
        return load(ctx.obj["config_path"]).with_overrides(**overrides)
    except ConfigError as exc:
        click.echo(f"Configuration error: {exc}", err=True)
        sys.exit(1)


def _build_coverage(ctx: click.Context, config):
    """Run the whole conversion for *config* and return the populated report."""
    from gobertura.attribution import convert_profiles
    from gobertura.gomod import read_module_path
    from gobertura.models import Coverage, Source
    from gobertura.profile import parse_profiles

    source_dir = config.source_dir()
    package_path = config.package
    if not package_path:
        package_path = read_module_path(Path(source_dir) / "go.mod")
        _verbose(ctx, f"Module path from go.mod: {package_path}")

    _verbose(ctx, f"Reading cover profile '{config.profile}'")
    profiles = parse_profiles(config.profile)

    coverage = Coverage(
        package_path=package_path,
        sources=[Source(path=source_dir)],
        timestamp=int(time.time() * 1000),
    )
    _verbose(ctx, f"Attributing {len(profiles)} file(s) from '{source_dir}'")
    convert_profiles(coverage, profiles, source_dir=source_dir)
    _verbose(
        ctx,
        f"{coverage.lines_covered}/{coverage.lines_valid} lines covered "
        f"in {len(coverage.packages)} package(s)",
    )
    return coverage


def _render(coverage, fmt: str, pretty: bool) -> str:
    if fmt == "json":
        from gobertura.reports.summary import build_summary

        indent = 2 if pretty else None
        return json.dumps(build_summary(coverage), indent=indent, ensure_ascii=False) + "\n"

    from gobertura.reports.cobertura_xml import render

    return render(coverage)


def _emit(text: str, output_path: str) -> None:
    """Write *text* to *output_path*, or to stdout when it is ``-``."""
    if output_path == "-":
        click.echo(text, nl=False)
        return
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(text)
    click.echo(f"Report written to '{output_path}'", err=True)


def _handle_conversion_errors(func):
    """Decorator that catches conversion exceptions and exits cleanly."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        from gobertura.gomod import GoModError
        from gobertura.parsing import SourceParseError
        from gobertura.profile import ProfileError

        try:
            return func(*args, **kwargs)
        except GoModError as exc:
            click.echo(f"Module path error: {exc}", err=True)
            sys.exit(1)
        except ProfileError as exc:
            click.echo(f"Profile error: {exc}", err=True)
            sys.exit(1)
        except SourceParseError as exc:
            click.echo(f"Parse error: {exc}", err=True)
            sys.exit(1)
        except OSError as exc:
            click.echo(f"File error: {exc}", err=True)
            sys.exit(1)

    return wrapper


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------

@click.group()
@click.option("--config", "config_path", default=None,
              help="Path to the configuration file (default: gobertura.yaml if present).")
@click.option("--pretty", is_flag=True, default=False,
              help="Pretty-print JSON output.")
@click.option("--verbose", is_flag=True, default=False,
              help="Enable verbose logging.")
@click.version_option(__version__, prog_name="gobertura")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, pretty: bool, verbose: bool) -> None:
    """Convert Go cover profiles into Cobertura coverage reports."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["pretty"] = pretty
    ctx.obj["verbose"] = verbose
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------

@cli.command("init")
@click.option("--output", "output_path", default="gobertura.yaml", show_default=True,
              help="Path where the template config file will be written.")
def init_command(output_path: str) -> None:
    """Generate a template gobertura.yaml file."""
    from gobertura.config import ConfigError, generate_template
    try:
        generate_template(output_path)
        click.echo(f"Template written to '{output_path}'.")
    except ConfigError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)


# ---------------------------------------------------------------------------
# convert
# ---------------------------------------------------------------------------

@cli.command("convert")
@click.option("--in", "profile", default=None,
              help="Path of the coverage profile [default: coverprofile.txt].")
@click.option("--out", "output", default=None,
              help="Output path, '-' for stdout [default: coverage.xml].")
@click.option("--src", "source", default=None,
              help="Go source folder [default: current working directory].")
@click.option("--pkg", "package", default=None,
              help="Package import path [default: module path from go.mod].")
@click.option("--format", "fmt", type=click.Choice(FORMATS), default=None,
              help="Report format [default: xml].")
@click.pass_context
@_handle_conversion_errors
def convert_command(ctx: click.Context, profile: str | None, output: str | None,
                    source: str | None, package: str | None, fmt: str | None) -> None:
    """Convert a Go cover profile into a Cobertura report."""
    config = _load_config(ctx, profile=profile, output=output, source=source,
                          package=package, format=fmt)
    coverage = _build_coverage(ctx, config)
    _emit(_render(coverage, config.format, ctx.obj["pretty"]), config.output)


# ---------------------------------------------------------------------------
# summary
# ---------------------------------------------------------------------------

@cli.command("summary")
@click.option("--in", "profile", default=None,
              help="Path of the coverage profile [default: coverprofile.txt].")
@click.option("--src", "source", default=None,
              help="Go source folder [default: current working directory].")
@click.option("--pkg", "package", default=None,
              help="Package import path [default: module path from go.mod].")
@click.pass_context
@_handle_conversion_errors
def summary_command(ctx: click.Context, profile: str | None,
                    source: str | None, package: str | None) -> None:
    """Print a JSON coverage summary to stdout."""
    config = _load_config(ctx, profile=profile, source=source, package=package)
    coverage = _build_coverage(ctx, config)
    _emit(_render(coverage, "json", ctx.obj["pretty"]), "-")
