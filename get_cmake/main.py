"""
get-cmake — CLI entrypoint.

Usage:
    get-cmake --help
    get-cmake fetch 3.20.0
    get-cmake fetch latest --repo kitware --output-dir /opt/cmake
    get-cmake resolve latest
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from get_cmake import __version__
from get_cmake.core.errors import GetCMakeError, TooManyArguments, UnknownOption
from get_cmake.core.observability.logging_config import (
    LOG_FILE_ENV,
    LOG_FILE_LEVEL_ENV,
    console_level,
    setup_logging,
)
from get_cmake.core.services.release.data.constants import LATEST, SUPPORTED_REPOS


def _as_usage_error(err: GetCMakeError, ctx: click.Context | None) -> click.UsageError:
    usage = click.UsageError(str(err), ctx=ctx)
    usage.exit_code = 1
    return usage


class _ExitOneOnUsage:
    """Usage mistakes exit 1 like every other failure (click uses 2)."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)  # type: ignore[misc]
        except click.NoSuchOption as e:
            raise _as_usage_error(UnknownOption(e.format_message()), ctx) from e
        except click.UsageError as e:
            e.exit_code = 1
            raise


class StrictCommand(_ExitOneOnUsage, click.Command):
    pass


class StrictGroup(_ExitOneOnUsage, click.Group):
    command_class = StrictCommand


def _single_version(ctx: click.Context, versions: tuple[str, ...]) -> str:
    if len(versions) > 1:
        raise _as_usage_error(
            TooManyArguments(f"Too many arguments: expected at most one version, got {len(versions)}"),
            ctx,
        )
    return versions[0] if versions else LATEST


def _progress_printer():
    from get_cmake.core.services.release.domain.download_helpers import ProgressThrottle

    throttle = ProgressThrottle()

    def report(done: int, total: int) -> None:
        if throttle.should_report(done, total):
            click.echo(f"   ⬇ {throttle.describe(done, total)}", err=True)

    return report


@click.group(cls=StrictGroup)
@click.version_option(version=__version__, prog_name="get-cmake")
@click.option("--verbose", "-v", is_flag=True, help="Show each step and gpg output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to get-cmake.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """get-cmake — download, verify and unpack official CMake releases."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose or debug
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=console_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(LOG_FILE_ENV),
        log_file_level=os.environ.get(LOG_FILE_LEVEL_ENV),
    )


@cli.command()
@click.argument("version", nargs=-1)
@click.option("--progress", is_flag=True, help="Show download progress on stderr.")
@click.option(
    "--repo",
    default=None,
    help=f"Distribution channel: {' or '.join(SUPPORTED_REPOS)} (default: github).",
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory to unpack into (default: ./cmake-<version>).",
)
@click.option(
    "--trusted-keys",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory of ASCII-armored public keys (*.asc) to trust.",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def fetch(
    ctx: click.Context,
    version: tuple[str, ...],
    progress: bool,
    repo: str | None,
    output_dir: str | None,
    trusted_keys: str | None,
    as_json: bool,
) -> None:
    """Download, verify and unpack a CMake release.

    VERSION is MAJOR.MINOR.PATCH, MAJOR.MINOR.PATCH-rcN or "latest".

    Examples:

        get-cmake fetch 3.20.0

        get-cmake fetch latest --repo kitware --trusted-keys ./trusted_pubkeys
    """
    from get_cmake.core.use_cases.fetch import fetch_release

    requested = _single_version(ctx, version)
    result = fetch_release(
        requested,
        repo=repo,
        output_dir=Path(output_dir) if output_dir else None,
        trusted_keys_dir=Path(trusted_keys) if trusted_keys else None,
        config_path=ctx.obj.get("config_path"),
        verbose=ctx.obj.get("verbose", False),
        progress=_progress_printer() if progress else None,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)
        return

    # Deprecation notices reach the user at every verbosity, -q included.
    for warning in result.warnings:
        click.secho(f"⚠️  WARNING: {warning}", fg="yellow", err=True)

    if not result.ok:
        click.secho(f"❌ {result.error}", fg="red")
        for line in result.error_details:
            click.echo(f"   {line}")
        sys.exit(1)

    if not ctx.obj.get("quiet"):
        reuse = "" if result.downloaded else " (reused existing download)"
        click.secho(f"✅ CMake {result.version} unpacked to {result.output_dir}{reuse}", fg="green")
        if result.signature:
            click.echo(f"   Hashes verified with {result.signature}")
    click.echo(f"Prepend the following to your PATH: {result.bin_dir}")


@cli.command()
@click.argument("version", nargs=-1)
@click.option("--repo", default=None, help="Distribution channel (default: github).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def resolve(ctx: click.Context, version: tuple[str, ...], repo: str | None, as_json: bool) -> None:
    """Show which release VERSION resolves to, without downloading it."""
    from get_cmake.core.use_cases.fetch import resolve_version

    requested = _single_version(ctx, version)
    result = resolve_version(requested, repo=repo, config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.error is None else 1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    location = result.location
    assert location is not None  # guaranteed after error check above
    click.secho(f"📦 CMake {location.version}", fg="cyan", bold=True)
    click.echo(f"   Repo:     {location.repo}")
    click.echo(f"   Base URL: {location.base_url}")
    click.echo(f"   Manifest: {location.url(location.manifest_name)}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
