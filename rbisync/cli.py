"""rbisync CLI — keep generated gem RBIs in sync, or verify they are."""

from __future__ import annotations

import click

from rbisync import __version__
from rbisync import output
from rbisync.errors import EXIT_FAILURE, CLIError, RbiSyncError


@click.group()
@click.version_option(version=__version__, prog_name="rbisync")
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output.",
    is_eager=True,
    expose_value=False,
    callback=lambda ctx, param, value: output.set_no_color(value) if value else None,
)
def main():
    """rbisync — generated RBI files for the gems of your application.

    `sync` removes, creates, moves and updates RBI files so that the output
    directory matches what the compiler produces; `verify` only reports
    what `sync` would change.
    """


_RUN_OPTIONS = [
    click.argument("names", nargs=-1),
    click.option("--all", "all_gems", is_flag=True, help="Process every gem (default)"),
    click.option("--exclude", "-x", multiple=True, help="Gem to leave out (repeatable)"),
    click.option(
        "--config", "-c", "config_path", default=None, help="Config file (default: ./rbisync.yml)"
    ),
    click.option("--outdir", "-o", default=None, help="Directory holding the gem RBIs"),
    click.option("--manifest", "-m", default=None, help="Dependency manifest (YAML)"),
    click.option("--postrequire", default=None, help="File listing extra requires to load first"),
    click.option("--file-header/--no-file-header", default=None, help="Add the banner"),
    click.option("--workers", "-j", type=int, default=None, help="Gems compiled in parallel"),
    click.option("--verbose", "-v", is_flag=True, help="Debug logging on stderr"),
]


def run_options(func):
    """Options shared by sync and verify.

    Relative paths are taken relative to the config file's directory.
    """
    for option in reversed(_RUN_OPTIONS):
        func = option(func)
    return func


def _prepare(names, all_gems, config_path, verbose, **overrides):
    from rbisync.compiler.manifest import ManifestCompiler
    from rbisync.config import load_config
    from rbisync.log import configure_logging
    from rbisync.sync.session import SyncSession

    configure_logging("DEBUG" if verbose else "WARNING")

    if all_gems and names:
        raise CLIError("Option '--all' must be provided without any other arguments")

    config = load_config(config_path).with_overrides(**overrides)
    compiler = ManifestCompiler(config.manifest_path, config.postrequire_path)
    return SyncSession(config, compiler, output.get_console())


# ── Sync ─────────────────────────────────────────────────────────────


@main.command()
@run_options
def sync(names, all_gems, exclude, config_path, verbose, **overrides):
    """Generate, move, update and remove RBI files until the directory is in sync.

    NAMES restricts the run to those gems; without names every gem is processed.
    """
    try:
        session = _prepare(names, all_gems, config_path, verbose, **overrides)
        session.sync(names, exclude)
    except RbiSyncError as e:
        raise CLIError.from_error(e) from e


# ── Verify ───────────────────────────────────────────────────────────


@main.command()
@run_options
@click.pass_context
def verify(ctx, names, all_gems, exclude, config_path, verbose, **overrides):
    """Check that the RBI files are up to date without changing anything.

    Exits with status 1 when `sync` would change something.
    """
    try:
        session = _prepare(names, all_gems, config_path, verbose, **overrides)
        result = session.verify(names, exclude)
    except RbiSyncError as e:
        raise CLIError.from_error(e) from e

    if not result.ok:
        ctx.exit(EXIT_FAILURE)


if __name__ == "__main__":
    main()
