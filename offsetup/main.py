"""
offsetup: CLI entrypoint.

Usage:
    offsetup --help
    offsetup --dry-run install
    offsetup -c path/to/offsetup.yml --install-priority docker,native install
"""

from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path

import click

from offsetup import __version__
from offsetup.core.config.loader import MANIFEST_FILE, CliOverrides, find_manifest_file
from offsetup.core.observability.logging_config import level_for, setup_logging

logger = logging.getLogger(__name__)

# alias → command name
COMMAND_ALIASES: dict[str, str] = {
    "init": "new", "--new": "new", "--init": "new",
    "-i": "install", "--install": "install",
    "rm": "uninstall", "remove": "uninstall",
    "--uninstall": "uninstall", "--rm": "uninstall", "--remove": "uninstall",
    "up": "start", "run": "start", "--start": "start", "--up": "start", "--run": "start",
    "down": "stop", "--stop": "stop", "--down": "stop",
}


class AliasedGroup(click.Group):
    """Group that accepts command aliases, including dashed ones like ``-i``."""

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        command = super().get_command(ctx, cmd_name)
        if command is not None:
            return command
        target = COMMAND_ALIASES.get(cmd_name)
        return super().get_command(ctx, target) if target else None

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        # Dashed aliases would otherwise be parsed as unknown options;
        # only the first one names the command.
        args = list(args)
        for index, arg in enumerate(args):
            if arg.startswith("-") and arg in COMMAND_ALIASES:
                args[index] = COMMAND_ALIASES[arg]
                break
        return super().parse_args(ctx, args)


def _parse_priority_list(
    ctx: click.Context, param: click.Parameter, value: str | None,
) -> list[str] | None:
    if value is None:
        return None
    return [item.strip() for item in value.strip().split(",") if item.strip()]


@click.group(cls=AliasedGroup)
@click.version_option(version=__version__, prog_name="offsetup")
@click.option("--debug", "-d", is_flag=True, envvar="OFFSETUP_DEBUG", help="Activate debug mode.")
@click.option(
    "--dry-run",
    is_flag=True,
    help="Show what would be done without altering anything.",
)
@click.option(
    "--verbose", "-v", "verbosity",
    count=True,
    envvar="OFFSETUP_VERBOSITY",
    help="Verbose mode (-v, -vv).",
)
@click.option(
    "--install-priority",
    callback=_parse_priority_list,
    default=None,
    metavar="LIST",
    help="Comma separated list of priorities; overrides every platform in the manifest.",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help=f"Path to the manifest (default: nearest {MANIFEST_FILE}).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    debug: bool,
    dry_run: bool,
    verbosity: int,
    install_priority: list[str] | None,
    config_path: str | None,
) -> None:
    """offsetup: set up a project's environment from offsetup.yml."""
    ctx.ensure_object(dict)
    ctx.obj["cli"] = CliOverrides(
        debug=debug,
        dry_run=dry_run,
        install_priority=install_priority,
    )
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging(
        level=level_for(debug, verbosity, default=os.environ.get("OFFSETUP_LOG_LEVEL")),
        log_file=os.environ.get("OFFSETUP_LOG_FILE"),
        log_file_level=os.environ.get("OFFSETUP_LOG_FILE_LEVEL"),
    )


def _manifest_path(ctx: click.Context) -> Path:
    explicit = ctx.obj.get("config_path")
    if explicit is not None:
        return explicit
    return find_manifest_file() or Path(MANIFEST_FILE)


def _fail(message: str, code: int = 1) -> None:
    click.secho(f"❌ {message}", fg="red", err=True)
    sys.exit(code)


@cli.command()
@click.option("--force", is_flag=True, help="Overwrite an existing manifest.")
@click.option(
    "--directory",
    type=click.Path(file_okay=False, exists=True),
    default=".",
    help="Project directory to scan.",
)
@click.pass_context
def new(ctx: click.Context, force: bool, directory: str) -> None:
    """Generate a basic manifest from the project and host."""
    from offsetup.core.use_cases.new import run_new

    dry_run = bool(ctx.obj["cli"].dry_run)
    result = run_new(
        Path(directory), identity=ctx.obj.get("identity"), dry_run=dry_run, force=force,
    )

    if result.error:
        _fail(result.error)

    if dry_run:
        click.echo(f"DRY-RUN: output to {result.path}")
        click.echo(result.content, nl=False)
        return

    langs = ", ".join(lang.value for lang in result.languages) or "none"
    click.secho(f"✅ Wrote {result.path}", fg="green")
    click.echo(f"   Languages: {langs}")


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(ctx: click.Context, as_json: bool) -> None:
    """Install the project and all its dependencies."""
    from offsetup.core.use_cases.install import run_install

    result = run_install(
        _manifest_path(ctx),
        cli=ctx.obj["cli"],
        runner=ctx.obj.get("runner"),
        identity=ctx.obj.get("identity"),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if result.error:
        _fail(result.error)

    if result.validation_errors:
        click.secho("❌ Manifest errors:", fg="red", bold=True, err=True)
        for err in result.validation_errors:
            click.echo(f"   • {err}", err=True)
        sys.exit(1)

    report = result.report
    assert report is not None  # set whenever there is no error

    if report.dry_run:
        click.echo(f"DRY-RUN: what would be installed on {report.platform}")
        if not report.planned:
            click.echo("   nothing to run")
        for step in report.planned:
            click.echo(f"   [{step.platform}] {step.shell}: {step.command}")
        return

    for receipt in report.receipts:
        if receipt.ok:
            click.secho(f"   ✓ [{receipt.platform}] {receipt.command}", fg="green")
        elif receipt.failed:
            color = "yellow" if receipt.silenced else "red"
            click.secho(f"   ✗ [{receipt.platform}] {receipt.command}: {receipt.error}", fg=color)
        else:
            click.secho(f"   - [{receipt.platform}] {receipt.command} ({receipt.output})",
                        fg="white")

    if not report.all_ok:
        _fail(f"Install {report.status}: {report.failed} step(s) failed")

    click.secho(f"✅ Installed on {report.platform}", fg="green")


def _lifecycle(ctx: click.Context, action: str, remove_shared: bool = False) -> None:
    from offsetup.core.use_cases.lifecycle import run_lifecycle

    result = run_lifecycle(
        action, _manifest_path(ctx), cli=ctx.obj["cli"], remove_shared=remove_shared,
    )
    if result.error:
        _fail(result.error)

    if not result.dry_run:
        _fail(f"'{action}' is only available with --dry-run for now", code=2)

    click.echo(f"DRY-RUN: what would be done by {action}")
    for line in result.lines:
        click.echo(f"   {line}")


@cli.command()
@click.option("--remove-shared", is_flag=True, help="Also remove shared dependencies (eg: cmake).")
@click.pass_context
def uninstall(ctx: click.Context, remove_shared: bool) -> None:
    """Remove the project."""
    _lifecycle(ctx, "uninstall", remove_shared=remove_shared)


@cli.command()
@click.pass_context
def start(ctx: click.Context) -> None:
    """Run the project."""
    _lifecycle(ctx, "start")


@cli.command()
@click.pass_context
def stop(ctx: click.Context) -> None:
    """Stop the project."""
    _lifecycle(ctx, "stop")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
