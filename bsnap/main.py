"""
BSnapD — CLI entrypoint.

Usage:
    bsnap --help
    bsnap --theme=light
    python -m bsnap.main
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any

import click

from bsnap import __version__
from bsnap.core.observability.logging_config import setup_logging
from bsnap.ui.cli.theme import THEME_NAMES


class MenuCommand(click.Command):
    """Command whose usage errors exit with status 1."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = 1
            raise


@click.command(cls=MenuCommand, context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="bsnap")
@click.option(
    "--theme",
    type=click.Choice(THEME_NAMES),
    default=None,
    help="Color theme (default: from config, else dark).",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Path to config.yml (default: auto-detect).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.pass_context
def cli(
    ctx: click.Context,
    theme: str | None,
    config_path: str | None,
    verbose: bool,
    debug: bool,
) -> None:
    """BSnapD Installer/Manager.

    Install or update the 'bsnap' launcher, manage the snap services
    (snapd.socket, snapd.apparmor.service), and list, search, install
    or remove snaps. snapd is installed automatically when missing.
    """
    from bsnap.core.config.loader import ConfigError, load_settings

    setup_logging(debug=debug, verbose=verbose)

    try:
        settings = load_settings(Path(config_path) if config_path else None)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    obj: dict[str, Any] = ctx.obj if isinstance(ctx.obj, dict) else {}
    app = build_app(
        settings,
        theme_name=theme or settings.theme,
        runner=obj.get("runner"),
    )
    app.run()


def build_app(settings, theme_name: str, runner=None, environ=None):
    """Wire runner, clients, core services and renderer into a MenuApp."""
    from bsnap.adapters.shell.command import SubprocessRunner
    from bsnap.adapters.snap import PackageToolClient
    from bsnap.adapters.systemd import ServiceManagerClient
    from bsnap.core.services.bootstrap import SnapBootstrap
    from bsnap.core.services.launcher import LauncherInstaller
    from bsnap.core.services.packages import PackagePipeline
    from bsnap.core.services.reconciler import ServiceReconciler
    from bsnap.ui.cli.menus import MenuApp
    from bsnap.ui.cli.render import Renderer
    from bsnap.ui.cli.theme import get_theme

    runner = runner or SubprocessRunner()
    services = settings.service_descriptors()
    theme = get_theme(theme_name, os.environ if environ is None else environ)

    return MenuApp(
        renderer=Renderer(theme),
        reconciler=ServiceReconciler(ServiceManagerClient(runner), services),
        pipeline=PackagePipeline(PackageToolClient(runner), cap=settings.search.result_cap),
        bootstrap=SnapBootstrap(runner, services),
        launcher=LauncherInstaller(runner, settings.launcher.path),
    )


if __name__ == "__main__":
    cli()
