"""
Main CLI interface for occ.
"""

import sys
from pathlib import Path
from typing import Any, Optional

import click
from click.core import ParameterSource
from rich.console import Console
from rich.markup import escape

from . import __version__
from .config import (
    CONTAINER_ENGINE_KEY,
    DISABLE_CONSOLE_PORT_KEY,
    IMAGE_TAG_KEY,
    OCM_USER_KEY,
    OFFLINE_ACCESS_TOKEN_KEY,
    OPS_UTILS_DIR_KEY,
    OPS_UTILS_DIR_RW_KEY,
    PODMAN_SOCKET_KEY,
    LaunchConfig,
    default_config_file,
    load_config,
    read_config_file,
    save_config,
)
from .constants import APP_NAME, DEFAULT_LOG_LEVEL
from .container_manager import ContainerManager
from .errors import ConfigError, OccError
from .launcher import SessionLauncher
from .logging_config import get_logger, setup_logging

logger = get_logger(__name__)

console = Console(stderr=True)

OCM_USERNAME_PROMPT = "Provide your ocm user name"
OFFLINE_ACCESS_TOKEN_PROMPT = (
    "Provide your OCM Offline Access Token from https://cloud.redhat.com/openshift/token"
)
OPS_UTILS_DIR_PROMPT = """(Optional) Provide your ops-sop/v4/utils directory.
This is an absolute path to any necessary scripts you wish to have automatically mounted into your container.
This is mounted in the "/root/sop-utils" directory in the container."""
OPS_UTILS_DIR_RO_PROMPT = "Would you like the ops-sop directory to be mounted as readonly?"


def _fail(error: OccError) -> None:
    """Report a fatal error and exit."""
    logger.debug(f"{type(error).__name__}: {error}")
    console.print(f"[red]Error: {escape(str(error))}[/red]", soft_wrap=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name=APP_NAME)
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file location (default: ~/.config/occ/config.yaml)",
)
@click.option(
    "--verbosity",
    "-v",
    default=DEFAULT_LOG_LEVEL,
    is_flag=False,
    flag_value="",
    help='Log level name or number; --verbosity= (or -v "") enables debug logging',
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write debug logs to this file",
)
@click.pass_context
def cli(ctx: click.Context, config_file: Optional[Path], verbosity: str, log_file: Optional[Path]) -> None:
    """OpenShift Command Center - a container-based workflow for SRE-ing OpenShift."""
    changed = ctx.get_parameter_source("verbosity") is not ParameterSource.DEFAULT
    setup_logging(verbosity, changed=changed, log_file=log_file)

    ctx.ensure_object(dict)
    ctx.obj["config_file"] = config_file or default_config_file()


@cli.command()
@click.argument("cluster_id", required=False)
@click.option("--tag", "-t", default=None, help="Sets the image tag to use")
@click.option(
    "--disable-console-port",
    "-d",
    is_flag=True,
    help="Disable automatic cluster console port mapping",
)
@click.pass_context
def run(ctx: click.Context, cluster_id: Optional[str], tag: Optional[str], disable_console_port: bool) -> None:
    """Run an OCM container instance, optionally logging in to CLUSTER_ID."""
    config_file: Path = ctx.obj["config_file"]

    try:
        settings = load_config(config_file)
        config = LaunchConfig.from_settings(settings, config_file, cluster_id)

        disable_console_port = disable_console_port or settings[DISABLE_CONSOLE_PORT_KEY]
        manager = ContainerManager(settings[PODMAN_SOCKET_KEY], engine=settings[CONTAINER_ENGINE_KEY])
        launcher = SessionLauncher(manager)

        console.print("[dim]Starting OCM container...[/dim]")
        launcher.launch(
            config,
            tag=tag or settings[IMAGE_TAG_KEY],
            publish_console_port=not disable_console_port,
        )
    except OccError as e:
        _fail(e)


@cli.command()
@click.pass_context
def init(ctx: click.Context) -> None:
    """Initialize the OCM container configuration file.

    If a config file already exists you are asked whether to overwrite it.
    """
    config_file: Path = ctx.obj["config_file"]

    settings: dict[str, Any] = {}
    if config_file.exists():
        if not click.confirm(
            f"A config file already exists at {config_file}, would you like to overwrite it?",
            default=False,
        ):
            console.print("[dim]Cancelled[/dim]")
            return
        console.print("The configuration file will be overwritten.\n")
        try:
            settings = read_config_file(config_file)
        except ConfigError as e:
            logger.warning(f"Ignoring unreadable config file: {e}")

    settings[OCM_USER_KEY] = click.prompt(OCM_USERNAME_PROMPT, default="", show_default=False)
    settings[OFFLINE_ACCESS_TOKEN_KEY] = click.prompt(
        OFFLINE_ACCESS_TOKEN_PROMPT,
        default="",
        show_default=False,
        hide_input=True,
    )

    ops_utils_dir = click.prompt(OPS_UTILS_DIR_PROMPT, default="", show_default=False)
    settings[OPS_UTILS_DIR_KEY] = ops_utils_dir
    if ops_utils_dir:
        settings[OPS_UTILS_DIR_RW_KEY] = not click.confirm(OPS_UTILS_DIR_RO_PROMPT, default=True)
    else:
        settings[OPS_UTILS_DIR_RW_KEY] = False

    try:
        save_config(config_file, settings)
    except OSError as e:
        logger.debug(f"Writing the config failed: {e}")
        console.print(f"[red]Writing the config to {config_file} failed: {escape(str(e))}[/red]")
        sys.exit(1)

    console.print(f"[green]Config file has been written to {config_file}[/green]")


def main() -> None:
    """Main entry point for the CLI."""
    try:
        cli()
    except KeyboardInterrupt:
        logger.info("User interrupted the operation")
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(0)
    except Exception as e:
        logger.exception(f"Unexpected error in CLI: {e}")
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
