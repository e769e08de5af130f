"""Command-line interface for vpclaunch.

    vpclaunch up                      # provision with vpclaunch.toml / defaults
    vpclaunch up --region eu-west-1   # override a single setting
    vpclaunch up --dry-run            # exercise the graph without AWS
"""

from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from vpclaunch.config import resolve_config
from vpclaunch.core.exceptions import VpcLaunchError
from vpclaunch.facade import provision
from vpclaunch.logging import LogConfig
from vpclaunch.providers.local import LocalProvider
from vpclaunch.types import ProvisionResult

app = typer.Typer(
    no_args_is_help=True,
    help="Provision a network, subnet, security group, key pair and instance in one run.",
)

_console = Console()
_err_console = Console(stderr=True)


class ConsoleLevel(str, Enum):
    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


@app.callback()
def main() -> None:
    """vpclaunch - one-shot EC2 environment provisioning."""


def _instances_table(result: ProvisionResult) -> Table:
    table = Table(title="Instance created")
    table.add_column("Instance")
    table.add_column("Type")
    table.add_column("State")
    table.add_column("Private IP")
    table.add_column("Image")
    for instance in result.instances:
        table.add_row(
            instance.id,
            instance.instance_type,
            instance.state,
            instance.private_ip or "-",
            instance.image_id,
        )
    return table


@app.command()
def up(
    config: Annotated[
        Path | None, typer.Option("--config", "-c", help="Path to a vpclaunch.toml file."),
    ] = None,
    region: Annotated[str | None, typer.Option(help="Target region.")] = None,
    environment: Annotated[
        str | None, typer.Option(help="Value of the Environment tag."),
    ] = None,
    instance_type: Annotated[str | None, typer.Option(help="Instance type to launch.")] = None,
    zone_policy: Annotated[
        str | None, typer.Option(help="Zone selection policy: exclude-last or uniform."),
    ] = None,
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="Use the in-memory provider instead of AWS."),
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log to stderr.")] = False,
    log_level: Annotated[
        ConsoleLevel, typer.Option(case_sensitive=False, help="Console log level."),
    ] = ConsoleLevel.INFO,
    log_file: Annotated[Path | None, typer.Option(help="Also write logs to this file.")] = None,
) -> None:
    """Provision the environment and print the launched instances."""
    try:
        settings = resolve_config(
            config_path=config,
            region=region,
            environment=environment,
            instance_type=instance_type,
            zone_policy=zone_policy,
        )
        log_config = (
            LogConfig(
                level=log_level.value,
                file=str(log_file) if log_file else None,
                console=verbose,
            )
            if verbose or log_file
            else None
        )
        provider = LocalProvider(region=settings.region) if dry_run else None
        result = provision(settings, provider=provider, logging=log_config)
    except VpcLaunchError as e:
        _err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        for note in getattr(e, "__notes__", ()):
            _err_console.print(f"[yellow]{escape(note)}[/yellow]")
        raise typer.Exit(code=1) from e

    _console.print(_instances_table(result))
    _console.print(f"time took: {result.elapsed:.2f} seconds")


def run() -> None:
    app()
