# src/kubemeter/cli/main.py
"""
Entry point of the kubemeter CLI. Commands are defined in `meter`.
"""

import logging

import typer

from .. import __version__
from ..core.config import config
from . import meter

logging.basicConfig(
    level=config.LOG_LEVEL.upper(),
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


app = typer.Typer(
    name="kubemeter",
    help="Compile Kubernetes metering requests into PromQL and report hourly usage.",
    add_completion=False,
)

app.command(name="compile")(meter.compile_meter)
app.command(name="meter")(meter.run_meters)
app.command(name="list-meters")(meter.list_meters)


def _print_version():
    typer.echo(f"kubemeter version: {__version__}")


def version_callback(value: bool):
    if value:
        _print_version()
        raise typer.Exit()


@app.command()
def version():
    """
    Show the version of kubemeter.
    """
    _print_version()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
):
    """
    Meter CPU, memory, network and PVC usage of a Kubernetes cluster from Prometheus.
    """


if __name__ == "__main__":
    app()
