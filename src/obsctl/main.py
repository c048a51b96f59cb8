import typer
from rich.console import Console
from rich.table import Table

from obsctl.core.config import DEFAULT_MAX_WORKERS
from obsctl.core.credentials import DEFAULT_CREDENTIALS_FILE
from obsctl.core.regions import region_aliases
from obsctl.core.runner import setup_logging
from obsctl.services.obs.cli import register_commands
from obsctl.services.obs.cli.common import GlobalOptions

app = typer.Typer(
    help="obsctl: file operations and management in Huawei Cloud OBS",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    region: str = typer.Option(
        None, "--region", "-r", help="OBS region code or city name (e.g. santiago)"
    ),
    ak: str = typer.Option(
        None, "--ak", help="Access key override, prefer HUAWEICLOUD_SDK_AK"
    ),
    sk: str = typer.Option(
        None, "--sk", help="Secret key override, prefer HUAWEICLOUD_SDK_SK"
    ),
    credentials_file: str = typer.Option(
        DEFAULT_CREDENTIALS_FILE,
        "--credentials-file",
        help="CSV with the access key in column 2 and secret key in column 3",
    ),
    workers: int = typer.Option(
        DEFAULT_MAX_WORKERS, "--workers", min=1, help="Concurrent tasks in batches"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    setup_logging(verbose)
    ctx.obj = GlobalOptions(
        region=region,
        ak=ak,
        sk=sk,
        credentials_file=credentials_file,
        workers=workers,
        verbose=verbose,
    )


@app.command("regions")
def regions():
    """List the city names accepted by --region"""
    table = Table(title="Region Aliases")
    table.add_column("City")
    table.add_column("Region")
    for city, code in region_aliases().items():
        table.add_row(city, code)
    Console().print(table)


register_commands(app)

if __name__ == "__main__":
    app()
