import os
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

import typer
from rich.console import Console
from rich.markup import escape

from obsctl.core.config import DEFAULT_MAX_WORKERS, RuntimeConfig, build_runtime_config
from obsctl.core.credentials import DEFAULT_CREDENTIALS_FILE
from obsctl.core.errors import ObsCtlError, PartialBatchFailure
from obsctl.core.models import BatchReport
from obsctl.core.presenter import ReportPresenter
from obsctl.core.runner import run_batch
from obsctl.services.obs.client import ObsClient

console_err = Console(stderr=True)

T = TypeVar("T")

INTERRUPTED_EXIT_CODE = 130


@dataclass
class GlobalOptions:
    region: str | None = None
    ak: str | None = None
    sk: str | None = None
    credentials_file: str = DEFAULT_CREDENTIALS_FILE
    workers: int = DEFAULT_MAX_WORKERS
    verbose: bool = False


def build_client(config: RuntimeConfig) -> ObsClient:
    return ObsClient.from_config(config)


def fail(error: Exception) -> typer.Exit:
    console_err.print(f"[bold red]Error:[/bold red] {error}")
    return typer.Exit(getattr(error, "exit_code", 1))


def load_runtime(ctx: typer.Context) -> tuple[RuntimeConfig, ObsClient]:
    """
    Resolves credentials and region once for this invocation and builds the client.
    """
    options: GlobalOptions = ctx.obj or GlobalOptions()
    try:
        config = build_runtime_config(
            options.ak,
            options.sk,
            options.region,
            os.environ,
            credentials_path=options.credentials_file,
            max_workers=options.workers,
        )
        client = build_client(config)
    except ObsCtlError as e:
        raise fail(e) from e

    return config, client


def call_obs(message: str, func: Callable[..., T], *args: Any) -> T:
    """
    Runs one API call behind a spinner, failing the command on ObsCtlError.
    """
    try:
        with console_err.status(f"[bold yellow]{escape(message)}...", spinner="dots"):
            return func(*args)
    except ObsCtlError as e:
        raise fail(e) from e


def report_batch(
    report: BatchReport, title: str, json_output: bool, csv_output: bool
) -> None:
    ReportPresenter(report).render(title, json_output=json_output, csv_output=csv_output)

    if report.interrupted:
        raise typer.Exit(INTERRUPTED_EXIT_CODE)
    try:
        report.raise_for_failures()
    except PartialBatchFailure as e:
        raise typer.Exit(e.exit_code) from e


def execute_batch(
    ctx: typer.Context, tasks, title: str, json_output: bool, csv_output: bool
) -> None:
    config, client = load_runtime(ctx)
    report = run_batch(
        client,
        tasks,
        max_workers=config.max_workers,
        silent=json_output or csv_output,
    )
    report_batch(report, title, json_output, csv_output)
