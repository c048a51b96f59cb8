import typer
from rich.console import Console
from rich.markup import escape

from obsctl.core.errors import ObsCtlError
from obsctl.core.presenter import ObjectView, Presenter
from obsctl.core.runner import build_delete_object_tasks, build_upload_tasks
from obsctl.services.obs.cli.common import (
    call_obs,
    console_err,
    execute_batch,
    fail,
    load_runtime,
)
from obsctl.services.obs.lister import PaginatedLister

console_out = Console()


def list_objects(
    ctx: typer.Context,
    bucket: str = typer.Option(..., "--bucket", "-b", help="Bucket to list"),
    prefix: str = typer.Option(
        None, "--prefix", "-p", help="Include only keys with the specified prefix"
    ),
    marker: str = typer.Option(
        None, "--marker", "-m", help="List results after the object with the marker"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output raw JSON"),
    csv_output: bool = typer.Option(False, "--csv", help="Output CSV"),
):
    """List objects in a bucket"""
    _, client = load_runtime(ctx)
    entries = []
    try:
        with console_err.status(
            f"[bold yellow]Listing {escape(bucket)}...", spinner="dots"
        ):
            for entry in PaginatedLister(client).list(
                bucket, prefix=prefix, start_marker=marker
            ):
                entries.append(entry)
    except ObsCtlError as e:
        if entries:
            Presenter(entries, view_class=ObjectView).render(
                f"{bucket} (incomplete)",
                json_output=json_output,
                csv_output=csv_output,
            )
        raise fail(e) from e

    Presenter(entries, view_class=ObjectView).render(
        bucket, json_output=json_output, csv_output=csv_output
    )


def upload_object(
    ctx: typer.Context,
    bucket: str = typer.Option(..., "--bucket", "-b", help="Bucket to upload to"),
    file_path: str = typer.Option(..., "--file", "-f", help="Local file path"),
    object_key: str = typer.Option(
        None, "--object", "-o", help="Object key, defaults to the file name"
    ),
):
    """Upload an object to a bucket"""
    _, client = load_runtime(ctx)
    key = call_obs(
        f"Uploading {file_path}", client.upload_object, bucket, file_path, object_key
    )
    console_out.print(f"[bold green]Uploaded[/bold green] {file_path} to {bucket}/{key}")


def download_object(
    ctx: typer.Context,
    bucket: str = typer.Option(..., "--bucket", "-b", help="Bucket to download from"),
    object_key: str = typer.Option(
        ..., "--object", "-o", help="Object key, without the leading '/'"
    ),
    output_dir: str = typer.Option(
        ".", "--output-dir", "-d", help="Output directory, NOT the file name"
    ),
):
    """Download an object to disk"""
    _, client = load_runtime(ctx)
    destination = call_obs(
        f"Downloading {bucket}/{object_key}",
        client.download_object,
        bucket,
        object_key,
        output_dir,
    )
    console_out.print(
        f"[bold green]Downloaded[/bold green] {bucket}/{object_key} to {destination}"
    )


def delete_object(
    ctx: typer.Context,
    bucket: str = typer.Option(..., "--bucket", "-b", help="Bucket holding the object"),
    object_key: str = typer.Option(..., "--object", "-o", help="Object key to delete"),
):
    """Delete a single object"""
    _, client = load_runtime(ctx)
    call_obs(f"Deleting {bucket}/{object_key}", client.delete_object, bucket, object_key)
    console_out.print(f"[bold green]Deleted[/bold green] {bucket}/{object_key}")


def upload_objects(
    ctx: typer.Context,
    files: list[str] = typer.Argument(
        ..., help="Local files to upload, the object key is the file name"
    ),
    bucket: str = typer.Option(..., "--bucket", "-b", help="Bucket to upload to"),
    json_output: bool = typer.Option(False, "--json", help="Output raw JSON"),
    csv_output: bool = typer.Option(False, "--csv", help="Output CSV"),
):
    """Upload multiple objects to a bucket concurrently"""
    execute_batch(
        ctx, build_upload_tasks(bucket, files), "Upload Objects", json_output, csv_output
    )


def delete_objects(
    ctx: typer.Context,
    keys: list[str] = typer.Argument(..., help="Object keys to delete"),
    bucket: str = typer.Option(..., "--bucket", "-b", help="Bucket holding the objects"),
    json_output: bool = typer.Option(False, "--json", help="Output raw JSON"),
    csv_output: bool = typer.Option(False, "--csv", help="Output CSV"),
):
    """Delete multiple objects concurrently"""
    execute_batch(
        ctx,
        build_delete_object_tasks(bucket, keys),
        "Delete Objects",
        json_output,
        csv_output,
    )
