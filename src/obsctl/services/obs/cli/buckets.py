import typer
from rich.console import Console

from obsctl.core.presenter import BucketView, Presenter
from obsctl.core.runner import build_delete_bucket_tasks
from obsctl.services.obs.cli.common import call_obs, execute_batch, load_runtime

console_out = Console()


def create(
    ctx: typer.Context,
    bucket: str = typer.Option(..., "--bucket", "-b", help="Bucket to create"),
):
    """Create a bucket"""
    config, client = load_runtime(ctx)
    call_obs(f"Creating bucket {bucket}", client.create_bucket, bucket)
    console_out.print(
        f"[bold green]Created bucket[/bold green] {bucket} in {config.region}"
    )


def list_buckets(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Output raw JSON"),
    csv_output: bool = typer.Option(False, "--csv", help="Output CSV"),
):
    """List buckets in all regions"""
    _, client = load_runtime(ctx)
    buckets = call_obs("Listing buckets", client.list_buckets)

    Presenter(buckets, view_class=BucketView).render(
        "Buckets", json_output=json_output, csv_output=csv_output
    )


def delete_bucket(
    ctx: typer.Context,
    bucket: str = typer.Option(..., "--bucket", "-b", help="Bucket to delete"),
):
    """Delete a single bucket"""
    _, client = load_runtime(ctx)
    call_obs(f"Deleting bucket {bucket}", client.delete_bucket, bucket)
    console_out.print(f"[bold green]Deleted bucket[/bold green] {bucket}")


def delete_buckets(
    ctx: typer.Context,
    buckets: list[str] = typer.Argument(..., help="Buckets to delete"),
    json_output: bool = typer.Option(False, "--json", help="Output raw JSON"),
    csv_output: bool = typer.Option(False, "--csv", help="Output CSV"),
):
    """Delete multiple buckets concurrently"""
    execute_batch(
        ctx,
        build_delete_bucket_tasks(buckets),
        "Delete Buckets",
        json_output,
        csv_output,
    )
