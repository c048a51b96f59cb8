import typer

from obsctl.services.obs.cli import buckets, objects

COMMANDS = {
    "create": buckets.create,
    "list-buckets": buckets.list_buckets,
    "delete-bucket": buckets.delete_bucket,
    "delete-buckets": buckets.delete_buckets,
    "list-objects": objects.list_objects,
    "upload-object": objects.upload_object,
    "download-object": objects.download_object,
    "delete-object": objects.delete_object,
    "upload-objects": objects.upload_objects,
    "delete-objects": objects.delete_objects,
}

ALIAS_MAP = {
    "create": ["mkb"],
    "list-buckets": ["lsb"],
    "delete-bucket": ["rmb"],
    "delete-buckets": ["rmbs"],
    "list-objects": ["ls", "lso"],
    "upload-object": ["put"],
    "download-object": ["get"],
    "delete-object": ["rm"],
    "upload-objects": ["puts"],
    "delete-objects": ["rms"],
}


def register_commands(app: typer.Typer) -> None:
    for cmd_name, command in COMMANDS.items():
        aliases = ALIAS_MAP.get(cmd_name, [])
        help_text = command.__doc__
        if aliases:
            help_text = f"{help_text} (alias: {', '.join(aliases)})"

        app.command(cmd_name, help=help_text)(command)
        for alias in aliases:
            app.command(alias, help=command.__doc__, hidden=True)(command)
