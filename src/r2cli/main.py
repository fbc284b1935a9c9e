from importlib import metadata

import typer

from r2cli.core.errors import UsageError
from r2cli.core.models import (
    Command,
    CopyUpload,
    Delete,
    ListBuckets,
    ListObjects,
    Move,
)
from r2cli.core.runner import report_error, run_command

PACKAGE_NAME = "r2cli"

app = typer.Typer(
    help="A CLI tool for managing Cloudflare R2 storage buckets and objects",
)


def get_version() -> str:
    try:
        return metadata.version(PACKAGE_NAME)
    except metadata.PackageNotFoundError:
        return "unknown"


def _version_callback(value: bool):
    if value:
        typer.echo(f"r2 {get_version()}")
        raise typer.Exit()


def execute(command: Command) -> None:
    exit_code = run_command(command)
    if exit_code != 0:
        raise typer.Exit(exit_code)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
):
    """
    A CLI tool for managing Cloudflare R2 storage buckets and objects.

    With no command, lists all buckets.
    """
    if ctx.invoked_subcommand is None:
        execute(ListBuckets())


@app.command("ls")
def list_command(
    bucket: str | None = typer.Argument(
        None, help="Name of the bucket to list objects from (optional)"
    ),
):
    """
    List buckets or objects in a bucket.

    List all buckets when no bucket is specified, or list objects in the
    specified bucket.

    Examples: 'r2 ls' lists all buckets, 'r2 ls my-bucket' lists the objects
    in my-bucket.
    """
    if bucket is None:
        execute(ListBuckets())
    else:
        execute(ListObjects(bucket=bucket))


@app.command("mv")
def move_command(
    bucket: str = typer.Argument(..., help="Name of the bucket containing the object"),
    src: str = typer.Argument(..., help="Source object key (path to existing object)"),
    dst: str = typer.Argument(..., help="Destination object key (new path/name)"),
):
    """
    Move/rename objects within a bucket.

    The object is copied to the destination key, then the source is deleted.

    Example: r2 mv my-bucket file1.txt folder/file2.txt
    """
    execute(Move(bucket=bucket, src_key=src, dst_key=dst))


@app.command("cp")
def copy_command(
    src: str = typer.Argument(..., help="Local file path to upload"),
    dst: str = typer.Argument(
        ...,
        help=(
            "Destination path in format 'bucket/key' "
            "(e.g., 'my-bucket/folder/file.txt')"
        ),
    ),
):
    """
    Copy files to R2.

    The destination must be specified in 'bucket/key' format.

    Example: r2 cp local/file.txt my-bucket/remote/file.txt
    """
    try:
        command = CopyUpload.from_destination(src, dst)
    except UsageError as e:
        raise typer.Exit(report_error(e)) from e

    execute(command)


@app.command("rm")
def delete_command(
    bucket: str = typer.Argument(..., help="Name of the bucket containing the object"),
    key: str = typer.Argument(..., help="Object key to delete"),
):
    """
    Delete an object from a bucket.

    Example: r2 rm my-bucket file.txt
    """
    execute(Delete(bucket=bucket, key=key))


if __name__ == "__main__":
    app()
