import logging
import os
import sys
from collections.abc import Callable, Mapping
from pathlib import Path

from botocore.exceptions import BotoCoreError, ClientError
from rich.console import Console
from rich.markup import escape

from r2cli.core.client import R2Client
from r2cli.core.config import resolve
from r2cli.core.errors import ConfigError, MovePartialError, UsageError
from r2cli.core.models import (
    Command,
    CopyUpload,
    Delete,
    ListBuckets,
    ListObjects,
    Move,
    ResolvedConfig,
)

logger = logging.getLogger(__name__)

console_err = Console(stderr=True, soft_wrap=True)

VERBOSE_ENV_VAR = "R2_VERBOSE"

RemoteError = (ClientError, BotoCoreError)


def setup_logging(verbose: bool):
    log_level = logging.DEBUG if verbose else logging.ERROR
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def verbose_requested(environ: Mapping[str, str]) -> bool:
    value = environ.get(VERBOSE_ENV_VAR)
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def move_object(command: Move, client: R2Client) -> None:
    """
    Copies then deletes. The two calls are not atomic.

    A failed copy leaves the source untouched and the delete is never sent.
    A failed delete leaves both objects in place and raises MovePartialError.
    """
    client.copy_object(command.bucket, command.copy_source, command.dst_key)

    try:
        client.delete_object(command.bucket, command.src_key)
    except RemoteError as e:
        raise MovePartialError(command.bucket, command.src_key, command.dst_key) from e


def upload_file(command: CopyUpload, client: R2Client) -> None:
    body = Path(command.local_path).read_bytes()
    client.put_object(command.bucket, command.dest_key, body)


def dispatch(command: Command, client: R2Client) -> list[str]:
    """
    Executes exactly one command and returns the lines to print.
    """
    match command:
        case ListBuckets():
            return client.list_buckets()
        case ListObjects(bucket=bucket):
            return client.list_objects(bucket)
        case Move():
            move_object(command, client)
        case CopyUpload():
            upload_file(command, client)
        case Delete(bucket=bucket, key=key):
            client.delete_object(bucket, key)
        case _:
            raise TypeError(f"Unsupported command: {command!r}")
    return []


def _describe_remote_error(error: Exception) -> str:
    if isinstance(error, ClientError):
        error_code = error.response.get("Error", {}).get("Code", "Unknown")
        return f"{error_code}: {error}"
    return str(error)


def report_error(error: Exception) -> int:
    """
    Prints a failure to stderr and returns the process exit code.
    """
    logger.debug("Command failed", exc_info=error)

    if isinstance(error, ConfigError):
        console_err.print(
            f"[bold red]Configuration Error:[/bold red] {escape(str(error))}"
        )
        console_err.print(
            "Set [green]R2_ACCESS_KEY_ID[/green], "
            "[green]R2_SECRET_ACCESS_KEY[/green] and "
            "[green]R2_ACCOUNT_ID[/green], or create [green]~/.r2/config[/green]."
        )
    elif isinstance(error, UsageError):
        console_err.print(f"[bold red]Usage Error:[/bold red] {escape(str(error))}")
    elif isinstance(error, MovePartialError):
        console_err.print(
            f"[bold yellow]Partial Move:[/bold yellow] {escape(str(error))}"
        )
        if error.__cause__ is not None:
            cause = _describe_remote_error(error.__cause__)
            console_err.print(f"[bold red]R2 Error:[/bold red] {escape(cause)}")
    elif isinstance(error, RemoteError):
        console_err.print(
            f"[bold red]R2 Error:[/bold red] {escape(_describe_remote_error(error))}"
        )
    elif isinstance(error, OSError):
        console_err.print(f"[bold red]File Error:[/bold red] {escape(str(error))}")
    else:
        console_err.print(
            f"[bold red]Unexpected Error:[/bold red] {escape(str(error))}"
        )
    return 1


def run_command(
    command: Command,
    environ: Mapping[str, str] | None = None,
    config_path: Path | None = None,
    client_factory: Callable[[ResolvedConfig], R2Client] | None = None,
) -> int:
    """
    Resolves credentials, builds the client once and dispatches the command.

    Returns 0 on success and 1 on any failure, after printing the output
    lines or the error description.
    """
    if environ is None:
        environ = os.environ
    if client_factory is None:
        client_factory = R2Client.from_config

    setup_logging(verbose_requested(environ))

    try:
        config = resolve(environ=environ, config_path=config_path)
        client = client_factory(config)
        lines = dispatch(command, client)
    except Exception as e:
        return report_error(e)

    for line in lines:
        print(line)

    return 0
