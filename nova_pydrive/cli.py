"""
Command-line interface for nova-pydrive.

This module exposes the Google Drive operations on the command line:
- Token status and logout
- File listing and search with formatted output
- Folder creation, upload, download, copy, rename, star and delete

The CLI uses Click for command handling and Rich for formatted terminal output.
"""

import logging

import click
from rich.console import Console
from rich.table import Table

from nova_pydrive.config import Config
from nova_pydrive.constants import API_MESSAGES
from nova_pydrive.operations.base import listing_to_dataframe
from nova_pydrive.service import DriveService
from nova_pydrive.utils.progress import format_size

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _service(ctx: click.Context) -> DriveService:
    return DriveService(config=ctx.obj)


def _print_listing(listing, title: str) -> None:
    files = listing_to_dataframe(listing)

    table = Table(title=title)
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Size")
    table.add_column("Modified")
    table.add_column("ID")

    for row in files.itertuples(index=False):
        name = f"{row.name} *" if row.starred else row.name
        table.add_row(
            name, row.type, format_size(row.size), str(row.modified or ""), str(row.id)
        )

    Console().print(table)


def _report_result(ctx: click.Context, result) -> None:
    if result.error:
        click.echo(f"Error: {result.error}", err=True)
        ctx.exit(1)
    click.echo(result.resource_id)


def _report_flag(ctx: click.Context, ok: bool, message: str) -> None:
    if not ok:
        click.echo(f"Failed: {message}", err=True)
        ctx.exit(1)
    click.echo(f"OK: {message}")


@click.group()
@click.option(
    "--credentials",
    envvar="NOVA_PYDRIVE_CREDENTIALS",
    default=Config.CREDENTIALS_FILE,
    show_default=True,
    help="OAuth client secrets file from the Google Cloud Console.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx, credentials, verbose):
    """
    Nova PyDrive CLI.

    Command-line access to Google Drive files and folders.
    Use --help with any command for more information.

    Examples:
        List files in a folder:
        $ nova-pydrive list-files FOLDER_ID

        Create nested folders:
        $ nova-pydrive mkdir Reports/2024/Q1
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)
    ctx.obj = Config(CREDENTIALS_FILE=credentials)


@cli.command("token-status")
@click.pass_context
def token_status(ctx):
    """Check the stored access token, refreshing it if it is about to expire."""
    if _service(ctx).is_token_expired():
        click.echo(API_MESSAGES["token_expired"], err=True)
        ctx.exit(1)
    click.echo(API_MESSAGES["token_valid"])


@cli.command()
@click.pass_context
def logout(ctx):
    """Remove the stored token."""
    _report_flag(ctx, _service(ctx).storage.clear_token(), "token cleared")


@cli.command("list-files")
@click.argument("parent_id", required=False)
@click.option("--no-trashed", is_flag=True, help="Hide trashed files.")
@click.option("--starred", is_flag=True, help="Only show starred files.")
@click.option("--order-by", default="folder,name", show_default=True)
@click.pass_context
def list_files(ctx, parent_id, no_trashed, starred, order_by):
    """
    List files, optionally inside folder PARENT_ID.

    Example:
        $ nova-pydrive list-files --no-trashed --starred
    """
    listing = _service(ctx).list_files(
        parent_id=parent_id,
        include_trashed=not no_trashed,
        only_starred=starred,
        order_by=order_by,
    )
    _print_listing(listing, f"Files in {parent_id or 'My Drive'}")


@cli.command()
@click.argument("name")
@click.option("--parent", "parent_id", help="Only search inside this folder.")
@click.pass_context
def find(ctx, name, parent_id):
    """Find files named exactly NAME."""
    _print_listing(_service(ctx).find(name, parent_id=parent_id), f"Files named {name}")


@cli.command()
@click.argument("path")
@click.option("--parent", "parent_id", help="Folder receiving the first segment.")
@click.pass_context
def mkdir(ctx, path, parent_id):
    """Create nested folders from a '/'-delimited PATH and print the last id."""
    _report_result(ctx, _service(ctx).create_folder(path, parent_id=parent_id))


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--parent", "parent_id", help="Destination folder id.")
@click.pass_context
def upload(ctx, file, parent_id):
    """Upload FILE and print its id."""
    _report_result(ctx, _service(ctx).upload_file(file, parent_id=parent_id))


@cli.command()
@click.argument("file_id")
@click.option("--dest", "dest_dir", default=Config.DOWNLOAD_DIR, show_default=True)
@click.pass_context
def download(ctx, file_id, dest_dir):
    """Download FILE_ID, exporting Google documents to office formats."""
    click.echo(_service(ctx).download_file(file_id, dest_dir=dest_dir))


@cli.command()
@click.argument("file_id")
@click.option("--parent", "parent_id", help="Folder receiving the copy.")
@click.pass_context
def copy(ctx, file_id, parent_id):
    """Copy FILE_ID and print the id of the copy."""
    _report_result(ctx, _service(ctx).copy_file(file_id, parent_id=parent_id))


@cli.command()
@click.argument("file_id")
@click.argument("new_name")
@click.pass_context
def rename(ctx, file_id, new_name):
    """Rename FILE_ID to NEW_NAME."""
    ok = _service(ctx).rename_resource(file_id, new_name)
    _report_flag(ctx, ok, f"renamed {file_id} to {new_name}")


@cli.command()
@click.argument("file_id")
@click.option("--unstar", is_flag=True, help="Remove the star instead.")
@click.pass_context
def star(ctx, file_id, unstar):
    """Star (or unstar) FILE_ID."""
    _report_result(ctx, _service(ctx).set_starred(file_id, not unstar))


@cli.command()
@click.argument("file_id")
@click.confirmation_option(prompt="Permanently delete this file?")
@click.pass_context
def delete(ctx, file_id):
    """Permanently delete FILE_ID, bypassing the trash."""
    _report_flag(ctx, _service(ctx).delete_file(file_id), f"deleted {file_id}")


if __name__ == "__main__":
    cli()
