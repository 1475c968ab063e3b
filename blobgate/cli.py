"""
BlobGate Command-Line Interface

Upload, fetch, list and delete blobs through the validated gateway.

Author: BlobGate Contributors
Date: 2026
"""

import sys
import asyncio
import logging
from pathlib import Path
from typing import Awaitable, Callable, Optional, TypeVar

import click

from blobgate import __version__
from blobgate.core.config_manager import BlobGateConfig, ConfigManager
from blobgate.core.logging_config import setup_logging
from blobgate.gateway.models import OperationResult
from blobgate.gateway.service import BlobGatewayService
from blobgate.store.exceptions import ObjectStoreError
from blobgate.store.factory import create_object_store
from blobgate.store.interface import BlobHeaders

logger = logging.getLogger("blobgate.cli")

T = TypeVar("T")


def _run(config: BlobGateConfig, action: Callable[[BlobGatewayService], Awaitable[T]]) -> T:
    """Run one gateway action against a freshly built store."""

    async def runner() -> T:
        async with create_object_store(config.storage) as store:
            service = BlobGatewayService.from_config(config, store)
            return await action(service)

    try:
        return asyncio.run(runner())
    except ObjectStoreError as e:
        click.echo(f"[ERROR] Storage backend error ({e.error_code}): {e.message}", err=True)
        sys.exit(1)
    except ValueError as e:
        click.echo(f"[ERROR] {e}", err=True)
        sys.exit(1)


def _report(result: OperationResult) -> None:
    if result.is_error:
        click.echo(f"[ERROR] {result.status_code.value}: {result.message}", err=True)
        sys.exit(1)
    status = result.status_code.value if result.status_code else "OK"
    click.echo(f"[OK] {status}: {result.message}")


@click.group()
@click.version_option(version=__version__, prog_name="blobgate")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file (YAML or JSON)",
)
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    help="Logging level (overrides configuration)",
)
@click.pass_context
def cli(ctx, config: Optional[Path], log_level: Optional[str]):
    """
    BlobGate - validated gateway over blob storage

    Uploads are checked for size and file signature before they reach the
    storage account.
    """
    ctx.ensure_object(dict)

    overrides = {"logging": {"level": log_level.upper()}} if log_level else None
    settings = ConfigManager().load(
        config_file=str(config) if config else None,
        cli_overrides=overrides,
    )
    setup_logging(
        level=settings.logging.level,
        format_type=settings.logging.format,
        log_file=settings.logging.file,
        rotation_size=settings.logging.rotation_size,
        rotation_count=settings.logging.rotation_count,
        module_levels=settings.logging.module_levels,
    )
    ctx.obj["config"] = settings


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("container")
@click.option("--name", "-n", help="Blob name (default: the file's name)")
@click.option("--content-type", help="Content type stored with the blob")
@click.pass_context
def upload(ctx, file: Path, container: str, name: Optional[str], content_type: Optional[str]):
    """
    Upload FILE into CONTAINER.

    Examples:
        blobgate upload report.pdf documents
        blobgate upload scan.png images --name 2026/scan.png --content-type image/png
    """
    blob_name = name or file.name
    headers = BlobHeaders(content_type=content_type) if content_type else None

    async def action(service: BlobGatewayService) -> OperationResult:
        with open(file, "rb") as f:
            result = await service.upload(f, blob_name, container, headers=headers)
        if result.blob is not None:
            result.blob.content.close()
        return result

    result = _run(ctx.obj["config"], action)
    _report(result)
    click.echo(f"   URI: {result.blob.uri}")


@cli.command()
@click.argument("name")
@click.argument("container")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Write the blob content to this file",
)
@click.pass_context
def get(ctx, name: str, container: str, output: Optional[Path]):
    """Fetch blob NAME from CONTAINER."""

    async def action(service: BlobGatewayService) -> OperationResult:
        result = await service.get(name, container)
        if result.blob is not None:
            data = result.blob.read()
            if output:
                output.write_bytes(data)
        return result

    result = _run(ctx.obj["config"], action)
    _report(result)
    click.echo(f"   URI: {result.blob.uri}")
    if output:
        click.echo(f"   Saved to: {output}")


@cli.command()
@click.argument("name")
@click.argument("container")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Write the blob content to this file (default: the blob name)",
)
@click.pass_context
def download(ctx, name: str, container: str, output: Optional[Path]):
    """Download blob NAME from CONTAINER with its content type."""
    target = output or Path(Path(name).name)

    async def action(service: BlobGatewayService):
        blob = await service.download(name, container)
        if blob is not None:
            target.write_bytes(blob.read())
        return blob

    blob = _run(ctx.obj["config"], action)
    if blob is None:
        click.echo(f"[ERROR] File not found: {name}", err=True)
        sys.exit(1)
    click.echo(f"[OK] Downloaded {name} to {target}")
    click.echo(f"   Content-Type: {blob.content_type or 'unknown'}")


@cli.command(name="list")
@click.argument("container")
@click.pass_context
def list_command(ctx, container: str):
    """List the blobs in CONTAINER."""

    async def action(service: BlobGatewayService):
        return await service.list_blobs(container)

    blobs = _run(ctx.obj["config"], action)
    if not blobs:
        click.echo(f"No blobs in container '{container}'")
        return
    for blob in blobs:
        click.echo(f"{blob.name}\t{blob.content_type or '-'}\t{blob.uri}")


@cli.command()
@click.argument("name")
@click.argument("container")
@click.pass_context
def delete(ctx, name: str, container: str):
    """Delete blob NAME from CONTAINER."""

    async def action(service: BlobGatewayService) -> OperationResult:
        return await service.delete(name, container)

    _report(_run(ctx.obj["config"], action))


def main():
    """Main entry point for CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
