"""
cf-terraforming CLI - Terraform configuration from existing Cloudflare resources.

Usage:
    cf-terraforming generate        Emit resource blocks for a resource type
    cf-terraforming import          Emit terraform import commands or blocks
    cf-terraforming resource-types  List supported resource types
    cf-terraforming version         Show the tool version
"""

from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .client import CloudflareClient
from .config import Settings, get_config, set_config
from .errors import CfTerraformingError, UnsupportedResourceTypeError
from .logging import get_logger, setup_logging
from .resources import get_registry
from .terraform import ImportScriptGenerator, ResourceFetcher, TerraformGenerator

# HCL goes to stdout through typer.echo; rich output is for humans only.
console = Console(stderr=True)
out_console = Console()
logger = get_logger(__name__)

# Commands that never call the API and so need no credentials.
OFFLINE_COMMANDS = {"resource-types", "version"}

app = typer.Typer(
    name="cf-terraforming",
    help="Generate Terraform configuration and import commands from existing Cloudflare resources.",
    no_args_is_help=True,
)


def _get_client(settings: Settings) -> CloudflareClient:
    """Create an API client for the current settings."""
    return CloudflareClient(settings)


def _split_types(resource_types: List[str]) -> List[str]:
    types: List[str] = []
    for value in resource_types:
        types.extend(t.strip() for t in value.split(",") if t.strip())
    return types


def _resolve_ids(zone: Optional[str], account: Optional[str], settings: Settings):
    """Fall back to the configured IDs only when neither flag was given."""
    if zone is None and account is None:
        return settings.zone_id, settings.account_id
    return zone, account


def _write_output(content: str, output: Optional[str]) -> None:
    if output:
        out_path = Path(output)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(content, encoding="utf-8")
        console.print(f"[green]Wrote {out_path}[/green]")
    else:
        typer.echo(content, nl=False)


def _fail(error: Exception) -> None:
    console.print(f"[red]Error:[/red] {escape(str(error))}", highlight=False, soft_wrap=True)
    raise typer.Exit(code=1)


def _check_resource_id(resource_id: Optional[str], types: List[str]) -> None:
    if resource_id and len(types) > 1:
        _fail(ValueError("--resource-id can only be used with a single resource type"))


@app.callback()
def main(
    ctx: typer.Context,
    token: Optional[str] = typer.Option(
        None, "--token", "-t", help="API token (env: CLOUDFLARE_API_TOKEN)"
    ),
    email: Optional[str] = typer.Option(
        None, "--email", "-e", help="Account email for API key auth (env: CLOUDFLARE_EMAIL)"
    ),
    key: Optional[str] = typer.Option(
        None, "--key", "-k", help="Global API key (env: CLOUDFLARE_API_KEY)"
    ),
    hostname: Optional[str] = typer.Option(
        None, "--hostname", help="API hostname (env: CLOUDFLARE_API_HOSTNAME)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Global options shared by every command."""
    try:
        settings = get_config().merged(
            api_token=token,
            email=email,
            api_key=key,
            api_hostname=hostname,
            log_level="DEBUG" if verbose else None,
        )
    except ValidationError as e:
        _fail(e)
    set_config(settings)
    setup_logging(settings)
    logger.debug("settings loaded", **settings.to_dict())

    if ctx.invoked_subcommand not in OFFLINE_COMMANDS:
        for problem in settings.validate_settings():
            logger.warning(problem)


@app.command()
def generate(
    resource_type: List[str] = typer.Option(
        ..., "--resource-type", "-r", help="Resource type(s) to generate (comma-sep or repeated)"
    ),
    zone: Optional[str] = typer.Option(
        None, "--zone", "-z", help="Zone ID (env: CLOUDFLARE_ZONE_ID)"
    ),
    account: Optional[str] = typer.Option(
        None, "--account", "-a", help="Account ID (env: CLOUDFLARE_ACCOUNT_ID)"
    ),
    resource_id: Optional[str] = typer.Option(
        None, "--resource-id", help="Generate only the resource with this ID (the parent ID for dependent types)"
    ),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Write to this file instead of stdout"
    ),
):
    """Fetch resources and emit Terraform resource blocks."""
    settings = get_config()
    registry = get_registry()
    types = _split_types(resource_type)
    _check_resource_id(resource_id, types)

    for rtype in types:
        if rtype not in registry:
            typer.echo(str(UnsupportedResourceTypeError(rtype)), nl=False)
            return

    zone, account = _resolve_ids(zone, account, settings)

    generator = TerraformGenerator(registry, max_workers=settings.max_workers)
    results = []
    try:
        with _get_client(settings) as client:
            fetcher = ResourceFetcher(client, registry)
            for rtype in types:
                results.append(
                    generator.generate(
                        fetcher,
                        rtype,
                        zone_id=zone,
                        account_id=account,
                        resource_id=resource_id,
                    )
                )
    except CfTerraformingError as e:
        _fail(e)

    content = "\n".join(r.content for r in results if r.content)
    logger.debug("generation complete", resource_types=types, resources=sum(r.resource_count for r in results))
    _write_output(content, output)

    if output:
        table = Table(title="Generated Resources", box=box.ROUNDED)
        table.add_column("Resource type", style="bold")
        table.add_column("Scope")
        table.add_column("Resources", justify="right")
        for r in results:
            table.add_row(r.resource_type, f"{r.scope} {r.scope_id}", str(r.resource_count))
        console.print(table)


@app.command(name="import")
def import_(
    resource_type: List[str] = typer.Option(
        ..., "--resource-type", "-r", help="Resource type(s) to import (comma-sep or repeated)"
    ),
    zone: Optional[str] = typer.Option(None, "--zone", "-z", help="Zone ID"),
    account: Optional[str] = typer.Option(None, "--account", "-a", help="Account ID"),
    resource_id: Optional[str] = typer.Option(
        None, "--resource-id", help="Import only the resource with this ID (the parent ID for dependent types)"
    ),
    modern_import_block: bool = typer.Option(
        False, "--modern-import-block", help="Emit Terraform 1.5+ import blocks"
    ),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Write to this file instead of stdout"
    ),
):
    """Emit terraform import commands (or import blocks) for existing resources."""
    settings = get_config()
    registry = get_registry()
    types = _split_types(resource_type)
    _check_resource_id(resource_id, types)

    for rtype in types:
        if rtype not in registry:
            typer.echo(str(UnsupportedResourceTypeError(rtype)), nl=False)
            return

    zone, account = _resolve_ids(zone, account, settings)

    importer = ImportScriptGenerator(registry)
    parts = []
    try:
        with _get_client(settings) as client:
            fetcher = ResourceFetcher(client, registry)
            for rtype in types:
                records = fetcher.fetch(
                    rtype, zone_id=zone, account_id=account, resource_id=resource_id
                )
                if records:
                    parts.append(importer.generate(records, modern=modern_import_block))
    except CfTerraformingError as e:
        _fail(e)

    separator = "\n" if modern_import_block else ""
    _write_output(separator.join(parts), output)


@app.command(name="resource-types")
def resource_types(
    scope: Optional[str] = typer.Option(
        None, "--scope", "-s", help="Only list types supporting 'zone' or 'account'"
    ),
):
    """List the resource types that can be generated."""
    if scope is not None and scope not in ("zone", "account"):
        _fail(ValueError(f"scope must be 'zone' or 'account', got {scope!r}"))

    registry = get_registry()
    table = Table(title="Supported Resource Types", box=box.ROUNDED)
    table.add_column("Resource type", style="bold", no_wrap=True)
    table.add_column("Scopes")
    table.add_column("Alias of", style="dim")

    for name in registry.resource_types(scope):
        spec = registry.get(name)
        table.add_row(name, ", ".join(spec.scopes), spec.alias_of or "")

    out_console.print(table)


@app.command()
def version():
    """Show the cf-terraforming version."""
    typer.echo(f"cf-terraforming {__version__}")


if __name__ == "__main__":
    app()
