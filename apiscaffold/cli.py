"""CLI entry point for the API scaffold."""

import json
import sys
from pathlib import Path
from typing import Optional

import click
import yaml

from apiscaffold.config import settings
from apiscaffold.core.discovery import discover_routes
from apiscaffold.core.dispatcher import API_VERSION
from apiscaffold.core.openapi import DocumentationGenerator


@click.group()
def main():
    """API Scaffold: serve the API or export its OpenAPI document."""
    pass


@main.command()
@click.option("--host", default=None, help="Bind address (default: HOST setting).")
@click.option("--port", default=None, type=int, help="Port (default: PORT setting).")
@click.option("--reload", is_flag=True, help="Restart the server when source files change.")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API under uvicorn."""
    import uvicorn

    uvicorn.run(
        "apiscaffold.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_config=None,
    )


@main.command("export-openapi")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Output file (default: stdout).")
@click.option("--format", "fmt", default="json", type=click.Choice(["json", "yaml"]), help="Document format.")
def export_openapi(output: Optional[Path], fmt: str):
    """Generate the OpenAPI document without starting a server."""
    registry = discover_routes(settings.route_modules)
    generator = DocumentationGenerator(
        title=settings.docs_title,
        description=settings.docs_description,
        version=API_VERSION,
        server_url=settings.api_prefix or "/",
    )
    document = generator.generate(registry)

    if fmt == "yaml":
        text = yaml.safe_dump(document, sort_keys=False, allow_unicode=True)
    else:
        text = json.dumps(document, indent=2) + "\n"

    if output is None:
        click.echo(text, nl=False)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
        click.echo(f"✓ OpenAPI document written to {output}", err=True)
        click.echo(f"  Paths: {len(document['paths'])}", err=True)

    # A partial document is still written, but the exit status reports it
    if registry.skipped:
        click.echo(f"Skipped modules: {', '.join(e.module for e in registry.skipped)}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
