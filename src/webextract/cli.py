"""Command-line interface for webextract."""

from __future__ import annotations

import asyncio
import json
import sys
from typing import Any, Dict, Optional

import click
from rich.console import Console

from webextract.container import DependencyContainer
from webextract.models import ExtractionRequest
from webextract.observability.logging import configure_logging

console = Console(highlight=False, soft_wrap=True)


async def run_extraction(url: str, container: Optional[DependencyContainer] = None) -> Dict[str, Any]:
    """Extract one URL with images and return the printable result."""
    container = container or DependencyContainer()
    if container.config is None:
        container.load_config()
    assert container.config is not None
    # Before anything logs; stdout carries only the result.
    configure_logging(container.config.monitoring)

    async with container.lifecycle():
        service = await container.get_extraction_service()
        result = await service.extract(ExtractionRequest(url=url, include_images=True))
        return result.to_dict()


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("url", required=False)
def main(url: Optional[str]) -> None:
    """Extract title, description, main content and images from the page at URL."""
    if not url:
        click.echo("Please provide a URL as an argument.", err=True)
        sys.exit(1)

    payload = asyncio.run(run_extraction(url))
    console.print_json(json.dumps(payload, ensure_ascii=False))


if __name__ == "__main__":
    main()
