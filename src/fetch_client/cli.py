"""
Command-line interface for the fetch client.

Available commands:
- fetch: Fetch a URL through a configured HttpClient and print the response
- settings: Show the settings resolved from the environment

All commands use async operations under the hood.
"""

import asyncio
import json
import logging
import sys

import click

from fetch_client.client import HttpClient
from fetch_client.config import FetchClientSettings
from fetch_client.exceptions import FetchClientError
from fetch_client.exceptions import HttpResponseError
from fetch_client.interceptor import Interceptor
from fetch_client.interceptor import reject_on_error
from fetch_client.logging_interceptor import LoggingInterceptor
from fetch_client.models import json as json_body
from fetch_client.transport import get_transport

logger = logging.getLogger("fetch_client.cli")


def _parse_headers(values: tuple[str, ...]) -> dict[str, str]:
    headers = {}
    for value in values:
        name, sep, content = value.partition(":")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected NAME:VALUE, got {value!r}", param_hint="--header")
        headers[name.strip()] = content.strip()
    return headers


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, verbose):
    """Fetch client CLI"""
    settings = FetchClientSettings()
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")
    ctx.obj = {"settings": settings, "verbose": verbose}


@cli.command()
@click.argument("url")
@click.option("--method", "-X", default="GET", show_default=True, help="HTTP method")
@click.option("--header", "-H", "headers", multiple=True, help="Request header as NAME:VALUE")
@click.option("--data", "-d", default=None, help="Raw text body")
@click.option("--json-data", default=None, help="JSON body (sent with application/json)")
@click.option("--base-url", default=None, help="Base URL prepended to URL")
@click.option("--transport", default=None, help="Transport: httpx, aiohttp or requests")
@click.option("--timeout", type=float, default=None, help="Transport timeout in seconds")
@click.option("--reject-errors", is_flag=True, help="Fail on non-2xx responses")
@click.pass_context
def fetch(ctx, url, method, headers, data, json_data, base_url, transport, timeout, reject_errors):
    """Fetch URL and print the status line and body."""
    if data is not None and json_data is not None:
        raise click.UsageError("--data and --json-data are mutually exclusive")

    settings: FetchClientSettings = ctx.obj["settings"]
    overrides = {}
    if base_url is not None:
        overrides["base_url"] = base_url
    if transport is not None:
        overrides["transport"] = transport
    if timeout is not None:
        overrides["timeout"] = timeout
    settings = settings.model_copy(update=overrides)

    init = {"method": method, "headers": _parse_headers(headers)}
    if json_data is not None:
        try:
            init["body"] = json_body(json.loads(json_data))
        except json.JSONDecodeError as exc:
            raise click.BadParameter(str(exc), param_hint="--json-data") from exc
    elif data is not None:
        init["body"] = data

    async def _run() -> int:
        client = HttpClient.from_settings(
            settings, transport=get_transport(settings.transport, timeout=settings.timeout)
        )
        if ctx.obj["verbose"]:
            client.with_interceptor(LoggingInterceptor(level=logging.DEBUG))
        if reject_errors:
            client.with_interceptor(Interceptor(response=reject_on_error))

        try:
            response = await client.fetch(url, init)
        except HttpResponseError as exc:
            response = exc.response
            click.echo(f"{response.status} {response.status_text}".rstrip(), err=True)
            click.echo(await response.text(), err=True)
            return 1
        except (FetchClientError, TypeError, ValueError) as exc:
            logger.debug("Fetch failed", exc_info=True)
            click.echo(f"Fetch failed: {exc}", err=True)
            return 1
        finally:
            await client.aclose()

        click.echo(f"{response.status} {response.status_text}".rstrip())
        click.echo(await response.text())
        return 0

    sys.exit(asyncio.run(_run()))


@cli.command()
@click.pass_context
def settings(ctx):
    """Show the settings resolved from the environment."""
    click.echo(ctx.obj["settings"].model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
