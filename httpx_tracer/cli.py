#!/usr/bin/env python3
"""
cli.py

Command-line trace console: send one HTTP request through instrumented httpx
and print the spans it produced as a tree.
"""
import click
import httpx
from opentracing.mocktracer import MockTracer
from rich import print

from httpx_tracer.exporters import span_tree
from httpx_tracer.instrumentation import BOUNDARIES, DEFAULT_BOUNDARY


def parse_headers(ctx, param, values):
    headers = {}
    for value in values:
        name, sep, content = value.partition(":")
        if not sep or not name.strip():
            raise click.BadParameter(f"expected 'Name: value', got {value!r}")
        headers[name.strip()] = content.strip()
    return headers


def _build_client(timeout: float) -> httpx.Client:
    return httpx.Client(timeout=timeout)


@click.command()
@click.argument("url")
@click.option("--method", "-X", default="GET", show_default=True, help="HTTP method to send")
@click.option(
    "--header", "-H", "headers", multiple=True, callback=parse_headers,
    help="Extra request header as 'Name: value' (repeatable)"
)
@click.option(
    "--boundary", type=click.Choice(sorted(BOUNDARIES)), default=DEFAULT_BOUNDARY,
    show_default=True, help="Client method to intercept"
)
@click.option("--timeout", default=10.0, type=float, show_default=True, help="Request timeout in seconds")
def main(url, method, headers, boundary, timeout):
    """
    Send a traced request to URL and show the resulting spans.
    """
    tracer = MockTracer()
    instrumentation = BOUNDARIES[boundary]
    instrumentation.instrument(tracer=tracer)
    failed = False
    try:
        with _build_client(timeout) as client:
            response = client.request(method, url, headers=headers)
        click.echo(f"{method.upper()} {url}: HTTP {response.status_code}")
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        click.echo(f"Request failed: {exc}", err=True)
        failed = True
    finally:
        instrumentation.remove()

    print(span_tree.render(tracer.finished_spans()))
    if failed:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
