"""
Instrumentation for ``httpx.Client.request`` and ``httpx.AsyncClient.request``.

Spans start from the method and URL as the caller passed them, and the trace
context is injected into the ``headers`` option before httpx builds the request.
"""

import logging

from opentracing import Format

from ..registration import Interception
from ..tags import is_error_result, request_tags

logger = logging.getLogger(__name__)

COMPONENT = "HTTP"
OPERATION_NAME = "http.request"


def _parse_url(url):
    # tags only; the caller's value is passed through unchanged
    if isinstance(url, str):
        import httpx

        try:
            return httpx.URL(url)
        except httpx.InvalidURL:
            return url
    return url


def _inject(tracer, span, options: dict) -> None:
    import httpx

    headers = httpx.Headers(options.get("headers"))
    tracer.inject(span.context, Format.HTTP_HEADERS, headers)
    options["headers"] = headers


def _tag_response(span, response) -> None:
    span.set_tag("http.status_code", getattr(response, "status_code", None))
    if is_error_result(response):
        span.set_tag("error", True)


def _make_request_wrapper(interception):
    slot = interception.original_slot

    def request_with_span(self, method, url, **options):
        original_request = getattr(self, slot)
        if interception.ignore_request(method, url, options):
            return original_request(method, url, **options)

        tracer = interception.tracer
        tags = request_tags(method, _parse_url(url), component=COMPONENT)
        with tracer.start_active_span(OPERATION_NAME, tags=tags) as scope:
            _inject(tracer, scope.span, options)
            response = original_request(method, url, **options)
            _tag_response(scope.span, response)
        return response

    return request_with_span


def _make_async_request_wrapper(interception):
    slot = interception.original_slot

    async def async_request_with_span(self, method, url, **options):
        original_request = getattr(self, slot)
        if interception.ignore_request(method, url, options):
            return await original_request(method, url, **options)

        tracer = interception.tracer
        tags = request_tags(method, _parse_url(url), component=COMPONENT)
        # tasks share the thread-local active scope, so the span is finished
        # directly instead of being activated
        span = tracer.start_span(OPERATION_NAME, child_of=tracer.active_span, tags=tags)
        with span:
            _inject(tracer, span, options)
            response = await original_request(method, url, **options)
            _tag_response(span, response)
        return response

    return async_request_with_span


interception = Interception(
    "request",
    "_request_without_tracing",
    _make_request_wrapper,
    _make_async_request_wrapper,
)


def instrument(tracer=None, ignore_request=None) -> None:
    """
    Wrap every ``Client.request``/``AsyncClient.request`` call in a span.

    Does nothing when httpx is not installed.
    ``ignore_request(method, url, options)`` returning true skips tracing for
    that call. Instrumenting again only replaces the tracer and predicate.
    """
    try:
        import httpx
    except ImportError:
        logger.debug("httpx not installed, skipping request instrumentation")
        return

    interception.instrument(
        [(httpx.Client, False), (httpx.AsyncClient, True)],
        tracer=tracer,
        ignore_request=ignore_request,
    )


def remove() -> None:
    """Restore the original ``request`` methods. Safe to call when not instrumented."""
    interception.remove()


def is_instrumented() -> bool:
    return interception.is_instrumented()
