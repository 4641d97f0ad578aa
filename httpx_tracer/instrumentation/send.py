"""
Instrumentation for ``httpx.Client.send`` and ``httpx.AsyncClient.send``.

``send`` receives a fully built ``httpx.Request``, so the trace context is
injected into the request's own headers, the ones written to the wire.
Redirects and auth retries reuse those headers.
"""

import logging

from opentracing import Format
from packaging.version import Version

from ..errors import IncompatibleVersionError
from ..registration import Interception
from ..tags import is_error_result, send_tags

logger = logging.getLogger(__name__)

COMPONENT = "python-httpx"
OPERATION_NAME = "http.request"
MINIMUM_HTTPX_VERSION = "0.18.0"


def compatible_version(installed: str) -> bool:
    return Version(installed) >= Version(MINIMUM_HTTPX_VERSION)


def _tag_response(span, response) -> None:
    status = getattr(response, "status_code", None)
    if status is not None:
        span.set_tag("http.status_code", status)
    if is_error_result(response):
        span.set_tag("error", True)


def _make_send_wrapper(interception):
    slot = interception.original_slot

    def send_with_span(self, request, **options):
        original_send = getattr(self, slot)
        if interception.ignore_request(request, options):
            return original_send(request, **options)

        tracer = interception.tracer
        with tracer.start_active_span(OPERATION_NAME, tags=send_tags(request, component=COMPONENT)) as scope:
            tracer.inject(scope.span.context, Format.HTTP_HEADERS, request.headers)
            response = original_send(request, **options)
            _tag_response(scope.span, response)
        return response

    return send_with_span


def _make_async_send_wrapper(interception):
    slot = interception.original_slot

    async def async_send_with_span(self, request, **options):
        original_send = getattr(self, slot)
        if interception.ignore_request(request, options):
            return await original_send(request, **options)

        tracer = interception.tracer
        # tasks share the thread-local active scope, so the span is finished
        # directly instead of being activated
        span = tracer.start_span(
            OPERATION_NAME,
            child_of=tracer.active_span,
            tags=send_tags(request, component=COMPONENT),
        )
        with span:
            tracer.inject(span.context, Format.HTTP_HEADERS, request.headers)
            response = await original_send(request, **options)
            _tag_response(span, response)
        return response

    return async_send_with_span


interception = Interception(
    "send",
    "_send_without_tracing",
    _make_send_wrapper,
    _make_async_send_wrapper,
)


def instrument(tracer=None, ignore_request=None) -> None:
    """
    Wrap every ``Client.send``/``AsyncClient.send`` call in a span.

    Does nothing when httpx is not installed. Raises
    ``IncompatibleVersionError`` when it is older than ``MINIMUM_HTTPX_VERSION``.
    ``ignore_request(request, options)`` returning true skips tracing for that call.
    """
    try:
        import httpx
    except ImportError:
        logger.debug("httpx not installed, skipping send instrumentation")
        return

    if not compatible_version(httpx.__version__):
        raise IncompatibleVersionError(httpx.__version__, MINIMUM_HTTPX_VERSION)

    interception.instrument(
        [(httpx.Client, False), (httpx.AsyncClient, True)],
        tracer=tracer,
        ignore_request=ignore_request,
    )


def remove() -> None:
    """Restore the original ``send`` methods. Safe to call when not instrumented."""
    interception.remove()


def is_instrumented() -> bool:
    return interception.is_instrumented()
