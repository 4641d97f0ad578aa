"""
Automatic instrumentation registry for httpx.
"""

import logging
import os

from ..errors import IncompatibleVersionError
from . import request, send

logger = logging.getLogger(__name__)

BOUNDARIES = {
    "request": request,
    "send": send,
}
DEFAULT_BOUNDARY = "send"


def init_auto_instrumentation(tracer=None, ignore_request=None) -> None:
    """
    Install the interceptor selected by ``HTTPX_TRACER_BOUNDARY``.

    Set ``HTTPX_TRACER_DISABLE=1`` to opt out entirely. Installation problems
    are logged rather than raised so the host program keeps running.
    """
    if os.environ.get("HTTPX_TRACER_DISABLE") == "1":
        logger.debug("httpx instrumentation disabled by HTTPX_TRACER_DISABLE")
        return

    boundary = os.environ.get("HTTPX_TRACER_BOUNDARY", DEFAULT_BOUNDARY)
    if boundary not in BOUNDARIES:
        logger.warning("Unknown HTTPX_TRACER_BOUNDARY %r, using %r", boundary, DEFAULT_BOUNDARY)
        boundary = DEFAULT_BOUNDARY

    try:
        BOUNDARIES[boundary].instrument(tracer=tracer, ignore_request=ignore_request)
    except IncompatibleVersionError as exc:
        logger.warning("httpx instrumentation not installed: %s", exc)


def remove_auto_instrumentation() -> None:
    """Remove whichever interceptors are installed."""
    for module in BOUNDARIES.values():
        module.remove()
