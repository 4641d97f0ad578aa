"""
OpenTracing spans for outbound httpx calls.

Usage::

    import httpx_tracer

    httpx_tracer.instrument(tracer=my_tracer)
    ...
    httpx_tracer.remove()
"""

from .errors import HttpxTracerError, IncompatibleVersionError
from .instrumentation import init_auto_instrumentation, remove_auto_instrumentation
from .instrumentation.request import instrument as instrument_request
from .instrumentation.request import remove as remove_request
from .instrumentation.send import instrument as instrument_send
from .instrumentation.send import remove as remove_send

__version__ = "0.1.0"

# ``send`` sees every request, including streamed ones, so it is the default.
instrument = instrument_send
remove = remove_send

__all__ = [
    "HttpxTracerError",
    "IncompatibleVersionError",
    "init_auto_instrumentation",
    "instrument",
    "instrument_request",
    "instrument_send",
    "remove",
    "remove_auto_instrumentation",
    "remove_request",
    "remove_send",
]
