"""
Errors raised by httpx_tracer.
"""


class HttpxTracerError(Exception):
    """Base class for errors raised while installing instrumentation."""


class IncompatibleVersionError(HttpxTracerError):
    """The installed httpx is older than the instrumentation supports."""

    def __init__(self, installed: str, required: str):
        self.installed = installed
        self.required = required
        super().__init__(
            f"httpx {installed} is not supported, version {required} or newer is required"
        )
