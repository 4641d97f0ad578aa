import asyncio

import httpx
import pytest
from opentracing.mocktracer import MockTracer

from httpx_tracer.instrumentation import remove_auto_instrumentation


@pytest.fixture(autouse=True)
def _remove_instrumentation():
    yield
    remove_auto_instrumentation()


@pytest.fixture
def tracer():
    return MockTracer()


@pytest.fixture
def sent_requests():
    """Requests as seen by the transport, i.e. after the client finished with them."""
    return []


@pytest.fixture
def transport(sent_requests):
    def handler(request):
        sent_requests.append(request)
        if request.url.path == "/missing":
            return httpx.Response(404)
        return httpx.Response(200, json={"ok": True})

    return httpx.MockTransport(handler)


@pytest.fixture
def client(transport):
    with httpx.Client(transport=transport) as client:
        yield client


@pytest.fixture
def slow_transport():
    """Async transport that answers each path after the delay given in ``?delay=``."""
    def make(started=None):
        async def handler(request):
            if started is not None:
                started.set()
            await asyncio.sleep(float(request.url.params.get("delay", "0")))
            return httpx.Response(200)

        return httpx.MockTransport(handler)

    return make
