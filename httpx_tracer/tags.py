"""
Span tag extraction for request and URL values.

The values handed to the client are not guaranteed to be ``httpx`` types: a
caller may pass any URL-like object, sometimes exposing only ``host``. Every
attribute is therefore probed rather than assumed, and a part that cannot be
read is reported as ``ABSENT``. Each boundary then decides whether an absent
part becomes ``None`` or disappears from the tag set.
"""

ABSENT = object()

# Well-known ports for URLs that leave the port implicit.
DEFAULT_PORTS = {"http": 80, "https": 443}

SPAN_KIND = "client"


def probe(value, name: str):
    """Read ``value.name`` if it is exposed, otherwise return ``ABSENT``."""
    return getattr(value, name, ABSENT)


def url_port(url):
    port = probe(url, "port")
    if port is None:
        scheme = probe(url, "scheme")
        if scheme in DEFAULT_PORTS:
            return DEFAULT_PORTS[scheme]
    return port


def url_parts(url):
    """Return ``(path, host, port)`` of ``url``, using ``ABSENT`` for missing parts."""
    if url is ABSENT:
        return ABSENT, ABSENT, ABSENT
    return probe(url, "path"), probe(url, "host"), url_port(url)


def _tag_set(component, method, path, host, port) -> dict:
    return {
        "component": component,
        "span.kind": SPAN_KIND,
        "http.method": method,
        "http.url": path,
        "peer.host": host,
        "peer.port": port,
    }


def request_tags(method, url, component: str = "HTTP") -> dict:
    """
    Tags for a ``request(method, url, **options)`` call.

    All six keys are always present; parts the URL does not expose are ``None``.
    """
    tags = _tag_set(component, method, *url_parts(url))
    return {key: None if value is ABSENT else value for key, value in tags.items()}


def send_tags(request, component: str = "python-httpx") -> dict:
    """
    Tags for a ``send(request, **options)`` call.

    Keys whose value cannot be read from the request, or read as ``None``, are
    left out.
    """
    method = probe(request, "method")
    if method is not ABSENT and method is not None:
        method = str(method).upper()
    tags = _tag_set(component, method, *url_parts(probe(request, "url")))
    return {
        key: value
        for key, value in tags.items()
        if value is not ABSENT and value is not None
    }


def is_error_result(result) -> bool:
    """True when the client returned an error value instead of raising it."""
    return isinstance(result, Exception)
