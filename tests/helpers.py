"""Small builders shared by several test modules."""

from starlette.requests import Request


def make_request(headers: dict[str, str] | None = None, scheme: str = "http") -> Request:
    """Bare ASGI request carrying only headers and a scheme."""
    raw_headers = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    return Request(
        {
            "type": "http",
            "method": "GET",
            "scheme": scheme,
            "server": ("testserver", 443 if scheme == "https" else 80),
            "path": "/",
            "root_path": "",
            "query_string": b"",
            "headers": raw_headers,
        }
    )
