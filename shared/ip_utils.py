"""Client IP resolution for FastAPI requests (used by the access log)."""

from __future__ import annotations

from starlette.requests import Request

_PROXY_HEADERS = ("X-Forwarded-For", "X-Real-IP")


def get_client_ip(request: Request) -> str:
    """Return the caller's IP, preferring reverse-proxy headers.

    ``X-Forwarded-For`` may hold a chain; the first entry is the client.
    Falls back to the socket peer, or ``""`` when there is none.
    """
    for header in _PROXY_HEADERS:
        value = request.headers.get(header)
        if value:
            client_ip = value.split(",")[0].strip()
            if client_ip:
                return client_ip
    return request.client.host if request.client else ""
