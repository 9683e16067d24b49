"""httpx wrapper.

Why a wrapper:
- Standardizes timeouts, headers and the redirect policy for the director
  and origin requests.
- Makes testing easy: tests pass an `httpx.MockTransport`.
"""

from __future__ import annotations

import httpx

from dumb_pelican_client.core.config import AppSettings


def build_client(
    settings: AppSettings | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create an `httpx.Client` with safe defaults.

    Redirects are never followed: the director answers with a 307 whose
    `Location` we do not want to chase blindly (SSRF), and an origin that
    redirects a PUT would otherwise receive our bearer token elsewhere.
    """

    settings = settings or AppSettings()
    return httpx.Client(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=False,
        headers={"User-Agent": settings.user_agent},
        transport=transport,
    )


def response_detail(response: httpx.Response) -> str:
    """Short `status, body` string for error messages."""

    try:
        body = response.text.strip()
    except (httpx.HTTPError, UnicodeDecodeError):
        body = ""
    return f"status {response.status_code}, body {body or '<no_body>'}"
