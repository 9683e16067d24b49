"""Pelican director lookup.

The director maps a namespace path to the origins serving it. We ask for
`<director_url><object path>` and read two response headers:

- `Link`: comma-separated `<url>; rel=...; pri=...` entries, one per origin.
- `X-Pelican-Namespace`: `namespace=/prefix, require-token=true, ...`.

The director answers with a redirect; we read its headers instead of
following it.
"""

from __future__ import annotations

import logging

import httpx

from dumb_pelican_client.adapters.http_client import build_client, response_detail
from dumb_pelican_client.core.config import AppSettings
from dumb_pelican_client.core.domain.models import OSDF_URL_PREFIX, PelicanInfo
from dumb_pelican_client.core.errors import PelicanError

logger = logging.getLogger(__name__)

_CACHE: dict[tuple[str, str], PelicanInfo] = {}


def clear_cache() -> None:
    _CACHE.clear()


def parse_link_header(value: str) -> list[str]:
    out: list[str] = []
    for entry in value.split(","):
        _, lt, rest = entry.partition("<")
        url, gt, _ = rest.partition(">")
        if not lt or not gt or not url.strip():
            raise PelicanError("Error parsing link header")
        out.append(url.strip())
    return out


def parse_namespace_header(value: str) -> str:
    for part in value.split(","):
        key, sep, val = part.strip().partition("=")
        if sep and key.strip().lower() == "namespace" and val.strip():
            return val.strip()
    raise PelicanError("Error parsing x-pelican-namespace header")


def split_osdf_url(url: str) -> str:
    """Path component of an `osdf://` URL (everything after the scheme)."""

    if not url.startswith(OSDF_URL_PREFIX):
        raise PelicanError("url is not an OSDF url")
    return url[len(OSDF_URL_PREFIX):]


def _fetch_director_headers(client: httpx.Client, director_url: str, path: str) -> httpx.Headers:
    lookup = f"{director_url}{path}"
    logger.info("querying director %s", lookup)
    try:
        response = client.get(lookup, follow_redirects=False)
    except httpx.HTTPError as exc:
        raise PelicanError(f"Cannot contact Pelican director: {exc}") from exc

    if response.status_code >= 400:
        raise PelicanError(f"Error finding Pelican Origin: {response_detail(response)}")
    return response.headers


def resolve(
    url: str,
    settings: AppSettings | None = None,
    client: httpx.Client | None = None,
) -> PelicanInfo:
    """Resolve a logical `osdf://` URL to its namespace and origins.

    Results are memoized per (director, path) for the lifetime of the process.
    """

    settings = settings or AppSettings()
    path = split_osdf_url(url)
    key = (settings.director_url, path)
    if key in _CACHE:
        return _CACHE[key]

    if client is None:
        with build_client(settings) as own_client:
            headers = _fetch_director_headers(own_client, settings.director_url, path)
    else:
        headers = _fetch_director_headers(client, settings.director_url, path)

    links = headers.get("link")
    if links is None:
        raise PelicanError("No link header when locating origins")
    origins = parse_link_header(links)
    logger.info("origin urls: %s", origins)

    namespace_header = headers.get("x-pelican-namespace")
    if namespace_header is None:
        raise PelicanError("No x-pelican-namespace header when locating origins")
    namespace = parse_namespace_header(namespace_header)
    logger.info("pelican namespace: %s", namespace)

    info = PelicanInfo(origins=origins, namespace=namespace)
    _CACHE[key] = info
    return info
