"""Object GET/PUT against Pelican origins.

One request per attempt, bearer-authenticated, streamed in both
directions. If an origin fails we move to the next candidate; there is no
backoff and no parallelism.
"""

from __future__ import annotations

import logging
import random
from pathlib import Path

import httpx

from dumb_pelican_client.adapters.http_client import response_detail
from dumb_pelican_client.core.domain.models import Credential, PelicanInfo, TransferRequest, Verb
from dumb_pelican_client.core.errors import TransferError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


class _OriginFailed(Exception):
    """One origin attempt failed; the next candidate may still succeed."""


def _remove_partial(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError:
        logger.warning("could not remove partial file %s", path)


def _get(client: httpx.Client, url: str, headers: dict[str, str], filename: Path) -> None:
    try:
        with client.stream("GET", url, headers=headers) as response:
            if not response.is_success:
                response.read()
                raise _OriginFailed(f"Error getting file. {response_detail(response)}")
            try:
                with filename.open("wb") as fh:
                    for chunk in response.iter_bytes(CHUNK_SIZE):
                        fh.write(chunk)
            except httpx.HTTPError:
                _remove_partial(filename)
                raise
            except OSError as exc:
                _remove_partial(filename)
                raise TransferError(f"Error writing {filename}: {exc}") from exc
    except httpx.HTTPError as exc:
        raise _OriginFailed(f"Error getting file: {exc}") from exc


def _put(client: httpx.Client, url: str, headers: dict[str, str], filename: Path) -> None:
    try:
        size = filename.stat().st_size
        fh = filename.open("rb")
    except OSError as exc:
        raise TransferError(f"Error reading {filename}: {exc}") from exc

    with fh:
        try:
            response = client.put(
                url,
                content=fh,
                headers={**headers, "Content-Length": str(size)},
            )
        except httpx.HTTPError as exc:
            raise _OriginFailed(f"Error putting file: {exc}") from exc
    if not response.is_success:
        raise _OriginFailed(f"Error transferring file. {response_detail(response)}")


def execute(
    request: TransferRequest,
    credential: Credential,
    info: PelicanInfo,
    client: httpx.Client,
    retries: int = 1,
    rng: random.Random | None = None,
) -> str:
    """Run the transfer, trying up to `1 + retries` origins.

    Returns the endpoint URL that succeeded.
    """

    if request.verb is Verb.PUT and not request.filename.is_file():
        raise TransferError(f"Local file not found: {request.filename}")

    headers = {"Authorization": credential.authorization_header()}
    candidates = info.candidate_origins(rng)[: 1 + max(0, retries)]
    last_error = "no origins tried"

    for attempt, origin in enumerate(candidates, start=1):
        final_url = info.endpoint_url(origin, request.url)
        logger.info("using final url %s (attempt %d/%d)", final_url, attempt, len(candidates))
        try:
            if request.verb is Verb.GET:
                _get(client, final_url, headers, request.filename)
            else:
                _put(client, final_url, headers, request.filename)
        except _OriginFailed as exc:
            last_error = str(exc)
            logger.warning("transfer via %s failed: %s", origin, last_error)
            continue
        return final_url

    raise TransferError(last_error)
