"""Object transfer orchestration.

Composes the three steps linearly: locate credentials, resolve the URL
through the director, move the bytes. The CLI only builds a
`TransferRequest` and delegates here, which keeps the flow testable without
Typer and reusable from other entry points.
"""

from __future__ import annotations

import logging
import random

import httpx

from dumb_pelican_client.adapters import director, transfer
from dumb_pelican_client.adapters.condor_creds import load_condor_credentials
from dumb_pelican_client.adapters.http_client import build_client
from dumb_pelican_client.core.config import AppSettings
from dumb_pelican_client.core.credentials import CredentialStore
from dumb_pelican_client.core.domain.models import TransferRequest

logger = logging.getLogger(__name__)


def run_transfer(
    request: TransferRequest,
    settings: AppSettings | None = None,
    *,
    client: httpx.Client | None = None,
    credentials: CredentialStore | None = None,
    retries: int | None = None,
    rng: random.Random | None = None,
) -> str:
    """Execute one `object get`/`object put`. Returns the endpoint used."""

    settings = settings or AppSettings()
    retries = settings.retries if retries is None else retries

    if credentials is None:
        credentials = load_condor_credentials(settings)

    own_client = client is None
    http = client or build_client(settings)
    try:
        info = director.resolve(request.url, settings, http)
        cred = credentials.select(request, info)
        endpoint = transfer.execute(request, cred, info, http, retries=retries, rng=rng)
    finally:
        if own_client:
            http.close()

    logger.info("%s %s complete via %s", request.verb.value, request.url, endpoint)
    return endpoint
