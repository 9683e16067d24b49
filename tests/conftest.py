"""Shared fixtures: token files, fake director/origins over httpx.MockTransport."""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Callable, Iterator

import httpx
import pytest

from dumb_pelican_client.adapters import director
from dumb_pelican_client.adapters.http_client import build_client
from dumb_pelican_client.core.config import AppSettings

DIRECTOR_URL = "http://director.test/api/v1.0/director/origin"
NAMESPACE = "/ns"


@pytest.fixture(autouse=True)
def _isolate(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    monkeypatch.delenv("_CONDOR_CREDS", raising=False)
    monkeypatch.chdir(tmp_path)
    director.clear_cache()
    yield
    logger = logging.getLogger("dumb_pelican_client")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


def cred_payload(
    *,
    token: str = "token",
    scope: list[str] | str | None = None,
    expires_delta: float = 3600.0,
) -> dict:
    now = time.time()
    return {
        "access_token": token,
        "token_type": "bearer",
        "expires_in": 3600,
        "expires_at": now + expires_delta,
        "scope": scope if scope is not None else ["storage.read:/read/scope", "storage.modify:/write/scope"],
    }


@pytest.fixture
def creds_dir(tmp_path: Path) -> Path:
    path = tmp_path / "creds"
    path.mkdir()
    return path


def write_cred(directory: Path, name: str, payload: dict) -> Path:
    path = directory / name
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


@pytest.fixture
def settings(creds_dir: Path) -> AppSettings:
    return AppSettings(director_url=DIRECTOR_URL, condor_creds_dir=creds_dir, retries=1)


def director_response(origins: list[str], namespace: str = NAMESPACE) -> httpx.Response:
    link = ", ".join(f'<{o}>; rel="duplicate"; pri={i}' for i, o in enumerate(origins, start=1))
    return httpx.Response(
        307,
        headers={
            "Location": origins[0] if origins else "",
            "Link": link,
            "X-Pelican-Namespace": f"namespace={namespace}, require-token=true",
        },
    )


Handler = Callable[[httpx.Request], httpx.Response]


def make_client(handler: Handler, settings: AppSettings | None = None) -> httpx.Client:
    return build_client(settings or AppSettings(), transport=httpx.MockTransport(handler))
