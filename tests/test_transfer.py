"""Tests for the origin GET/PUT step."""

from __future__ import annotations

import random
from pathlib import Path

import httpx
import pytest

from dumb_pelican_client.adapters.transfer import execute
from dumb_pelican_client.core.domain.models import Credential, PelicanInfo, TransferRequest, Verb
from dumb_pelican_client.core.errors import TransferError
from tests.conftest import make_client

TEST_DATA = b"somebodydata"
CRED = Credential(access_token="token", scope=["storage.read:/read/scope", "storage.modify:/write/scope"])


def _info(*origins: str) -> PelicanInfo:
    return PelicanInfo(origins=list(origins), namespace="/namespace")


def test_execute_get_writes_file(tmp_path: Path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert request.url.path == "/read/scope/file.bin"
        assert request.headers["authorization"] == "Bearer token"
        return httpx.Response(200, content=TEST_DATA)

    target = tmp_path / "out.bin"
    req = TransferRequest(url="osdf:///namespace/read/scope/file.bin", filename=target, verb=Verb.GET)
    with make_client(handler) as client:
        used = execute(req, CRED, _info("http://origin/"), client)

    assert used == "http://origin/read/scope/file.bin"
    assert target.read_bytes() == TEST_DATA


def test_execute_put_streams_file_with_length(tmp_path: Path) -> None:
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["auth"] = request.headers["authorization"]
        seen["length"] = request.headers.get("content-length")
        seen["body"] = request.read()
        return httpx.Response(201)

    source = tmp_path / "in.bin"
    source.write_bytes(TEST_DATA)
    req = TransferRequest(url="osdf:///namespace/write/scope/file.bin", filename=source, verb=Verb.PUT)
    with make_client(handler) as client:
        execute(req, CRED, _info("http://origin"), client)

    assert seen == {
        "method": "PUT",
        "path": "/write/scope/file.bin",
        "auth": "Bearer token",
        "length": str(len(TEST_DATA)),
        "body": TEST_DATA,
    }


def test_execute_falls_back_to_next_origin(tmp_path: Path) -> None:
    hosts: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        hosts.append(request.url.host)
        if request.url.host == "bad":
            return httpx.Response(503, text="overloaded")
        return httpx.Response(200, content=TEST_DATA)

    target = tmp_path / "out.bin"
    req = TransferRequest(url="osdf:///namespace/read/scope/file.bin", filename=target, verb=Verb.GET)
    with make_client(handler) as client:
        used = execute(req, CRED, _info("http://bad", "http://good"), client, retries=1)

    assert used == "http://good/read/scope/file.bin"
    assert hosts[-1] == "good"
    assert target.read_bytes() == TEST_DATA


def test_execute_connection_error_falls_back(tmp_path: Path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "down":
            raise httpx.ConnectError("refused", request=request)
        return httpx.Response(200, content=TEST_DATA)

    target = tmp_path / "out.bin"
    req = TransferRequest(url="osdf:///namespace/read/scope/file.bin", filename=target, verb=Verb.GET)
    with make_client(handler) as client:
        execute(req, CRED, _info("http://down", "http://up"), client, retries=1)

    assert target.read_bytes() == TEST_DATA


def test_execute_respects_retry_budget(tmp_path: Path) -> None:
    calls = 0

    def handler(request: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(500, text="broken")

    target = tmp_path / "out.bin"
    req = TransferRequest(url="osdf:///namespace/read/scope/file.bin", filename=target, verb=Verb.GET)
    with make_client(handler) as client:
        with pytest.raises(TransferError, match="status 500, body broken"):
            execute(req, CRED, _info("http://a", "http://b", "http://c"), client, retries=0)

    assert calls == 1
    assert not target.exists()


def test_execute_all_origins_fail(tmp_path: Path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403)

    source = tmp_path / "in.bin"
    source.write_bytes(TEST_DATA)
    req = TransferRequest(url="osdf:///namespace/write/scope/file.bin", filename=source, verb=Verb.PUT)
    with make_client(handler) as client:
        with pytest.raises(TransferError, match="status 403, body <no_body>"):
            execute(req, CRED, _info("http://a", "http://b"), client, retries=5, rng=random.Random(0))


def test_execute_put_missing_file_does_not_contact_origin(tmp_path: Path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("origin must not be contacted")

    req = TransferRequest(url="osdf:///namespace/write/scope/f", filename=tmp_path / "nope", verb=Verb.PUT)
    with make_client(handler) as client:
        with pytest.raises(TransferError, match="Local file not found"):
            execute(req, CRED, _info("http://origin"), client)


class _CutStream(httpx.SyncByteStream):
    """Body that yields some bytes and then drops the connection."""

    def __iter__(self):
        yield b"partial-"
        raise httpx.ReadError("cut")


def test_execute_get_removes_partial_file_when_stream_breaks(tmp_path: Path) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, stream=_CutStream())

    target = tmp_path / "out.bin"
    req = TransferRequest(url="osdf:///namespace/read/scope/file.bin", filename=target, verb=Verb.GET)
    with make_client(handler) as client:
        with pytest.raises(TransferError, match="cut"):
            execute(req, CRED, _info("http://origin"), client, retries=0)

    assert not target.exists()


def test_execute_get_recovers_after_mid_stream_failure(tmp_path: Path) -> None:
    hosts: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        hosts.append(request.url.host)
        if request.url.host == "flaky":
            return httpx.Response(200, stream=_CutStream())
        return httpx.Response(200, content=TEST_DATA)

    target = tmp_path / "out.bin"
    req = TransferRequest(url="osdf:///namespace/read/scope/file.bin", filename=target, verb=Verb.GET)
    with make_client(handler) as client:
        used = execute(req, CRED, _info("http://flaky", "http://steady"), client, retries=1)

    assert used == "http://steady/read/scope/file.bin"
    assert hosts[-1] == "steady"
    assert target.read_bytes() == TEST_DATA
