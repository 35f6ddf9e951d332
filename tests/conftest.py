"""Pytest fixtures shared by the wallet RPC test suite."""

from typing import Any, Callable, List

import httpx
import pytest

from walletrpc.client import WalletClient
from walletrpc.config import WalletEndpoint

RPC_URL = "http://127.0.0.1:18332/"
RPC_USER = "pooluser"
RPC_PASS = "poolpass"


def rpc_success(result: Any, status: int = 200) -> httpx.Response:
    return httpx.Response(status, json={"id": 1, "result": result, "error": None})


def rpc_error(code: int, message: str, status: int = 200) -> httpx.Response:
    return httpx.Response(status, json={"id": 1, "result": None, "error": {"code": code, "message": message}})


@pytest.fixture
def endpoint() -> WalletEndpoint:
    return WalletEndpoint(url=RPC_URL, username=RPC_USER, password=RPC_PASS)


@pytest.fixture
def seen_requests() -> List[httpx.Request]:
    return []


@pytest.fixture
def make_client(endpoint: WalletEndpoint, seen_requests: List[httpx.Request]):
    """Build a WalletClient whose network layer is the given request handler."""

    def _make(handler: Callable[[httpx.Request], httpx.Response], **kwargs: Any) -> WalletClient:
        def _recording(request: httpx.Request) -> httpx.Response:
            seen_requests.append(request)
            return handler(request)

        return WalletClient(endpoint, http_transport=httpx.MockTransport(_recording), **kwargs)

    return _make


@pytest.fixture
def clean_wallet_env(monkeypatch) -> None:
    # setenv first so teardown also removes values loaded from .env files.
    for key in ("WALLET_RPC_URL", "WALLET_RPC_USER", "WALLET_RPC_PASSWORD", "WALLET_RPC_COOKIE_FILE"):
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def no_env_proxies(monkeypatch) -> None:
    # Local test servers must be reached directly.
    for key in ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy"):
        monkeypatch.delenv(key, raising=False)
