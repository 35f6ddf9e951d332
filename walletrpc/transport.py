from __future__ import annotations

import time
from dataclasses import dataclass
from typing import List, Optional

import httpx
from loguru import logger

from walletrpc.config import REQUEST_TIMEOUT_SEC, WalletEndpoint
from walletrpc.errors import (
    WalletRpcError,
    classify_body_error,
    classify_http_status,
    classify_transport_error,
)
from walletrpc.json_utils import pretty_print
from walletrpc.models import WalletRequest


# Wallet daemons reject bodies they cannot identify as JSON-RPC.
CONTENT_TYPE = "application/json-rpc"


class _BorrowedTransport(httpx.BaseTransport):
    """Lends a caller-owned transport to a per-call client without closing it."""

    def __init__(self, inner: httpx.BaseTransport):
        self._inner = inner

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        return self._inner.handle_request(request)

    def close(self) -> None:
        pass


@dataclass(frozen=True)
class HttpTransport:
    """
    Sends one request envelope per HTTP POST and returns the raw response body.

    Every send opens and closes its own httpx.Client, so nothing is pooled and
    concurrent sends share only the frozen endpoint. `timeout_sec` bounds each
    network phase and also the whole exchange up to the last body byte.

    `http_transport` replaces the network layer (tests use httpx.MockTransport).
    It stays owned by the caller: sends never close it, and whatever connection
    reuse it does is its own.
    """

    endpoint: WalletEndpoint
    timeout_sec: float = REQUEST_TIMEOUT_SEC
    http_transport: Optional[httpx.BaseTransport] = None

    def _client(self) -> httpx.Client:
        transport = _BorrowedTransport(self.http_transport) if self.http_transport is not None else None
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout_sec),
            auth=httpx.BasicAuth(self.endpoint.username, self.endpoint.password),
            transport=transport,
        )

    def send(self, request: WalletRequest) -> str:
        method = request.method
        deadline = time.monotonic() + self.timeout_sec
        try:
            body = request.to_bytes()
            with self._client() as client:
                with client.stream(
                    "POST",
                    self.endpoint.url,
                    content=body,
                    headers={"Content-Type": CONTENT_TYPE},
                ) as resp:
                    text = self._read_body(resp, deadline, method)
        except WalletRpcError:
            raise
        except Exception as e:
            raise WalletRpcError(classify_transport_error(e, method=method)) from e

        logger.opt(lazy=True).trace("rpc-response {}: {}", lambda: method, lambda: pretty_print(text))
        return text

    def _read_body(self, resp: httpx.Response, deadline: float, method: str) -> str:
        try:
            chunks: List[bytes] = []
            self._check_deadline(resp, deadline)
            for chunk in resp.iter_bytes():
                chunks.append(chunk)
                self._check_deadline(resp, deadline)
            text: Optional[str] = b"".join(chunks).decode(resp.encoding or "utf-8", errors="replace")
        except Exception as e:
            if resp.is_success:
                raise WalletRpcError(classify_body_error(e, method=method)) from e
            # The status alone classifies a failed call; its body is only diagnostics.
            text = None

        if not resp.is_success:
            try:
                resp.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise WalletRpcError(classify_http_status(e, method=method, body=text)) from e
        return text or ""

    def _check_deadline(self, resp: httpx.Response, deadline: float) -> None:
        if time.monotonic() > deadline:
            raise httpx.ReadTimeout(
                f"Response not complete within {self.timeout_sec}s",
                request=resp.request,
            )
