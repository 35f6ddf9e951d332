from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Type, TypeVar, Union

import httpx
from loguru import logger

from walletrpc.config import REQUEST_TIMEOUT_SEC, WalletEndpoint, endpoint_from_env
from walletrpc.decoder import decode_response
from walletrpc.envelope import build_request
from walletrpc.errors import CallResult, WalletRpcError, map_response_error
from walletrpc.transport import HttpTransport


T = TypeVar("T")


class WalletClient:
    """Synchronous JSON-RPC client for a wallet daemon."""

    def __init__(
        self,
        endpoint: Union[WalletEndpoint, str],
        username: Optional[str] = None,
        password: Optional[str] = None,
        *,
        timeout_sec: float = REQUEST_TIMEOUT_SEC,
        http_transport: Optional[httpx.BaseTransport] = None,
    ):
        if isinstance(endpoint, str):
            if username is None or password is None:
                raise ValueError("username and password are required when passing a URL")
            endpoint = WalletEndpoint(url=endpoint, username=username, password=password)
        self.endpoint = endpoint
        self.transport = HttpTransport(endpoint, timeout_sec=timeout_sec, http_transport=http_transport)

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None, **kwargs: Any) -> "WalletClient":
        return cls(endpoint_from_env(env_file), **kwargs)

    def call(self, method: str, *params: Any, result_type: Type[T] = Any) -> CallResult[T]:  # type: ignore[assignment]
        """
        Invoke `method` with positional `params` and decode the result as `result_type`.

        Never raises for classified failures: the returned CallResult holds either the
        decoded value or exactly one WalletRpcFailure with its original cause.
        """
        logger.debug(f"rpc-call: {method}")
        try:
            request = build_request(method, params)
            raw = self.transport.send(request)
            response = decode_response(raw, result_type, method=method)
        except WalletRpcError as e:
            logger.warning(f"rpc-call {method!r} failed: {e.kind.value}: {e}")
            return CallResult.failed(e.failure)

        failure = map_response_error(response, method=method)
        if failure is not None:
            logger.warning(f"rpc-call {method!r} failed: {failure.kind.value}: {failure}")
            return CallResult.failed(failure)
        return CallResult.success(response.result)

    def make_request(self, method: str, *params: Any, result_type: Type[T] = Any) -> T:  # type: ignore[assignment]
        return self.call(method, *params, result_type=result_type).unwrap()

    def make_raw_request(self, method: str, *params: Any) -> str:
        """Send the call and return the undecoded response body."""
        logger.debug(f"rpc-call (raw): {method}")
        return self.transport.send(build_request(method, params))
