"""Failure taxonomy for wallet RPC calls and the mapping from raw faults onto it."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

import httpx

from walletrpc.models import WalletResponse


T = TypeVar("T")


class ErrorKind(str, Enum):
    INVALID_METHOD = "invalid_method"
    CONNECTION_FAILURE = "connection_failure"
    SERVER_EXECUTION_FAILURE = "server_execution_failure"
    UNKNOWN_TRANSPORT_FAILURE = "unknown_transport_failure"
    DESERIALIZATION_FAILURE = "deserialization_failure"
    RPC_ERROR = "rpc_error"


@dataclass(frozen=True)
class WalletRpcFailure:
    kind: ErrorKind
    message: str
    cause: Any = None
    method: Optional[str] = None
    status_code: Optional[int] = None
    raw: Optional[str] = None
    code: Optional[int] = None  # RPC_ERROR only
    rpc_message: Optional[str] = None  # RPC_ERROR only

    def __str__(self) -> str:
        if self.kind is ErrorKind.RPC_ERROR:
            return f"{self.message} (code={self.code}): {self.rpc_message}"
        if self.status_code is not None:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message


class WalletRpcError(RuntimeError):
    def __init__(self, failure: WalletRpcFailure):
        super().__init__(str(failure))
        self.failure = failure

    @property
    def kind(self) -> ErrorKind:
        return self.failure.kind


@dataclass(frozen=True)
class CallResult(Generic[T]):
    """Outcome of a single call: either a decoded value or exactly one failure."""

    value: Optional[T] = None
    failure: Optional[WalletRpcFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: T) -> "CallResult[T]":
        return cls(value=value)

    @classmethod
    def failed(cls, failure: WalletRpcFailure) -> "CallResult[T]":
        return cls(failure=failure)

    def unwrap(self) -> T:
        if self.failure is None:
            return self.value  # type: ignore[return-value]
        cause = self.failure.cause
        if isinstance(cause, BaseException):
            raise WalletRpcError(self.failure) from cause
        raise WalletRpcError(self.failure)


# Faults that happen before a response could be read: dialing, writing the
# request, timeouts in any phase, or the peer breaking HTTP framing.
_CONNECTION_ERRORS = (
    httpx.TimeoutException,
    httpx.ConnectError,
    httpx.WriteError,
    httpx.ProtocolError,
    httpx.ProxyError,
    httpx.UnsupportedProtocol,
    httpx.InvalidURL,
)


def invalid_method(method: Any) -> WalletRpcFailure:
    return WalletRpcFailure(
        kind=ErrorKind.INVALID_METHOD,
        message="RPC method name must be a non-empty string.",
        cause=ValueError(f"invalid method name: {method!r}"),
        method=method if isinstance(method, str) else None,
    )


def classify_transport_error(exc: BaseException, *, method: Optional[str] = None) -> WalletRpcFailure:
    if isinstance(exc, WalletRpcError):
        return exc.failure
    if isinstance(exc, httpx.HTTPStatusError):
        return classify_http_status(exc, method=method)
    if isinstance(exc, httpx.TimeoutException):
        return WalletRpcFailure(
            kind=ErrorKind.CONNECTION_FAILURE,
            message="Timed out talking to the wallet daemon.",
            cause=exc,
            method=method,
        )
    if isinstance(exc, _CONNECTION_ERRORS):
        return WalletRpcFailure(
            kind=ErrorKind.CONNECTION_FAILURE,
            message="Unable to connect to the wallet daemon.",
            cause=exc,
            method=method,
        )
    return WalletRpcFailure(
        kind=ErrorKind.UNKNOWN_TRANSPORT_FAILURE,
        message="An unknown exception occurred while trying to read the JSON response.",
        cause=exc,
        method=method,
    )


def classify_http_status(
    exc: httpx.HTTPStatusError, *, method: Optional[str] = None, body: Optional[str] = None
) -> WalletRpcFailure:
    response = exc.response
    if body is None:
        try:
            body = response.text
        except httpx.ResponseNotRead:
            body = None
    if response.status_code == httpx.codes.INTERNAL_SERVER_ERROR:
        return WalletRpcFailure(
            kind=ErrorKind.SERVER_EXECUTION_FAILURE,
            message=(
                "The RPC request was either not understood by the wallet daemon "
                "or there was a problem executing the request."
            ),
            cause=exc,
            method=method,
            status_code=response.status_code,
            raw=body,
        )
    return WalletRpcFailure(
        kind=ErrorKind.UNKNOWN_TRANSPORT_FAILURE,
        message="An unknown HTTP error occurred while trying to read the JSON response.",
        cause=exc,
        method=method,
        status_code=response.status_code,
        raw=body,
    )


def classify_body_error(exc: BaseException, *, method: Optional[str] = None) -> WalletRpcFailure:
    """Classify a fault raised after the status line arrived, while reading the body."""
    if isinstance(exc, WalletRpcError):
        return exc.failure
    if isinstance(exc, httpx.TimeoutException):
        return classify_transport_error(exc, method=method)
    return WalletRpcFailure(
        kind=ErrorKind.UNKNOWN_TRANSPORT_FAILURE,
        message="An unknown exception occurred while trying to read the JSON response.",
        cause=exc,
        method=method,
    )


def map_response_error(response: WalletResponse[Any], *, method: Optional[str] = None) -> Optional[WalletRpcFailure]:
    """Return an RPC_ERROR failure when the envelope reports one; the error wins over any result."""
    err = response.error
    if err is None:
        return None
    return WalletRpcFailure(
        kind=ErrorKind.RPC_ERROR,
        message=f"Wallet daemon returned an error for {method or 'request'}",
        cause=err,
        method=method,
        code=err.code,
        rpc_message=err.message,
    )
