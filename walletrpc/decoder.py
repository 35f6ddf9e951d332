from __future__ import annotations

from typing import Any, Optional, Type, TypeVar

from pydantic import TypeAdapter, ValidationError

from walletrpc.errors import ErrorKind, WalletRpcError, WalletRpcFailure
from walletrpc.models import WalletResponse


T = TypeVar("T")


def decode_response(raw: str, result_type: Type[T] = Any, *, method: Optional[str] = None) -> WalletResponse[T]:  # type: ignore[assignment]
    """
    Parse a raw response body into a response envelope whose `result` is validated
    against `result_type`.

    The envelope shape is checked first. When it carries an error object the result
    is left as sent, unvalidated, since the error decides the outcome. Otherwise the
    result must fit `result_type`; a null or missing result only fits types that
    admit None.

    Malformed JSON, a body that is not an envelope object, and a result of the wrong
    shape all raise WalletRpcError(DESERIALIZATION_FAILURE) carrying the raw text.
    """
    try:
        envelope = WalletResponse[Any].model_validate_json(raw)
        if envelope.error is not None:
            return WalletResponse[result_type].model_construct(  # type: ignore[valid-type]
                id=envelope.id, result=envelope.result, error=envelope.error
            )
        result = TypeAdapter(result_type).validate_python(envelope.result)
    except ValidationError as e:
        raise WalletRpcError(
            WalletRpcFailure(
                kind=ErrorKind.DESERIALIZATION_FAILURE,
                message="There was a problem deserializing the response from the wallet daemon.",
                cause=e,
                method=method,
                raw=raw,
            )
        ) from e
    return WalletResponse[result_type].model_construct(id=envelope.id, result=result, error=None)  # type: ignore[valid-type]
