from __future__ import annotations

from typing import Any, Iterable

from walletrpc.errors import WalletRpcError, invalid_method
from walletrpc.models import WalletRequest


# One request per connection, so responses never need correlating.
REQUEST_ID = 1


def build_request(method: str, params: Iterable[Any] = ()) -> WalletRequest:
    if not isinstance(method, str) or not method.strip():
        raise WalletRpcError(invalid_method(method))
    return WalletRequest(id=REQUEST_ID, method=method, params=list(params))
