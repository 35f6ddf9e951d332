from __future__ import annotations

from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from walletrpc.json_utils import dumps_compact


T = TypeVar("T")


class RpcErrorObject(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    code: int
    message: str = ""


class WalletRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: int
    method: str = Field(min_length=1)
    params: List[Any] = Field(default_factory=list)

    def to_bytes(self) -> bytes:
        payload = {"id": self.id, "method": self.method, "params": list(self.params)}
        return dumps_compact(payload).encode("utf-8")


class WalletResponse(BaseModel, Generic[T]):
    # Daemons add "jsonrpc" and similar keys; only the three below matter.
    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = None
    result: Optional[T] = None
    error: Optional[RpcErrorObject] = None
