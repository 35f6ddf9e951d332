from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from walletrpc.env import load_env_file


DEFAULT_RPC_URL = "http://127.0.0.1:8332"

# Fixed send/receive budget for a single round trip.
REQUEST_TIMEOUT_SEC = 2.0


def load_default_env() -> None:
    # Local overrides live next to wherever the service is started from.
    load_env_file(Path.cwd() / ".env", override=False)


@dataclass(frozen=True)
class WalletEndpoint:
    url: str
    username: str
    password: str = field(repr=False)

    def __post_init__(self) -> None:
        if not self.url:
            raise ValueError("WalletEndpoint.url must not be empty")

    @property
    def auth(self) -> Tuple[str, str]:
        return (self.username, self.password)


def read_cookie_file(path: Path) -> Tuple[str, str]:
    """Read `user:password` credentials written by the wallet daemon."""
    try:
        content = path.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        raise ValueError(f"Cookie file not found at {path} -- check WALLET_RPC_COOKIE_FILE")
    except PermissionError:
        raise ValueError(f"Permission denied reading cookie file at {path}")
    if ":" not in content:
        raise ValueError(f"Malformed cookie file at {path}: expected 'user:password'")
    user, password = content.split(":", 1)
    return user, password


def rpc_credentials() -> Tuple[str, str]:
    cookie = os.getenv("WALLET_RPC_COOKIE_FILE")
    if cookie:
        return read_cookie_file(Path(cookie).expanduser())
    user = os.getenv("WALLET_RPC_USER")
    if not user:
        raise RuntimeError("Missing WALLET_RPC_USER in env/.env")
    password = os.getenv("WALLET_RPC_PASSWORD")
    if password is None:
        raise RuntimeError("Missing WALLET_RPC_PASSWORD in env/.env")
    return user, password


def endpoint_from_env(env_file: Optional[Path] = None) -> WalletEndpoint:
    if env_file is not None:
        load_env_file(env_file, override=False)
    else:
        load_default_env()
    url = os.getenv("WALLET_RPC_URL") or DEFAULT_RPC_URL
    user, password = rpc_credentials()
    return WalletEndpoint(url=url, username=user, password=password)
