from __future__ import annotations

import json
import secrets
from decimal import Decimal
from typing import Any, List


def _swap_decimals(obj: Any, marker: str, digits: List[str]) -> Any:
    if isinstance(obj, Decimal):
        if not obj.is_finite():
            raise ValueError(f"Cannot encode non-finite amount {obj} as JSON")
        digits.append(format(obj, "f"))
        return f"{marker}{len(digits) - 1}@@"
    if isinstance(obj, dict):
        return {k: _swap_decimals(v, marker, digits) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_swap_decimals(v, marker, digits) for v in obj]
    return obj


def dumps_compact(obj: Any) -> str:
    """
    Compact JSON encoding that writes Decimal values as exact JSON numbers.

    Wallet daemons expect amounts as numbers, and going through float would drop
    digits, so each Decimal is swapped for a one-off string marker and the marker
    is then replaced by the decimal's own digits.
    """
    marker = f"@@dec-{secrets.token_hex(8)}-"
    digits: List[str] = []
    text = json.dumps(_swap_decimals(obj, marker, digits), ensure_ascii=False, separators=(",", ":"))
    for i, number in enumerate(digits):
        text = text.replace(f'"{marker}{i}@@"', number, 1)
    return text


def pretty_print(text: str) -> str:
    """Indent a JSON document for trace output; non-JSON text comes back unchanged."""
    try:
        v = json.loads(text)
    except (TypeError, ValueError):
        return text
    return json.dumps(v, ensure_ascii=False, indent=2)
