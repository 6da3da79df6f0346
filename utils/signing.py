# -------------------------------------------------------------------
#  🔐  utils/signing.py  – helpers shared by every venue signer/encoder.
# -------------------------------------------------------------------
"""Canonical-string and HMAC helpers.

Each venue decides *what* goes into the signing payload; the helpers here
only make sure that
   1. the payload is built deterministically (insertion order, no locale),
   2. the HMAC-SHA256 is computed with a fresh keyed hash on every call, so
      concurrent signers never share a mutable digest object."""
from __future__ import annotations
import hashlib, hmac, json, time
from typing import Any, Callable, Iterable, Mapping, Tuple, Union
from urllib.parse import urlencode

__all__ = ["hmac_sha256", "stamp", "stamp_seconds", "form_encode", "compact_json"]

Pairs = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


def stamp(clock: Callable[[], float] = time.time) -> int:
    """Millisecond timestamp (Binance, Bybit)."""
    return int(clock() * 1000)


def stamp_seconds(clock: Callable[[], float] = time.time) -> int:
    """Second timestamp (Coinbase)."""
    return int(clock())


def hmac_sha256(secret: str, payload: str) -> str:
    """Return the lower-case hex HMAC-SHA256 of ``payload`` keyed by ``secret``."""
    return hmac.new(secret.encode(), payload.encode(), hashlib.sha256).hexdigest()


def form_encode(params: Pairs) -> str:
    """``key=value&key=value`` in the order given; empty values are dropped."""
    items = params.items() if isinstance(params, Mapping) else params
    return urlencode([(k, v) for k, v in items if v != ""])


def compact_json(payload: Any) -> str:
    """JSON without whitespace and with key order preserved."""
    return json.dumps(payload, separators=(",", ":"))
