"""
modules/trader.py
-----------------
The trading contract every venue satisfies, plus the generic adapter shell
that drives one round trip:

    encoder  → canonical query/body for the operation
    signer   → signature + auth headers over exactly those strings
    session  → one HTTP call, no retries
    normalizer → venue JSON → TradeResponse / OrderDetailResponse

Venues plug in their own encoder, signer and normalizer; the Buy/Sell/lookup
plumbing below is shared.
"""
from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Union

import requests

from models.errors import AuthError, DecodeError, HTTPStatusError, TradingError, TransportError
from models.trading import (
    EncodedRequest,
    OrderDetailRequest,
    OrderDetailResponse,
    Side,
    SigningContext,
    TradeRequest,
    TradeResponse,
)
from utils.config_manager import VenueConfig

Timeout = Union[None, float, tuple]


class TradingClient(ABC):
    """Capability interface the rest of the system depends on."""

    @abstractmethod
    def sell(self, request: TradeRequest) -> TradeResponse:
        """Market-sell ``request.amount`` of base."""
        raise NotImplementedError

    @abstractmethod
    def buy(self, request: TradeRequest) -> TradeResponse:
        """Market-buy ``request.amount`` of base."""
        raise NotImplementedError

    @abstractmethod
    def get_order_detail(self, request: OrderDetailRequest) -> OrderDetailResponse:
        raise NotImplementedError


def parse_json(body: str) -> Optional[Any]:
    """Decoded JSON or ``None`` when the body is not JSON."""
    try:
        return json.loads(body)
    except ValueError:
        return None


def status_error(
    venue: str, status_code: int, body: str, code_key: str, message_key: str
) -> TradingError:
    """AuthError when the body carries ``code_key``, else HTTPStatusError."""
    payload = parse_json(body)
    if isinstance(payload, dict) and code_key in payload:
        return AuthError(
            status_code,
            payload.get(code_key),
            str(payload.get(message_key, "")),
            body,
            venue=venue,
        )
    return HTTPStatusError(status_code, body, venue=venue)


def text_field(venue: str, record: dict, key: str) -> str:
    """``record[key]``, which must be a JSON string; null or numbers fail decoding."""
    value = record[key]
    if not isinstance(value, str):
        raise DecodeError(f"{key} is not a string: {value!r}", str(record), venue=venue)
    return value


class ExchangeClient(TradingClient):
    """One venue, one set of credentials, one pooled session.

    Holds no per-call state, so a single instance can be shared between
    threads.
    """

    def __init__(
        self,
        venue: str,
        config: VenueConfig,
        *,
        encoder,
        signer,
        normalizer,
        session: Optional[requests.Session] = None,
        timeout: Timeout = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.venue = venue
        self.config = config
        self.encoder = encoder
        self.signer = signer
        self.normalizer = normalizer
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.logger = logger or logging.getLogger(f"{__name__}.{venue}")

    # ------------------------------------------------------------------ #
    # Trading contract
    # ------------------------------------------------------------------ #
    def sell(self, request: TradeRequest) -> TradeResponse:
        return self._place_order(Side.SELL, request)

    def buy(self, request: TradeRequest) -> TradeResponse:
        return self._place_order(Side.BUY, request)

    def get_order_detail(self, request: OrderDetailRequest) -> OrderDetailResponse:
        timestamp = self.signer.timestamp()
        encoded = self.encoder.order_detail(request, timestamp)
        payload = self._send(encoded, timestamp)
        return self._normalize(self.normalizer.order_detail, payload)

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    def _place_order(self, side: Side, request: TradeRequest) -> TradeResponse:
        timestamp = self.signer.timestamp()
        encoded = self.encoder.place_order(side, request, timestamp)
        payload = self._send(encoded, timestamp)
        return self._normalize(self.normalizer.trade_response, payload)

    def _send(self, encoded: EncodedRequest, timestamp: int) -> Any:
        ctx = SigningContext(
            timestamp=timestamp,
            method=encoded.method,
            path=encoded.path,
            receive_window=self.signer.receive_window,
        )
        query, auth_headers = self.signer.authorize(ctx, encoded)

        # pre-encoded strings go on the wire untouched, so the signed bytes are the sent bytes
        url = self.config.url.rstrip("/") + encoded.path
        if query:
            url = f"{url}?{query}"
        headers: Dict[str, str] = {"Content-Type": "application/json"}
        headers.update(auth_headers)

        self.logger.debug("%s %s %s", self.venue.upper(), encoded.method, encoded.path)
        try:
            resp = self.session.request(
                encoded.method,
                url,
                data=encoded.body.encode() if encoded.body else None,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            self.logger.warning("%s %s %s failed: %s", self.venue, encoded.method, encoded.path, exc)
            raise TransportError(
                f"{encoded.method} {encoded.path} failed: {exc}", venue=self.venue
            ) from exc

        body = resp.text
        if resp.status_code != 200:
            self.logger.warning(
                "%s %s %s -> HTTP %s", self.venue, encoded.method, encoded.path, resp.status_code
            )
            raise self.normalizer.error(resp.status_code, body)

        payload = parse_json(body)
        if payload is None:
            raise DecodeError(f"response is not JSON: {body!r}", body, venue=self.venue)
        return payload

    def _normalize(self, fn, payload: Any):
        try:
            return fn(payload)
        except TradingError:
            raise
        except (AttributeError, KeyError, IndexError, TypeError, ValueError, ArithmeticError) as exc:
            raise DecodeError(
                f"unexpected {self.venue} response: {exc!r}", json.dumps(payload), venue=self.venue
            ) from exc
