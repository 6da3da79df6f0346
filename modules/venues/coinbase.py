"""
modules/venues/coinbase.py
--------------------------
Coinbase Advanced Trade.

Signing payload is ``timestamp + METHOD + path + body`` with the timestamp in
epoch *seconds* and the path without any query string. Orders are
market-IOC sized in base units; lookups embed the order id in the path.
"""
from __future__ import annotations

import time
from typing import Callable, Dict, Tuple
from urllib.parse import quote

from models.errors import AuthError, DecodeError
from models.trading import (
    EncodedRequest,
    OrderDetailRequest,
    OrderDetailResponse,
    Side,
    SigningContext,
    TradeRequest,
    TradeResponse,
)
from modules.trader import ExchangeClient, status_error, text_field
from utils.config_manager import VenueConfig
from utils.signing import compact_json, hmac_sha256, stamp_seconds

VENUE = "coinbase"
ORDERS_PATH = "/api/v3/brokerage/orders"
HISTORICAL_PATH = "/api/v3/brokerage/orders/historical/{order_id}"


def product_id(base: str, quote_: str) -> str:
    return f"{base}-{quote_}"


class CoinbaseEncoder:
    def place_order(self, side: Side, request: TradeRequest, timestamp: int) -> EncodedRequest:
        body = compact_json({
            "product_id": product_id(request.base, request.quote),
            "side": side.value,
            "order_configuration": {
                "market_market_ioc": {"quote_size": "", "base_size": request.amount},
            },
            "client_order_id": request.client_order_id,
        })
        return EncodedRequest("POST", ORDERS_PATH, body=body)

    def order_detail(self, request: OrderDetailRequest, timestamp: int) -> EncodedRequest:
        # only the venue order id is addressable; the client id is the fallback
        order_id = request.order_id or request.client_order_id
        path = HISTORICAL_PATH.format(order_id=quote(order_id, safe=""))
        return EncodedRequest("GET", path)


class CoinbaseSigner:
    receive_window = None

    def __init__(self, config: VenueConfig, clock: Callable[[], float] = time.time) -> None:
        self._api_key = config.api_key
        self._api_secret = config.api_secret
        self._clock = clock

    def timestamp(self) -> int:
        return stamp_seconds(self._clock)

    def signature(self, ctx: SigningContext, encoded: EncodedRequest) -> str:
        path = ctx.path.split("?")[0]
        return hmac_sha256(self._api_secret, f"{ctx.timestamp}{ctx.method}{path}{encoded.body}")

    def authorize(self, ctx: SigningContext, encoded: EncodedRequest) -> Tuple[str, Dict[str, str]]:
        return encoded.query, {
            "CB-ACCESS-KEY": self._api_key,
            "CB-ACCESS-SIGN": self.signature(ctx, encoded),
            "CB-ACCESS-TIMESTAMP": str(ctx.timestamp),
        }


class CoinbaseNormalizer:
    def trade_response(self, payload: dict) -> TradeResponse:
        if payload.get("success") is False:
            failure = payload.get("error_response") or {}
            raise AuthError(
                200,
                failure.get("error") or payload.get("failure_reason"),
                str(failure.get("message", "")),
                str(payload),
                venue=VENUE,
            )
        order_id = payload.get("order_id") or (payload.get("success_response") or {}).get("order_id")
        if not order_id:
            raise DecodeError("order_id missing from order response", str(payload), venue=VENUE)
        return TradeResponse(order_id=str(order_id))

    def order_detail(self, payload: dict) -> OrderDetailResponse:
        order = payload["order"]
        return OrderDetailResponse(
            status=text_field(VENUE, order, "status"),
            executed_base=text_field(VENUE, order, "filled_size"),
            executed_quote=text_field(VENUE, order, "filled_value"),
        )

    def error(self, status_code: int, body: str):
        # {"error": "INVALID_ARGUMENT", "message": "...", "error_details": "..."}
        return status_error(VENUE, status_code, body, "error", "message")


def coinbase_client(
    config: VenueConfig,
    session=None,
    *,
    timeout=None,
    clock: Callable[[], float] = time.time,
    logger=None,
) -> ExchangeClient:
    return ExchangeClient(
        VENUE,
        config,
        encoder=CoinbaseEncoder(),
        signer=CoinbaseSigner(config, clock),
        normalizer=CoinbaseNormalizer(),
        session=session,
        timeout=timeout,
        logger=logger,
    )
