"""
modules/venues/binance.py
-------------------------
Binance spot: form-encoded parameters, ``signature`` appended as the last
query parameter, API key in ``X-MBX-APIKEY``.

    POST /api/v3/order   params in the body, signature in the query
    GET  /api/v3/order   params and signature in the query
"""
from __future__ import annotations

import time
from typing import Callable, Dict, Tuple

from models.errors import DecodeError
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
from utils.signing import form_encode, hmac_sha256, stamp

VENUE = "binance"
ORDER_PATH = "/api/v3/order"


def symbol(base: str, quote: str) -> str:
    return f"{base}{quote}"


class BinanceEncoder:
    def place_order(self, side: Side, request: TradeRequest, timestamp: int) -> EncodedRequest:
        body = form_encode([
            ("symbol", symbol(request.base, request.quote)),
            ("side", side.value),
            ("type", "MARKET"),
            ("quantity", request.amount),
            ("newClientOrderId", request.client_order_id),
            ("timestamp", str(timestamp)),
        ])
        return EncodedRequest("POST", ORDER_PATH, body=body)

    def order_detail(self, request: OrderDetailRequest, timestamp: int) -> EncodedRequest:
        query = form_encode([
            ("symbol", symbol(request.base, request.quote)),
            ("origClientOrderId", request.client_order_id),
            ("orderId", request.order_id),
            ("timestamp", str(timestamp)),
        ])
        return EncodedRequest("GET", ORDER_PATH, query=query)


class BinanceSigner:
    receive_window = None

    def __init__(self, config: VenueConfig, clock: Callable[[], float] = time.time) -> None:
        self._api_key = config.api_key
        self._api_secret = config.api_secret
        self._clock = clock

    def timestamp(self) -> int:
        return stamp(self._clock)

    def signature(self, ctx: SigningContext, encoded: EncodedRequest) -> str:
        return hmac_sha256(self._api_secret, encoded.query + encoded.body)

    def authorize(self, ctx: SigningContext, encoded: EncodedRequest) -> Tuple[str, Dict[str, str]]:
        sig = self.signature(ctx, encoded)
        query = f"{encoded.query}&signature={sig}" if encoded.query else f"signature={sig}"
        return query, {"X-MBX-APIKEY": self._api_key}


class BinanceNormalizer:
    def trade_response(self, payload: dict) -> TradeResponse:
        order_id = payload.get("orderId")
        if order_id is None:
            raise DecodeError("orderId missing from order response", str(payload), venue=VENUE)
        return TradeResponse(order_id=str(order_id))

    def order_detail(self, payload: dict) -> OrderDetailResponse:
        return OrderDetailResponse(
            status=text_field(VENUE, payload, "status"),
            executed_base=text_field(VENUE, payload, "executedQty"),
            executed_quote=text_field(VENUE, payload, "cummulativeQuoteQty"),
        )

    def error(self, status_code: int, body: str):
        # {"code": -2010, "msg": "Account has insufficient balance ..."}
        return status_error(VENUE, status_code, body, "code", "msg")


def binance_client(
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
        encoder=BinanceEncoder(),
        signer=BinanceSigner(config, clock),
        normalizer=BinanceNormalizer(),
        session=session,
        timeout=timeout,
        logger=logger,
    )
