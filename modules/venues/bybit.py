"""
modules/venues/bybit.py
-----------------------
Bybit v5 spot.

Signing payload is ``timestamp + apiKey + recvWindow + query + body`` with a
fixed 10 s receive window. Order creation sends a JSON body, lookups a form
query. Every answer is wrapped in ``{retCode, retMsg, result, ...}``; a
non-zero ``retCode`` is a rejection even when the HTTP status is 200.
"""
from __future__ import annotations

import time
from decimal import Decimal
from typing import Callable, Dict, Tuple

from models.errors import AuthError, DecodeError, EmptyResultError
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
from utils.signing import compact_json, form_encode, hmac_sha256, stamp

VENUE = "bybit"
CREATE_PATH = "/v5/order/create"
REALTIME_PATH = "/v5/order/realtime"
RECV_WINDOW = 10000
CATEGORY = "spot"

SIDES = {Side.BUY: "Buy", Side.SELL: "Sell"}


def symbol(base: str, quote: str) -> str:
    return f"{base}{quote}"


class BybitEncoder:
    def place_order(self, side: Side, request: TradeRequest, timestamp: int) -> EncodedRequest:
        body = compact_json({
            "category": CATEGORY,
            "symbol": symbol(request.base, request.quote),
            "side": SIDES[side],
            "qty": request.amount,
            "orderType": "Market",
            "orderLinkId": request.client_order_id,
        })
        return EncodedRequest("POST", CREATE_PATH, body=body)

    def order_detail(self, request: OrderDetailRequest, timestamp: int) -> EncodedRequest:
        query = form_encode([
            ("category", CATEGORY),
            ("orderId", request.order_id),
            ("orderLinkId", request.client_order_id),
        ])
        return EncodedRequest("GET", REALTIME_PATH, query=query)


class BybitSigner:
    receive_window = RECV_WINDOW

    def __init__(self, config: VenueConfig, clock: Callable[[], float] = time.time) -> None:
        self._api_key = config.api_key
        self._api_secret = config.api_secret
        self._clock = clock

    def timestamp(self) -> int:
        return stamp(self._clock)

    def signature(self, ctx: SigningContext, encoded: EncodedRequest) -> str:
        payload = f"{ctx.timestamp}{self._api_key}{ctx.receive_window}{encoded.query}{encoded.body}"
        return hmac_sha256(self._api_secret, payload)

    def authorize(self, ctx: SigningContext, encoded: EncodedRequest) -> Tuple[str, Dict[str, str]]:
        return encoded.query, {
            "X-BAPI-API-KEY": self._api_key,
            "X-BAPI-TIMESTAMP": str(ctx.timestamp),
            "X-BAPI-SIGN": self.signature(ctx, encoded),
            "X-BAPI-SIGN-TYPE": "2",
            "X-BAPI-RECV-WINDOW": str(ctx.receive_window),
        }


def executed_quote(order: dict) -> str:
    """Filled quote value of one order record.

    ``cumExecQty × avgPrice`` when an average price is reported; Bybit leaves
    ``avgPrice`` empty for some order states, then ``cumExecValue`` is used
    as-is. The product is rendered fixed-point, never in exponent form.
    """
    avg_price = order.get("avgPrice") or ""
    if avg_price != "":
        return format(Decimal(order["cumExecQty"]) * Decimal(avg_price), "f")
    value = text_field(VENUE, order, "cumExecValue")
    Decimal(value)
    return value


class BybitNormalizer:
    def _result(self, payload: dict) -> dict:
        ret_code = payload.get("retCode", 0)
        if ret_code != 0:
            raise AuthError(200, ret_code, str(payload.get("retMsg", "")), str(payload), venue=VENUE)
        result = payload.get("result")
        if not isinstance(result, dict):
            raise DecodeError("result missing from response", str(payload), venue=VENUE)
        return result

    def trade_response(self, payload: dict) -> TradeResponse:
        order_id = self._result(payload).get("orderId")
        if not order_id:
            raise DecodeError("orderId missing from order response", str(payload), venue=VENUE)
        return TradeResponse(order_id=str(order_id))

    def order_detail(self, payload: dict) -> OrderDetailResponse:
        orders = self._result(payload).get("list") or []
        if not orders:
            raise EmptyResultError("no order matched the lookup", str(payload), venue=VENUE)
        order = orders[0]
        return OrderDetailResponse(
            status=text_field(VENUE, order, "orderStatus"),
            executed_base=text_field(VENUE, order, "cumExecQty"),
            executed_quote=executed_quote(order),
        )

    def error(self, status_code: int, body: str):
        return status_error(VENUE, status_code, body, "retCode", "retMsg")


def bybit_client(
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
        encoder=BybitEncoder(),
        signer=BybitSigner(config, clock),
        normalizer=BybitNormalizer(),
        session=session,
        timeout=timeout,
        logger=logger,
    )
