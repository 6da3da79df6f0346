import json

import pytest

from conftest import FIXED_CLOCK, FIXED_MS, make_response, manual_hmac
from models.errors import AuthError, DecodeError, EmptyResultError, HTTPStatusError
from models.trading import (
    EncodedRequest,
    OrderDetailRequest,
    OrderDetailResponse,
    Side,
    SigningContext,
    TradeRequest,
    TradeResponse,
)
from modules.venues.bybit import BybitEncoder, BybitNormalizer, BybitSigner, bybit_client, executed_quote, symbol

# ------------------------- Fixtures ------------------------- #

@pytest.fixture
def trade_request():
    return TradeRequest(base="SOL", quote="USDT", amount="0.0001", client_order_id="abc")


@pytest.fixture
def client(venue_config, session):
    return bybit_client(venue_config, session, clock=FIXED_CLOCK)


def detail_payload(*orders):
    return json.dumps({
        "retCode": 0,
        "retMsg": "OK",
        "result": {"list": list(orders), "nextPageCursor": "", "category": "spot"},
        "retExtInfo": {},
        "time": FIXED_MS,
    })

# ------------------------- Encoder ------------------------- #

def test_symbol_concatenates_base_and_quote():
    assert symbol("SOL", "USDT") == "SOLUSDT"


def test_place_order_json_body(trade_request):
    encoded = BybitEncoder().place_order(Side.BUY, trade_request, FIXED_MS)

    assert encoded.method == "POST"
    assert encoded.path == "/v5/order/create"
    assert encoded.query == ""
    assert encoded.body == (
        '{"category":"spot","symbol":"SOLUSDT","side":"Buy","qty":"0.0001",'
        '"orderType":"Market","orderLinkId":"abc"}'
    )


def test_sell_side_is_capitalised(trade_request):
    body = BybitEncoder().place_order(Side.SELL, trade_request, FIXED_MS).body
    assert json.loads(body)["side"] == "Sell"


@pytest.mark.parametrize("request_kwargs, query", [
    ({"order_id": "111"}, "category=spot&orderId=111"),
    ({"client_order_id": "abc"}, "category=spot&orderLinkId=abc"),
    ({"order_id": "111", "client_order_id": "abc"}, "category=spot&orderId=111&orderLinkId=abc"),
])
def test_order_detail_query(request_kwargs, query):
    encoded = BybitEncoder().order_detail(OrderDetailRequest(base="SOL", quote="USDT", **request_kwargs), FIXED_MS)

    assert encoded.method == "GET"
    assert encoded.path == "/v5/order/realtime"
    assert encoded.query == query

# ------------------------- Signer ------------------------- #

def test_signature_payload_order(venue_config):
    signer = BybitSigner(venue_config, FIXED_CLOCK)
    ctx = SigningContext(timestamp=FIXED_MS, method="GET", path="/v5/order/realtime", receive_window=10000)
    encoded = EncodedRequest("GET", "/v5/order/realtime", query="category=spot&orderId=111")

    expected = manual_hmac("test_secret_key", "1700000000000test_api_key10000category=spot&orderId=111")
    assert signer.signature(ctx, encoded) == expected


def test_authorize_headers(venue_config):
    signer = BybitSigner(venue_config, FIXED_CLOCK)
    ctx = SigningContext(timestamp=FIXED_MS, method="POST", path="/v5/order/create", receive_window=10000)
    encoded = EncodedRequest("POST", "/v5/order/create", body='{"category":"spot"}')

    query, headers = signer.authorize(ctx, encoded)

    assert query == ""
    assert headers == {
        "X-BAPI-API-KEY": "test_api_key",
        "X-BAPI-TIMESTAMP": "1700000000000",
        "X-BAPI-SIGN": manual_hmac("test_secret_key", '1700000000000test_api_key10000{"category":"spot"}'),
        "X-BAPI-SIGN-TYPE": "2",
        "X-BAPI-RECV-WINDOW": "10000",
    }

# ------------------------- Normalizer ------------------------- #

def test_executed_quote_from_average_price():
    order = {"avgPrice": "150.00", "cumExecQty": "2", "cumExecValue": "299.5"}
    assert executed_quote(order) == "300.00"


@pytest.mark.parametrize("order", [
    {"avgPrice": "", "cumExecQty": "2", "cumExecValue": "42.5"},
    {"cumExecQty": "2", "cumExecValue": "42.5"},
])
def test_executed_quote_falls_back_to_cum_exec_value(order):
    assert executed_quote(order) == "42.5"


@pytest.mark.parametrize("value", ["0.00000001", "0.00000000", "42.50"])
def test_executed_quote_fallback_is_verbatim(value):
    assert executed_quote({"avgPrice": "", "cumExecQty": "0", "cumExecValue": value}) == value


@pytest.mark.parametrize("qty, price, expected", [
    ("0.000010", "0.05", "0.00000050"),
    ("0.00000000", "150.00", "0.0000000000"),
])
def test_executed_quote_product_is_fixed_point(qty, price, expected):
    assert executed_quote({"avgPrice": price, "cumExecQty": qty, "cumExecValue": "0"}) == expected


@pytest.mark.parametrize("value", [None, 1.5])
def test_executed_quote_rejects_non_string_value(value):
    with pytest.raises(DecodeError):
        executed_quote({"avgPrice": "", "cumExecQty": "0", "cumExecValue": value})


def test_order_detail_uses_first_record():
    payload = json.loads(detail_payload(
        {"orderId": "1", "orderStatus": "PartiallyFilled", "avgPrice": "150.00",
         "cumExecQty": "2", "cumExecValue": "300"},
        {"orderId": "2", "orderStatus": "Filled", "avgPrice": "1", "cumExecQty": "1", "cumExecValue": "1"},
    ))

    detail = BybitNormalizer().order_detail(payload)

    assert detail == OrderDetailResponse(status="PartiallyFilled", executed_base="2", executed_quote="300.00")


def test_empty_list_is_empty_result_error():
    with pytest.raises(EmptyResultError):
        BybitNormalizer().order_detail(json.loads(detail_payload()))

# ------------------------- Client ------------------------- #

def test_sell_end_to_end(client, session, trade_request):
    session.request.return_value = make_response(200, json.dumps({
        "retCode": 0, "retMsg": "OK",
        "result": {"orderId": "1321003749386327552", "orderLinkId": "abc"},
        "retExtInfo": {}, "time": FIXED_MS,
    }))

    assert client.sell(trade_request) == TradeResponse(order_id="1321003749386327552")

    method, url = session.request.call_args[0]
    kwargs = session.request.call_args[1]
    body = kwargs["data"].decode()
    assert method == "POST"
    assert url == "https://mock.exchange/v5/order/create"
    assert json.loads(body)["side"] == "Sell"
    assert kwargs["headers"]["X-BAPI-SIGN"] == manual_hmac(
        "test_secret_key", "1700000000000test_api_key10000" + body
    )


def test_get_order_detail_end_to_end(client, session):
    session.request.return_value = make_response(200, detail_payload(
        {"orderId": "111", "orderStatus": "Filled", "avgPrice": "", "cumExecQty": "0.0001",
         "cumExecValue": "0.015"},
    ))

    detail = client.get_order_detail(OrderDetailRequest(base="SOL", quote="USDT", order_id="111"))

    assert detail == OrderDetailResponse(status="Filled", executed_base="0.0001", executed_quote="0.015")
    method, url = session.request.call_args[0]
    assert method == "GET"
    assert url == "https://mock.exchange/v5/order/realtime?category=spot&orderId=111"
    assert session.request.call_args[1]["headers"]["X-BAPI-SIGN"] == manual_hmac(
        "test_secret_key", "1700000000000test_api_key10000category=spot&orderId=111"
    )


def test_get_order_detail_empty_list(client, session):
    session.request.return_value = make_response(200, detail_payload())

    with pytest.raises(EmptyResultError):
        client.get_order_detail(OrderDetailRequest(base="SOL", quote="USDT", order_id="111"))


def test_non_zero_ret_code_is_rejection(client, session, trade_request):
    session.request.return_value = make_response(200, json.dumps({
        "retCode": 170131, "retMsg": "Insufficient balance.", "result": {}, "retExtInfo": {}, "time": FIXED_MS,
    }))

    with pytest.raises(AuthError) as info:
        client.buy(trade_request)

    assert info.value.code == 170131
    assert info.value.message == "Insufficient balance."


def test_non_200_with_envelope_is_auth_error(client, session, trade_request):
    session.request.return_value = make_response(401, '{"retCode":10003,"retMsg":"API key is invalid."}')

    with pytest.raises(AuthError) as info:
        client.sell(trade_request)

    assert info.value.status_code == 401


def test_non_200_plain_body_is_http_status_error(client, session, trade_request):
    session.request.return_value = make_response(403, "Forbidden")

    with pytest.raises(HTTPStatusError):
        client.sell(trade_request)


def test_bad_decimal_is_decode_error(client, session):
    session.request.return_value = make_response(200, detail_payload(
        {"orderId": "1", "orderStatus": "Filled", "avgPrice": "n/a", "cumExecQty": "1", "cumExecValue": "1"},
    ))

    with pytest.raises(DecodeError):
        client.get_order_detail(OrderDetailRequest(base="SOL", quote="USDT", order_id="1"))


def test_null_order_status_is_decode_error(client, session):
    session.request.return_value = make_response(200, detail_payload(
        {"orderId": "1", "orderStatus": None, "avgPrice": "", "cumExecQty": "1", "cumExecValue": "1"},
    ))

    with pytest.raises(DecodeError):
        client.get_order_detail(OrderDetailRequest(base="SOL", quote="USDT", order_id="1"))
