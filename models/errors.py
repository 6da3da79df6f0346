"""
models/errors.py
----------------
Error taxonomy raised by the exchange adapters. Every adapter failure is one
of these, so callers can tell a venue rejection from a broken connection or
an unreadable response.
"""
from __future__ import annotations
from typing import Optional


class TradingError(Exception):
    def __init__(self, message: str, *, venue: str = "") -> None:
        super().__init__(message)
        self.venue = venue


class TransportError(TradingError):
    """DNS, connect, read or timeout failure; no usable HTTP response."""


class HTTPStatusError(TradingError):
    """Non-2xx answer whose body is not a recognised venue error."""

    def __init__(self, status_code: int, body: str, *, venue: str = "") -> None:
        super().__init__(
            f"get http response code {status_code} and body {body}", venue=venue
        )
        self.status_code = status_code
        self.body = body


class AuthError(TradingError):
    """Venue-structured rejection, e.g. Binance ``{code, msg}``."""

    def __init__(
        self,
        status_code: int,
        code: Optional[object],
        message: str,
        body: str = "",
        *,
        venue: str = "",
    ) -> None:
        super().__init__(
            f"get http response code {status_code} and error {code}: {message}",
            venue=venue,
        )
        self.status_code = status_code
        self.code = code
        self.message = message
        self.body = body


class DecodeError(TradingError):
    """2xx answer whose body does not match the expected schema."""

    def __init__(self, message: str, body: str = "", *, venue: str = "") -> None:
        super().__init__(message, venue=venue)
        self.body = body


class EmptyResultError(DecodeError):
    """Lookup succeeded but the venue returned no order record."""
