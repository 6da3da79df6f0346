# --------------------------------------------------------------------
# models/trading.py
# Request / response shapes shared by every exchange adapter. All of them
# are transient: built for one call and dropped after mapping.
# --------------------------------------------------------------------
from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Side(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


class TradeRequest(BaseModel):
    """Market order input. ``amount`` travels to the venue verbatim."""

    model_config = ConfigDict(frozen=True)

    base: str = Field(..., min_length=1)
    quote: str = Field(..., min_length=1)
    # plain digits only: no sign, exponent, separators or padding
    amount: str = Field(..., pattern=r"^[0-9]+(\.[0-9]+)?$")
    client_order_id: str = ""

    @field_validator("amount")
    @classmethod
    def positive_decimal(cls, v: str) -> str:
        if Decimal(v) <= 0:
            raise ValueError(f"amount must be positive: {v!r}")
        return v


class OrderDetailRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    base: str = Field(..., min_length=1)
    quote: str = Field(..., min_length=1)
    order_id: str = ""
    client_order_id: str = ""

    @model_validator(mode="after")
    def needs_an_identifier(self) -> "OrderDetailRequest":
        if not self.order_id and not self.client_order_id:
            raise ValueError("either order_id or client_order_id is required")
        return self


@dataclass(frozen=True)
class TradeResponse:
    order_id: str


@dataclass(frozen=True)
class OrderDetailResponse:
    # venue status string, passed through untouched (NEW, FILLED, PartiallyFilled, OPEN, ...)
    status: str
    executed_base: str
    executed_quote: str


@dataclass(frozen=True)
class SigningContext:
    timestamp: int  # epoch-ms or epoch-s, venue dependent
    method: str
    path: str
    receive_window: Optional[int] = None


@dataclass(frozen=True)
class EncodedRequest:
    """The exact strings that get signed and put on the wire."""

    method: str
    path: str
    query: str = ""
    body: str = ""
