"""
Exchange adapters. Each venue module provides an encoder, a signer, a
normalizer and a ``<venue>_client()`` factory returning an ExchangeClient.
"""
from typing import Callable, Dict

from modules.trader import ExchangeClient
from modules.venues.binance import binance_client
from modules.venues.bybit import bybit_client
from modules.venues.coinbase import coinbase_client
from utils.config_manager import VenueConfig

VENUES: Dict[str, Callable[..., ExchangeClient]] = {
    "binance": binance_client,
    "bybit": bybit_client,
    "coinbase": coinbase_client,
}


def build_client(name: str, config: VenueConfig, session=None, **kwargs) -> ExchangeClient:
    try:
        factory = VENUES[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown venue {name!r}; expected one of {sorted(VENUES)}") from None
    return factory(config, session, **kwargs)


__all__ = ["VENUES", "build_client", "binance_client", "bybit_client", "coinbase_client"]
