from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

DEFAULT_URLS: Dict[str, str] = {
    "binance": "https://api.binance.com",
    "bybit": "https://api.bybit.com",
    "coinbase": "https://api.coinbase.com",
}


@dataclass(frozen=True)
class VenueConfig:
    url: str
    api_key: str = ""
    api_secret: str = ""

    @property
    def enabled(self) -> bool:
        return bool(self.api_key and self.api_secret)

    def __repr__(self) -> str:  # keep secrets out of logs
        return f"VenueConfig(url={self.url!r}, api_key={'***' if self.api_key else ''!r})"


class ConfigManager:
    def __init__(self, config: Dict[str, Any]):
        self.config = config

    def get(self, key: str, default: Any = None) -> Any:
        return self.config.get(key, default)

    def get_venue(self, name: str) -> VenueConfig:
        section = self.config.get(name.upper()) or {}
        return VenueConfig(
            url=section.get("url") or DEFAULT_URLS.get(name.lower(), ""),
            api_key=section.get("api_key") or "",
            api_secret=section.get("api_secret") or "",
        )

    def get_enabled_venues(self) -> List[str]:
        return [name for name in DEFAULT_URLS if self.get_venue(name).enabled]

    def get_timeout(self) -> float:
        return float(self.config.get("HTTP_TIMEOUT", 10))

    def get_webhook_address(self) -> Tuple[str, int]:
        hook = self.config.get("WEBHOOK") or {}
        return hook.get("host") or "localhost", int(hook.get("port") or 8888)
