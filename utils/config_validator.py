VENUE_SECTIONS = ("BINANCE", "BYBIT", "COINBASE")


def validate_config(config: dict):
    missing = [k for k in VENUE_SECTIONS if k not in config]
    if missing:
        raise ValueError(f"Missing required configuration keys: {missing}")

    for key in VENUE_SECTIONS:
        section = config[key]
        if not isinstance(section, dict):
            raise TypeError(f"{key} must be a dictionary.")
        if not section.get("url"):
            raise ValueError(f"{key}.url must be set.")
        if bool(section.get("api_key")) != bool(section.get("api_secret")):
            raise ValueError(f"{key} needs both api_key and api_secret, or neither.")

    timeout = config.get("HTTP_TIMEOUT", 10)
    if not isinstance(timeout, (int, float)):
        raise TypeError("HTTP_TIMEOUT must be a number.")
    if timeout <= 0:
        raise ValueError("HTTP_TIMEOUT must be positive.")

    webhook = config.get("WEBHOOK", {})
    if not isinstance(webhook, dict):
        raise TypeError("WEBHOOK must be a dictionary.")
    if not isinstance(webhook.get("port", 8888), int):
        raise TypeError("WEBHOOK.port must be an integer.")
