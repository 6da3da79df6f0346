"""
core/initialization.py
----------------------
Loads venue credentials from .env and wires the runtime components with
simple dependency-injection (DI) overrides. Nothing here is process-global:
every call builds its own session, clients and bus.
"""

from __future__ import annotations

import os
import logging
from typing import Dict, Optional

import requests
from dotenv import load_dotenv

from modules.venues import build_client
from modules.webhook import WebhookServer
from utils.config_manager import DEFAULT_URLS, ConfigManager
from utils.config_validator import validate_config
from utils.event_bus import EventBus


def load_configuration(env_path: str = "config.env") -> Dict:
    """
    Load settings from an .env-style file and return a structured config dict.

    Per venue: <VENUE>_API_URL, <VENUE>_API_KEY, <VENUE>_API_SECRET.
    """
    log = logging.getLogger(__name__)
    load_dotenv(dotenv_path=env_path)

    conf: Dict[str, object] = {}
    for venue, default_url in DEFAULT_URLS.items():
        prefix = venue.upper()
        conf[prefix] = {
            "url": os.getenv(f"{prefix}_API_URL", default_url),
            "api_key": os.getenv(f"{prefix}_API_KEY", ""),
            "api_secret": os.getenv(f"{prefix}_API_SECRET", ""),
        }

    conf["HTTP_TIMEOUT"] = float(os.getenv("HTTP_TIMEOUT", "10") or 10)
    conf["WEBHOOK"] = {
        "host": os.getenv("WEBHOOK_HOST", "localhost"),
        "port": int(os.getenv("WEBHOOK_PORT", "8888") or 8888),
    }

    log.debug(
        "Venues with credentials: %s",
        [v for v in DEFAULT_URLS if conf[v.upper()]["api_key"]],
    )
    return conf


def initialize_components(
    config: Dict,
    overrides: Optional[Dict[str, object]] = None,
) -> Dict[str, object]:
    """
    Construct and wire together all runtime components (supports DI via overrides).

    Keys you can override:
    {"logger", "session", "bus", "webhook", "clients"}
    """
    overrides = overrides or {}
    validate_config(config)
    config = ConfigManager(config)

    # 1) Logger
    from utils.logger import setup_logger
    logger = overrides.get("logger") or setup_logger("trading")

    # 2) Pooled HTTP transport shared by every adapter
    session = overrides.get("session") or requests.Session()
    timeout = config.get_timeout()

    # 3) One adapter per venue that has credentials
    clients = overrides.get("clients")
    if clients is None:
        clients = {
            name: build_client(
                name,
                config.get_venue(name),
                session,
                timeout=timeout,
                logger=logger.getChild(name),
            )
            for name in config.get_enabled_venues()
        }

    # 4) Webhook receiver + its bus
    bus = overrides.get("bus") or EventBus()
    webhook = overrides.get("webhook")
    if webhook is None:
        host, port = config.get_webhook_address()
        webhook = WebhookServer(host=host, port=port, bus=bus, logger=logger.getChild("webhook"))

    logger.info("✅ Logger initialized.")
    logger.info("✅ Trading clients initialized: %s", sorted(clients) or "none")
    logger.info("✅ Webhook initialized.")

    return {
        "logger": logger,
        "session": session,
        "clients": clients,
        "bus": bus,
        "webhook": webhook,
    }
