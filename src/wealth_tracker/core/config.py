"""Application configuration, loaded from config.json at project root."""

import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Optional

from .models import DEFAULT_MONTHLY_CONTRIBUTION, FALLBACK_ANCHOR_TO_BASE_RATE

logger = logging.getLogger(__name__)

MARKET_DATA_SOURCES = ("gemini", "yahoo")


@dataclass
class AppConfig:
    market_data_source: str = "gemini"
    gemini_model: str = "gemini-2.0-flash"
    gemini_api_key_env: str = "GEMINI_API_KEY"
    default_monthly_contribution: Decimal = DEFAULT_MONTHLY_CONTRIBUTION
    fallback_rate: Decimal = FALLBACK_ANCHOR_TO_BASE_RATE
    log_level: str = "INFO"


_DEFAULTS = AppConfig()
_cached: Optional[AppConfig] = None


def _config_path() -> Path:
    from ..data.database import _find_project_root
    return _find_project_root() / "config.json"


def get_config() -> AppConfig:
    global _cached
    if _cached is not None:
        return _cached
    path = _config_path()
    if not path.exists():
        _cached = AppConfig()
        return _cached
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        source = data.get("market_data_source", _DEFAULTS.market_data_source)
        if source not in MARKET_DATA_SOURCES:
            source = _DEFAULTS.market_data_source
        _cached = AppConfig(
            market_data_source=source,
            gemini_model=data.get("gemini_model", _DEFAULTS.gemini_model),
            gemini_api_key_env=data.get("gemini_api_key_env", _DEFAULTS.gemini_api_key_env),
            default_monthly_contribution=Decimal(
                str(data.get("default_monthly_contribution", _DEFAULTS.default_monthly_contribution))
            ),
            fallback_rate=Decimal(str(data.get("fallback_rate", _DEFAULTS.fallback_rate))),
            log_level=str(data.get("log_level", _DEFAULTS.log_level)).upper(),
        )
    except Exception:
        logger.warning("Could not read %s, using default configuration", path)
        _cached = AppConfig()
    return _cached


def save_config(cfg: AppConfig) -> None:
    global _cached
    _cached = cfg
    data = {
        "market_data_source": cfg.market_data_source,
        "gemini_model": cfg.gemini_model,
        "gemini_api_key_env": cfg.gemini_api_key_env,
        "default_monthly_contribution": str(cfg.default_monthly_contribution),
        "fallback_rate": str(cfg.fallback_rate),
        "log_level": cfg.log_level,
    }
    _config_path().write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


def reset_config_cache() -> None:
    global _cached
    _cached = None
