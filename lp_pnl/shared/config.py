from __future__ import annotations

import json
import os
from dataclasses import dataclass
from decimal import Decimal

from dotenv import load_dotenv


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _json(name: str, default: str) -> list | dict:
    value = _env(name)
    if not value:
        return json.loads(default)
    return json.loads(value)


@dataclass(frozen=True)
class Settings:
    postgres_dsn: str
    log_level: str
    swap_lookback_hours: int
    fee_rate: Decimal
    pool_share: Decimal
    health_warning_proximity: Decimal
    health_critical_loss: Decimal
    cors_allow_origins: list


def get_settings() -> Settings:
    return Settings(
        postgres_dsn=_env("POSTGRES_DSN", ""),
        log_level=_env("LOG_LEVEL", "INFO").upper(),
        swap_lookback_hours=int(_env("SWAP_LOOKBACK_HOURS", "24")),
        fee_rate=Decimal(_env("FEE_RATE", "0.003")),
        pool_share=Decimal(_env("POOL_SHARE", "0.01")),
        health_warning_proximity=Decimal(_env("HEALTH_WARNING_PROXIMITY", "0.10")),
        health_critical_loss=Decimal(_env("HEALTH_CRITICAL_LOSS", "0.05")),
        cors_allow_origins=_json("CORS_ALLOW_ORIGINS", '["*"]'),
    )
