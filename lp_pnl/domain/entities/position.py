from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class Position:
    id: int
    nft_id: str
    owner: str
    pool_id: str
    tick_lower: int
    tick_upper: int
    liquidity: int
    created_at: datetime


@dataclass(frozen=True)
class Swap:
    id: int
    tx_hash: str
    pool_id: str
    amount0: int
    amount1: int
    timestamp: datetime


@dataclass(frozen=True)
class PositionSnapshot:
    id: int | None
    position_id: int
    timestamp: datetime
    fees_earned: Decimal
    liquidity: int
    price: Decimal
