from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from lp_pnl.domain.entities.health import HealthReport
from lp_pnl.domain.entities.pnl import PositionPnL
from lp_pnl.domain.entities.position import Position


@dataclass(frozen=True)
class PositionQueryInput:
    owner: str
    nft_id: str
    initial_price: Decimal = Decimal("1.0")
    current_price: Decimal = Decimal("1.0")
    current_tick: int | None = None
    gas_spent: Decimal = Decimal("0")
    current_sqrt_price_x96: int | None = None


@dataclass(frozen=True)
class PositionPnlOutput:
    position: Position
    pnl: PositionPnL
    in_range: bool
    current_tick: int
    current_price: Decimal
    swaps_count: int


@dataclass(frozen=True)
class PositionHealthOutput:
    position: Position
    pnl: PositionPnL
    report: HealthReport
    current_tick: int
    range_width_percent: Decimal | None


@dataclass(frozen=True)
class ListSnapshotsInput:
    owner: str
    nft_id: str
    start: datetime | None = None
    end: datetime | None = None
