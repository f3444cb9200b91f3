from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class PositionResponse(BaseModel):
    nft_id: str
    owner: str
    pool_id: str
    tick_lower: int
    tick_upper: int
    liquidity: str = Field(..., description="Position liquidity (uint128 as string).")
    created_at: datetime


class PositionPnlResponse(BaseModel):
    fees_earned: Decimal
    impermanent_loss: Decimal = Field(..., description="Fraction of hodl value, not a percentage.")
    gas_spent: Decimal
    net_pnl: Decimal


class PositionWithPnlResponse(PositionResponse):
    pnl: PositionPnlResponse
    in_range: bool
    current_tick: int
    current_price: Decimal
    swaps_count: int


class PositionHealthResponse(BaseModel):
    nft_id: str
    status: str
    details: str
    in_range: bool
    current_tick: int
    distance_to_edge: int
    warning_distance: Decimal
    range_width_percent: Decimal | None
    pnl: PositionPnlResponse


class PositionSnapshotRequest(BaseModel):
    initial_price: Decimal = Field(Decimal("1.0"), description="Price at position creation (token1 per token0).")
    current_price: Decimal = Field(Decimal("1.0"), description="Current price (token1 per token0).")
    gas_spent: Decimal = Field(Decimal("0"), ge=0, description="Gas spent, token1-denominated.")
    current_sqrt_price_x96: int | None = Field(None, gt=0, description="Pool sqrtPriceX96; overrides current_price.")


class PositionSnapshotResponse(BaseModel):
    id: int | None
    position_id: int
    timestamp: datetime
    fees_earned: Decimal
    liquidity: str
    price: Decimal
