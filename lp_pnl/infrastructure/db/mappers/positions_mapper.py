from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from lp_pnl.domain.entities.position import Position, PositionSnapshot, Swap


def _to_int(value: Any) -> int:
    if isinstance(value, int):
        return value
    return int(Decimal(str(value)))


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def map_row_to_position(row: Mapping[str, Any]) -> Position:
    return Position(
        id=int(row["id"]),
        nft_id=str(row["nft_id"]),
        owner=row["owner"],
        pool_id=row["pool_id"],
        tick_lower=int(row["tick_lower"]),
        tick_upper=int(row["tick_upper"]),
        liquidity=_to_int(row["liquidity"]),
        created_at=row["created_at"],
    )


def map_row_to_swap(row: Mapping[str, Any]) -> Swap:
    return Swap(
        id=int(row["id"]),
        tx_hash=row["tx_hash"],
        pool_id=row["pool_id"],
        amount0=_to_int(row["amount0"]),
        amount1=_to_int(row["amount1"]),
        timestamp=row["timestamp"],
    )


def map_row_to_position_snapshot(row: Mapping[str, Any]) -> PositionSnapshot:
    return PositionSnapshot(
        id=int(row["id"]) if row["id"] is not None else None,
        position_id=int(row["position_id"]),
        timestamp=row["timestamp"],
        fees_earned=_to_decimal(row["fees_earned"]),
        liquidity=_to_int(row["liquidity"]),
        price=_to_decimal(row["price"]),
    )
