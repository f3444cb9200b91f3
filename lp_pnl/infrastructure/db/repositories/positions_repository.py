from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime

from sqlalchemy import text

from lp_pnl.application.ports.positions_port import PositionsPort
from lp_pnl.domain.entities.position import Position, PositionSnapshot, Swap
from lp_pnl.infrastructure.db.mappers.positions_mapper import (
    map_row_to_position,
    map_row_to_position_snapshot,
    map_row_to_swap,
)


logger = logging.getLogger(__name__)

_POSITION_COLUMNS = """
    id,
    nft_id,
    owner,
    pool_id,
    tick_lower,
    tick_upper,
    liquidity,
    created_at
"""


class SqlPositionsRepository(PositionsPort):
    def __init__(self, engine):
        self._engine = engine

    def list_positions_by_owner(self, *, owner: str) -> list[Position]:
        sql = f"""
            SELECT {_POSITION_COLUMNS}
            FROM positions
            WHERE lower(owner) = lower(:owner)
            ORDER BY created_at DESC
        """
        with self._engine.connect() as conn:
            rows = conn.execute(text(sql), {"owner": owner}).mappings().all()
        logger.debug("positions_repo: list_positions_by_owner owner=%s rows=%s", owner, len(rows))
        return [map_row_to_position(row) for row in rows]

    def get_position_by_nft(self, *, nft_id: str) -> Position | None:
        sql = f"""
            SELECT {_POSITION_COLUMNS}
            FROM positions
            WHERE nft_id = :nft_id
        """
        with self._engine.connect() as conn:
            row = conn.execute(text(sql), {"nft_id": nft_id}).mappings().first()
        if not row:
            return None
        return map_row_to_position(row)

    def get_swaps_for_pool(self, *, pool_id: str, since: datetime) -> list[Swap]:
        sql = """
            SELECT
                id,
                tx_hash,
                pool_id,
                amount0,
                amount1,
                timestamp
            FROM swaps
            WHERE pool_id = :pool_id
              AND timestamp >= :since
            ORDER BY timestamp ASC
        """
        with self._engine.connect() as conn:
            rows = conn.execute(text(sql), {"pool_id": pool_id, "since": since}).mappings().all()
        logger.debug("positions_repo: get_swaps_for_pool pool=%s since=%s rows=%s", pool_id, since, len(rows))
        return [map_row_to_swap(row) for row in rows]

    def insert_snapshot(self, *, snapshot: PositionSnapshot) -> PositionSnapshot:
        sql = """
            INSERT INTO position_snapshots (
                position_id,
                timestamp,
                fees_earned,
                liquidity,
                price
            )
            VALUES (
                :position_id,
                :timestamp,
                :fees_earned,
                :liquidity,
                :price
            )
            RETURNING id
        """
        params = {
            "position_id": snapshot.position_id,
            "timestamp": snapshot.timestamp,
            "fees_earned": snapshot.fees_earned,
            "liquidity": snapshot.liquidity,
            "price": snapshot.price,
        }
        with self._engine.begin() as conn:
            snapshot_id = conn.execute(text(sql), params).scalar_one()
        logger.debug(
            "positions_repo: insert_snapshot position_id=%s snapshot_id=%s",
            snapshot.position_id,
            snapshot_id,
        )
        return replace(snapshot, id=int(snapshot_id))

    def get_snapshots(
        self,
        *,
        position_id: int,
        start: datetime,
        end: datetime,
    ) -> list[PositionSnapshot]:
        sql = """
            SELECT
                id,
                position_id,
                timestamp,
                fees_earned,
                liquidity,
                price
            FROM position_snapshots
            WHERE position_id = :position_id
              AND timestamp >= :start
              AND timestamp <= :end
            ORDER BY timestamp ASC
        """
        params = {"position_id": position_id, "start": start, "end": end}
        with self._engine.connect() as conn:
            rows = conn.execute(text(sql), params).mappings().all()
        logger.debug("positions_repo: get_snapshots position_id=%s rows=%s", position_id, len(rows))
        return [map_row_to_position_snapshot(row) for row in rows]
