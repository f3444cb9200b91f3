from __future__ import annotations

from datetime import datetime
from typing import Protocol

from lp_pnl.domain.entities.position import Position, PositionSnapshot, Swap


class PositionsPort(Protocol):
    def list_positions_by_owner(self, *, owner: str) -> list[Position]:
        ...

    def get_position_by_nft(self, *, nft_id: str) -> Position | None:
        ...

    def get_swaps_for_pool(self, *, pool_id: str, since: datetime) -> list[Swap]:
        ...

    def insert_snapshot(self, *, snapshot: PositionSnapshot) -> PositionSnapshot:
        ...

    def get_snapshots(
        self,
        *,
        position_id: int,
        start: datetime,
        end: datetime,
    ) -> list[PositionSnapshot]:
        ...
