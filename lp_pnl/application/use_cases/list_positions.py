from __future__ import annotations

import logging

from lp_pnl.application.ports.positions_port import PositionsPort
from lp_pnl.domain.entities.position import Position
from lp_pnl.domain.exceptions import PositionQueryInputError


logger = logging.getLogger(__name__)


class ListPositionsUseCase:
    def __init__(self, *, positions_port: PositionsPort):
        self._positions_port = positions_port

    def execute(self, *, owner: str) -> list[Position]:
        normalized = (owner or "").strip()
        if not normalized:
            raise PositionQueryInputError("owner is required.")
        positions = self._positions_port.list_positions_by_owner(owner=normalized)
        logger.info("positions: list owner=%s count=%s", normalized, len(positions))
        return positions
