from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable

from lp_pnl.application.dto.positions import PositionQueryInput
from lp_pnl.application.ports.positions_port import PositionsPort
from lp_pnl.domain.entities.pnl import PositionPnL
from lp_pnl.domain.entities.position import Position
from lp_pnl.domain.exceptions import (
    InvalidInputError,
    PositionNotFoundError,
    PositionOwnershipError,
    PositionQueryInputError,
)
from lp_pnl.domain.services.fee_estimation import FeeEstimator
from lp_pnl.domain.services.pnl import calculate_position_pnl
from lp_pnl.domain.services.tick_math import price_to_tick, sqrt_price_x96_to_price


Clock = Callable[[], datetime]
logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class PositionValuation:
    position: Position
    pnl: PositionPnL
    current_price: Decimal
    current_tick: int
    swaps_count: int


def load_owned_position(positions_port: PositionsPort, *, owner: str, nft_id: str) -> Position:
    if not owner or not owner.strip():
        raise PositionQueryInputError("owner is required.")
    if not nft_id or not nft_id.strip():
        raise PositionQueryInputError("nft_id is required.")
    position = positions_port.get_position_by_nft(nft_id=nft_id.strip())
    if position is None:
        raise PositionNotFoundError("Position not found.")
    if position.owner.lower() != owner.strip().lower():
        raise PositionOwnershipError("Position does not belong to this owner.")
    return position


def resolve_market(command: PositionQueryInput) -> tuple[Decimal, int]:
    """Current price and tick; sqrt_price_x96 wins, then an explicit tick, then the price's tick."""
    if command.current_sqrt_price_x96 is not None:
        try:
            current_price = sqrt_price_x96_to_price(command.current_sqrt_price_x96)
        except InvalidInputError as exc:
            raise PositionQueryInputError(str(exc)) from exc
        return current_price, price_to_tick(current_price)
    if command.current_tick is not None:
        return command.current_price, command.current_tick
    try:
        return command.current_price, price_to_tick(command.current_price)
    except InvalidInputError as exc:
        raise PositionQueryInputError("current_tick is required when current_price is not positive.") from exc


def evaluate_position(
    *,
    positions_port: PositionsPort,
    fee_estimator: FeeEstimator,
    swap_lookback_hours: int,
    now: datetime,
    command: PositionQueryInput,
) -> PositionValuation:
    if command.gas_spent < 0:
        raise PositionQueryInputError("gas_spent must be non-negative.")
    if swap_lookback_hours <= 0:
        raise PositionQueryInputError("swap lookback must be a positive number of hours.")

    position = load_owned_position(positions_port, owner=command.owner, nft_id=command.nft_id)
    current_price, current_tick = resolve_market(command)
    if command.initial_price <= 0 or current_price <= 0:
        logger.warning(
            "positions: non-positive price position=%s initial_price=%s current_price=%s",
            position.nft_id,
            command.initial_price,
            current_price,
        )

    since = now - timedelta(hours=swap_lookback_hours)
    swaps = positions_port.get_swaps_for_pool(pool_id=position.pool_id, since=since)
    pnl = calculate_position_pnl(
        position,
        swaps,
        command.initial_price,
        current_price,
        command.gas_spent,
        fee_estimator,
    )
    logger.info(
        "positions: pnl position=%s swaps=%s net_pnl=%s",
        position.nft_id,
        len(swaps),
        pnl.net_pnl,
    )
    return PositionValuation(
        position=position,
        pnl=pnl,
        current_price=current_price,
        current_tick=current_tick,
        swaps_count=len(swaps),
    )
