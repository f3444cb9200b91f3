from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from lp_pnl.domain.entities.health import HealthReport, HealthStatus
from lp_pnl.domain.entities.pnl import PositionPnL
from lp_pnl.domain.entities.position import Position
from lp_pnl.domain.exceptions import InvalidInputError
from lp_pnl.domain.services.range_metrics import distance_to_range_edge, is_in_range


DEFAULT_WARNING_PROXIMITY = Decimal("0.10")
DEFAULT_CRITICAL_LOSS = Decimal("0.05")


@dataclass(frozen=True)
class HealthThresholds:
    """Policy knobs for the classifier.

    warning_proximity: fraction of the range width; a tick closer than this to
    either bound is a warning.
    critical_loss: net P&L below -critical_loss is critical; any smaller loss
    is a warning.
    """

    warning_proximity: Decimal = DEFAULT_WARNING_PROXIMITY
    critical_loss: Decimal = DEFAULT_CRITICAL_LOSS

    def __post_init__(self):
        if self.warning_proximity < 0 or self.warning_proximity > 1:
            raise InvalidInputError("warning_proximity must be between 0 and 1.")
        if self.critical_loss < 0:
            raise InvalidInputError("critical_loss must be non-negative.")


def _net_pnl_value(net_pnl: PositionPnL | Decimal) -> Decimal:
    if isinstance(net_pnl, PositionPnL):
        return net_pnl.net_pnl
    return net_pnl


def get_health_details(
    position: Position,
    current_tick: int,
    net_pnl: PositionPnL | Decimal,
    thresholds: HealthThresholds | None = None,
) -> HealthReport:
    limits = thresholds or HealthThresholds()
    pnl_value = _net_pnl_value(net_pnl)
    tick_lower = position.tick_lower
    tick_upper = position.tick_upper
    in_range = is_in_range(current_tick, tick_lower, tick_upper)
    distance = distance_to_range_edge(current_tick, tick_lower, tick_upper)
    width = max(tick_upper - tick_lower, 0)
    warning_distance = limits.warning_proximity * Decimal(width)

    def report(status: HealthStatus, message: str) -> HealthReport:
        return HealthReport(
            status=status,
            in_range=in_range,
            distance_to_edge=distance,
            warning_distance=warning_distance,
            net_pnl=pnl_value,
            message=message,
        )

    # Out of range wins over any P&L signal.
    if not in_range:
        side = "below" if current_tick < tick_lower else "above"
        return report(
            HealthStatus.CRITICAL,
            f"Out of range: tick {current_tick} is {side} [{tick_lower}, {tick_upper}).",
        )
    if pnl_value < -limits.critical_loss:
        return report(
            HealthStatus.CRITICAL,
            f"In range but net P&L {pnl_value} is below -{limits.critical_loss}.",
        )
    if Decimal(distance) < warning_distance:
        return report(
            HealthStatus.WARNING,
            f"In range, {distance} ticks from the nearest edge (warning below {warning_distance}).",
        )
    if pnl_value < 0:
        return report(HealthStatus.WARNING, f"In range with small negative net P&L {pnl_value}.")
    return report(HealthStatus.HEALTHY, f"In range, {distance} ticks from the nearest edge.")


def get_position_health(
    position: Position,
    current_tick: int,
    net_pnl: PositionPnL | Decimal,
    thresholds: HealthThresholds | None = None,
) -> HealthStatus:
    return get_health_details(position, current_tick, net_pnl, thresholds).status
