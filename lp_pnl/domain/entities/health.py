from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    HealthStatus.HEALTHY: "Position is in range with positive P&L",
    HealthStatus.WARNING: "Position is near the edge of its range or slightly negative",
    HealthStatus.CRITICAL: "Position is out of range or has significantly negative P&L",
}


@dataclass(frozen=True)
class HealthReport:
    status: HealthStatus
    in_range: bool
    distance_to_edge: int
    warning_distance: Decimal
    net_pnl: Decimal
    message: str
