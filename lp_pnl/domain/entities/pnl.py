from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class PositionPnL:
    fees_earned: Decimal
    impermanent_loss: Decimal
    gas_spent: Decimal
    net_pnl: Decimal
