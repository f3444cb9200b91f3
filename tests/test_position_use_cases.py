from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from lp_pnl.application.dto.positions import ListSnapshotsInput, PositionQueryInput
from lp_pnl.application.use_cases.get_position_health import GetPositionHealthUseCase
from lp_pnl.application.use_cases.get_position_pnl import GetPositionPnlUseCase
from lp_pnl.application.use_cases.list_position_snapshots import ListPositionSnapshotsUseCase
from lp_pnl.application.use_cases.list_positions import ListPositionsUseCase
from lp_pnl.application.use_cases.record_position_snapshot import RecordPositionSnapshotUseCase
from lp_pnl.domain.entities.health import HealthStatus
from lp_pnl.domain.entities.position import Position, PositionSnapshot, Swap
from lp_pnl.domain.exceptions import (
    PositionNotFoundError,
    PositionOwnershipError,
    PositionQueryInputError,
)
from lp_pnl.domain.services.fee_estimation import FixedShareFeeEstimator
from lp_pnl.domain.services.tick_math import price_to_tick


NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return NOW


def make_position(**overrides) -> Position:
    payload = {
        "id": 10,
        "nft_id": "42",
        "owner": "0xAbC",
        "pool_id": "0xpool",
        "tick_lower": -1000,
        "tick_upper": 1000,
        "liquidity": 1_000_000,
        "created_at": datetime(2026, 1, 1, tzinfo=timezone.utc),
    }
    payload.update(overrides)
    return Position(**payload)


class FakePositionsPort:
    def __init__(self, positions: list[Position] | None = None, swaps: list[Swap] | None = None):
        self.positions = positions if positions is not None else [make_position()]
        self.swaps = swaps if swaps is not None else [
            Swap(id=1, tx_hash="0x1", pool_id="0xpool", amount0=1000, amount1=-2000, timestamp=NOW),
        ]
        self.snapshots: list[PositionSnapshot] = []
        self.swaps_since: datetime | None = None
        self.snapshot_window: tuple[datetime, datetime] | None = None

    def list_positions_by_owner(self, *, owner: str) -> list[Position]:
        return [p for p in self.positions if p.owner.lower() == owner.lower()]

    def get_position_by_nft(self, *, nft_id: str) -> Position | None:
        for position in self.positions:
            if position.nft_id == nft_id:
                return position
        return None

    def get_swaps_for_pool(self, *, pool_id: str, since: datetime) -> list[Swap]:
        self.swaps_since = since
        return [s for s in self.swaps if s.pool_id == pool_id and s.timestamp >= since]

    def insert_snapshot(self, *, snapshot: PositionSnapshot) -> PositionSnapshot:
        stored = replace(snapshot, id=len(self.snapshots) + 1)
        self.snapshots.append(stored)
        return stored

    def get_snapshots(self, *, position_id: int, start: datetime, end: datetime) -> list[PositionSnapshot]:
        self.snapshot_window = (start, end)
        return [
            s for s in self.snapshots
            if s.position_id == position_id and start <= s.timestamp <= end
        ]


def pnl_use_case(port: FakePositionsPort) -> GetPositionPnlUseCase:
    return GetPositionPnlUseCase(
        positions_port=port,
        fee_estimator=FixedShareFeeEstimator(),
        clock=fixed_clock,
    )


class TestListPositions:
    def test_lists_positions_for_owner_case_insensitively(self):
        port = FakePositionsPort(positions=[make_position(), make_position(nft_id="43", owner="0xother")])
        result = ListPositionsUseCase(positions_port=port).execute(owner=" 0xabc ")
        assert [p.nft_id for p in result] == ["42"]

    def test_empty_owner_is_rejected(self):
        with pytest.raises(PositionQueryInputError):
            ListPositionsUseCase(positions_port=FakePositionsPort()).execute(owner="  ")


class TestGetPositionPnl:
    def test_combines_fees_il_and_gas(self):
        port = FakePositionsPort()
        result = pnl_use_case(port).execute(
            PositionQueryInput(owner="0xabc", nft_id="42", gas_spent=Decimal("0.01"))
        )
        assert result.pnl.fees_earned == Decimal("0.09")
        assert result.pnl.impermanent_loss == Decimal("0")
        assert result.pnl.net_pnl == Decimal("0.08")
        assert result.swaps_count == 1
        assert result.in_range
        assert port.swaps_since == NOW - timedelta(hours=24)

    def test_old_swaps_fall_outside_lookback(self):
        old = Swap(id=2, tx_hash="0x2", pool_id="0xpool", amount0=10**9, amount1=0, timestamp=NOW - timedelta(days=2))
        port = FakePositionsPort(swaps=[old])
        result = pnl_use_case(port).execute(PositionQueryInput(owner="0xabc", nft_id="42"))
        assert result.pnl.fees_earned == Decimal("0")
        assert result.swaps_count == 0

    def test_price_move_produces_impermanent_loss(self):
        result = pnl_use_case(FakePositionsPort()).execute(
            PositionQueryInput(
                owner="0xabc",
                nft_id="42",
                initial_price=Decimal("1.0"),
                current_price=Decimal("1.1"),
            )
        )
        assert Decimal("0.02") < result.pnl.impermanent_loss < Decimal("0.03")
        assert result.pnl.net_pnl < 0

    def test_sqrt_price_x96_overrides_price_and_tick(self):
        result = pnl_use_case(FakePositionsPort()).execute(
            PositionQueryInput(owner="0xabc", nft_id="42", current_sqrt_price_x96=2 * 2**96)
        )
        assert result.current_price == Decimal("4")
        assert result.current_tick == price_to_tick(Decimal("4"))
        assert not result.in_range

    def test_tick_follows_price_when_not_given(self):
        result = pnl_use_case(FakePositionsPort()).execute(
            PositionQueryInput(owner="0xabc", nft_id="42", current_price=Decimal("1.5"))
        )
        assert result.current_tick == price_to_tick(Decimal("1.5"))
        assert not result.in_range

    def test_explicit_tick_is_kept(self):
        result = pnl_use_case(FakePositionsPort()).execute(
            PositionQueryInput(owner="0xabc", nft_id="42", current_price=Decimal("1.5"), current_tick=10)
        )
        assert result.current_tick == 10
        assert result.in_range

    def test_non_positive_price_without_tick_is_rejected(self):
        with pytest.raises(PositionQueryInputError):
            pnl_use_case(FakePositionsPort()).execute(
                PositionQueryInput(owner="0xabc", nft_id="42", current_price=Decimal("0"))
            )

    def test_non_positive_sqrt_price_x96_is_rejected(self):
        with pytest.raises(PositionQueryInputError):
            pnl_use_case(FakePositionsPort()).execute(
                PositionQueryInput(owner="0xabc", nft_id="42", current_sqrt_price_x96=0)
            )

    def test_unknown_position(self):
        with pytest.raises(PositionNotFoundError):
            pnl_use_case(FakePositionsPort()).execute(PositionQueryInput(owner="0xabc", nft_id="999"))

    def test_position_owned_by_someone_else(self):
        with pytest.raises(PositionOwnershipError):
            pnl_use_case(FakePositionsPort()).execute(PositionQueryInput(owner="0xdef", nft_id="42"))

    def test_negative_gas_is_rejected(self):
        with pytest.raises(PositionQueryInputError):
            pnl_use_case(FakePositionsPort()).execute(
                PositionQueryInput(owner="0xabc", nft_id="42", gas_spent=Decimal("-1"))
            )

    def test_non_positive_lookback_is_rejected(self):
        use_case = GetPositionPnlUseCase(
            positions_port=FakePositionsPort(),
            fee_estimator=FixedShareFeeEstimator(),
            swap_lookback_hours=0,
            clock=fixed_clock,
        )
        with pytest.raises(PositionQueryInputError):
            use_case.execute(PositionQueryInput(owner="0xabc", nft_id="42"))


class TestGetPositionHealth:
    def _use_case(self, port: FakePositionsPort) -> GetPositionHealthUseCase:
        return GetPositionHealthUseCase(
            positions_port=port,
            fee_estimator=FixedShareFeeEstimator(),
            clock=fixed_clock,
        )

    def test_centered_profitable_position_is_healthy(self):
        result = self._use_case(FakePositionsPort()).execute(PositionQueryInput(owner="0xabc", nft_id="42"))
        assert result.report.status is HealthStatus.HEALTHY
        assert result.current_tick == 0
        assert Decimal("22.1") < result.range_width_percent < Decimal("22.2")

    def test_out_of_range_is_critical(self):
        result = self._use_case(FakePositionsPort()).execute(
            PositionQueryInput(owner="0xabc", nft_id="42", current_tick=5000)
        )
        assert result.report.status is HealthStatus.CRITICAL
        assert not result.report.in_range

    def test_inverted_range_has_no_width(self):
        port = FakePositionsPort(positions=[make_position(tick_lower=1000, tick_upper=-1000)])
        result = self._use_case(port).execute(PositionQueryInput(owner="0xabc", nft_id="42"))
        assert result.report.status is HealthStatus.CRITICAL
        assert result.range_width_percent is None
        assert result.pnl.impermanent_loss == Decimal("0")


class TestPositionSnapshots:
    def test_record_snapshot_stores_current_values(self):
        port = FakePositionsPort()
        use_case = RecordPositionSnapshotUseCase(
            positions_port=port,
            fee_estimator=FixedShareFeeEstimator(),
            clock=fixed_clock,
        )
        snapshot = use_case.execute(
            PositionQueryInput(owner="0xabc", nft_id="42", current_price=Decimal("1.05"))
        )
        assert snapshot.id == 1
        assert snapshot.position_id == 10
        assert snapshot.timestamp == NOW
        assert snapshot.fees_earned == Decimal("0.09")
        assert snapshot.liquidity == 1_000_000
        assert snapshot.price == Decimal("1.05")
        assert port.snapshots == [snapshot]

    def test_list_snapshots_defaults_to_last_week(self):
        port = FakePositionsPort()
        port.snapshots = [
            PositionSnapshot(
                id=1,
                position_id=10,
                timestamp=NOW - timedelta(days=1),
                fees_earned=Decimal("0.1"),
                liquidity=1_000_000,
                price=Decimal("1"),
            ),
            PositionSnapshot(
                id=2,
                position_id=10,
                timestamp=NOW - timedelta(days=30),
                fees_earned=Decimal("0.05"),
                liquidity=1_000_000,
                price=Decimal("1"),
            ),
        ]
        use_case = ListPositionSnapshotsUseCase(positions_port=port, clock=fixed_clock)
        result = use_case.execute(ListSnapshotsInput(owner="0xabc", nft_id="42"))
        assert [s.id for s in result] == [1]
        assert port.snapshot_window == (NOW - timedelta(days=7), NOW)

    def test_naive_bounds_are_treated_as_utc(self):
        port = FakePositionsPort()
        use_case = ListPositionSnapshotsUseCase(positions_port=port, clock=fixed_clock)
        use_case.execute(
            ListSnapshotsInput(
                owner="0xabc",
                nft_id="42",
                start=datetime(2026, 2, 1),
                end=datetime(2026, 2, 2),
            )
        )
        assert port.snapshot_window == (
            datetime(2026, 2, 1, tzinfo=timezone.utc),
            datetime(2026, 2, 2, tzinfo=timezone.utc),
        )

    def test_start_after_end_is_rejected(self):
        use_case = ListPositionSnapshotsUseCase(positions_port=FakePositionsPort(), clock=fixed_clock)
        with pytest.raises(PositionQueryInputError):
            use_case.execute(
                ListSnapshotsInput(
                    owner="0xabc",
                    nft_id="42",
                    start=NOW,
                    end=NOW - timedelta(hours=1),
                )
            )
