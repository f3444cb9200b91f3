from __future__ import annotations

from fastapi import HTTPException

from lp_pnl.application.use_cases.get_position_health import GetPositionHealthUseCase
from lp_pnl.application.use_cases.get_position_pnl import GetPositionPnlUseCase
from lp_pnl.application.use_cases.list_position_snapshots import ListPositionSnapshotsUseCase
from lp_pnl.application.use_cases.list_positions import ListPositionsUseCase
from lp_pnl.application.use_cases.record_position_snapshot import RecordPositionSnapshotUseCase
from lp_pnl.domain.exceptions import InvalidInputError
from lp_pnl.domain.services.fee_estimation import FixedShareFeeEstimator
from lp_pnl.domain.services.health import HealthThresholds
from lp_pnl.infrastructure.db.engine import get_engine
from lp_pnl.infrastructure.db.repositories.positions_repository import SqlPositionsRepository
from lp_pnl.shared.config import get_settings


def _get_db_engine():
    settings = get_settings()
    if not settings.postgres_dsn:
        raise HTTPException(status_code=500, detail="POSTGRES_DSN is required.")
    return get_engine(settings.postgres_dsn)


def _get_positions_repository() -> SqlPositionsRepository:
    return SqlPositionsRepository(_get_db_engine())


def _get_fee_estimator() -> FixedShareFeeEstimator:
    settings = get_settings()
    try:
        return FixedShareFeeEstimator(fee_rate=settings.fee_rate, pool_share=settings.pool_share)
    except InvalidInputError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


def _get_health_thresholds() -> HealthThresholds:
    settings = get_settings()
    try:
        return HealthThresholds(
            warning_proximity=settings.health_warning_proximity,
            critical_loss=settings.health_critical_loss,
        )
    except InvalidInputError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


def get_list_positions_use_case() -> ListPositionsUseCase:
    return ListPositionsUseCase(positions_port=_get_positions_repository())


def get_position_pnl_use_case() -> GetPositionPnlUseCase:
    settings = get_settings()
    return GetPositionPnlUseCase(
        positions_port=_get_positions_repository(),
        fee_estimator=_get_fee_estimator(),
        swap_lookback_hours=settings.swap_lookback_hours,
    )


def get_position_health_use_case() -> GetPositionHealthUseCase:
    settings = get_settings()
    return GetPositionHealthUseCase(
        positions_port=_get_positions_repository(),
        fee_estimator=_get_fee_estimator(),
        thresholds=_get_health_thresholds(),
        swap_lookback_hours=settings.swap_lookback_hours,
    )


def get_record_position_snapshot_use_case() -> RecordPositionSnapshotUseCase:
    settings = get_settings()
    return RecordPositionSnapshotUseCase(
        positions_port=_get_positions_repository(),
        fee_estimator=_get_fee_estimator(),
        swap_lookback_hours=settings.swap_lookback_hours,
    )


def get_list_position_snapshots_use_case() -> ListPositionSnapshotsUseCase:
    return ListPositionSnapshotsUseCase(positions_port=_get_positions_repository())
