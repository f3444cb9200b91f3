from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, Query

from lp_pnl.api.deps import (
    get_list_position_snapshots_use_case,
    get_list_positions_use_case,
    get_position_health_use_case,
    get_position_pnl_use_case,
    get_record_position_snapshot_use_case,
)
from lp_pnl.api.schemas.positions import (
    PositionHealthResponse,
    PositionPnlResponse,
    PositionResponse,
    PositionSnapshotRequest,
    PositionSnapshotResponse,
    PositionWithPnlResponse,
)
from lp_pnl.application.dto.positions import ListSnapshotsInput, PositionQueryInput
from lp_pnl.application.use_cases.get_position_health import GetPositionHealthUseCase
from lp_pnl.application.use_cases.get_position_pnl import GetPositionPnlUseCase
from lp_pnl.application.use_cases.list_position_snapshots import ListPositionSnapshotsUseCase
from lp_pnl.application.use_cases.list_positions import ListPositionsUseCase
from lp_pnl.application.use_cases.record_position_snapshot import RecordPositionSnapshotUseCase
from lp_pnl.domain.entities.pnl import PositionPnL
from lp_pnl.domain.entities.position import Position, PositionSnapshot
from lp_pnl.domain.exceptions import (
    PositionNotFoundError,
    PositionOwnershipError,
    PositionQueryInputError,
)

router = APIRouter()


def _raise_http(exc: Exception) -> NoReturn:
    if isinstance(exc, PositionNotFoundError):
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    if isinstance(exc, PositionOwnershipError):
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    raise HTTPException(status_code=400, detail=str(exc)) from exc


def _position_fields(position: Position) -> dict:
    return {
        "nft_id": position.nft_id,
        "owner": position.owner,
        "pool_id": position.pool_id,
        "tick_lower": position.tick_lower,
        "tick_upper": position.tick_upper,
        "liquidity": str(position.liquidity),
        "created_at": position.created_at,
    }


def _pnl_response(pnl: PositionPnL) -> PositionPnlResponse:
    return PositionPnlResponse(
        fees_earned=pnl.fees_earned,
        impermanent_loss=pnl.impermanent_loss,
        gas_spent=pnl.gas_spent,
        net_pnl=pnl.net_pnl,
    )


def _snapshot_response(snapshot: PositionSnapshot) -> PositionSnapshotResponse:
    return PositionSnapshotResponse(
        id=snapshot.id,
        position_id=snapshot.position_id,
        timestamp=snapshot.timestamp,
        fees_earned=snapshot.fees_earned,
        liquidity=str(snapshot.liquidity),
        price=snapshot.price,
    )


@router.get("/v1/positions/{owner}", response_model=list[PositionResponse])
def list_positions(
    owner: str,
    use_case: ListPositionsUseCase = Depends(get_list_positions_use_case),
):
    try:
        positions = use_case.execute(owner=owner)
    except PositionQueryInputError as exc:
        _raise_http(exc)
    return [PositionResponse(**_position_fields(position)) for position in positions]


@router.get("/v1/positions/{owner}/{nft_id}", response_model=PositionWithPnlResponse)
def get_position_with_pnl(
    owner: str,
    nft_id: str,
    initial_price: Decimal = Query(Decimal("1.0")),
    current_price: Decimal = Query(Decimal("1.0")),
    current_tick: int | None = Query(None),
    gas_spent: Decimal = Query(Decimal("0")),
    current_sqrt_price_x96: int | None = Query(None),
    use_case: GetPositionPnlUseCase = Depends(get_position_pnl_use_case),
):
    try:
        result = use_case.execute(
            PositionQueryInput(
                owner=owner,
                nft_id=nft_id,
                initial_price=initial_price,
                current_price=current_price,
                current_tick=current_tick,
                gas_spent=gas_spent,
                current_sqrt_price_x96=current_sqrt_price_x96,
            )
        )
    except (PositionNotFoundError, PositionOwnershipError, PositionQueryInputError) as exc:
        _raise_http(exc)

    return PositionWithPnlResponse(
        **_position_fields(result.position),
        pnl=_pnl_response(result.pnl),
        in_range=result.in_range,
        current_tick=result.current_tick,
        current_price=result.current_price,
        swaps_count=result.swaps_count,
    )


@router.get("/v1/positions/{owner}/{nft_id}/health", response_model=PositionHealthResponse)
def get_position_health(
    owner: str,
    nft_id: str,
    initial_price: Decimal = Query(Decimal("1.0")),
    current_price: Decimal = Query(Decimal("1.0")),
    current_tick: int | None = Query(None),
    gas_spent: Decimal = Query(Decimal("0")),
    current_sqrt_price_x96: int | None = Query(None),
    use_case: GetPositionHealthUseCase = Depends(get_position_health_use_case),
):
    try:
        result = use_case.execute(
            PositionQueryInput(
                owner=owner,
                nft_id=nft_id,
                initial_price=initial_price,
                current_price=current_price,
                current_tick=current_tick,
                gas_spent=gas_spent,
                current_sqrt_price_x96=current_sqrt_price_x96,
            )
        )
    except (PositionNotFoundError, PositionOwnershipError, PositionQueryInputError) as exc:
        _raise_http(exc)

    return PositionHealthResponse(
        nft_id=result.position.nft_id,
        status=result.report.status.value,
        details=result.report.message,
        in_range=result.report.in_range,
        current_tick=result.current_tick,
        distance_to_edge=result.report.distance_to_edge,
        warning_distance=result.report.warning_distance,
        range_width_percent=result.range_width_percent,
        pnl=_pnl_response(result.pnl),
    )


@router.post("/v1/positions/{owner}/{nft_id}/snapshots", response_model=PositionSnapshotResponse)
def record_position_snapshot(
    owner: str,
    nft_id: str,
    req: PositionSnapshotRequest,
    use_case: RecordPositionSnapshotUseCase = Depends(get_record_position_snapshot_use_case),
):
    try:
        snapshot = use_case.execute(
            PositionQueryInput(
                owner=owner,
                nft_id=nft_id,
                initial_price=req.initial_price,
                current_price=req.current_price,
                gas_spent=req.gas_spent,
                current_sqrt_price_x96=req.current_sqrt_price_x96,
            )
        )
    except (PositionNotFoundError, PositionOwnershipError, PositionQueryInputError) as exc:
        _raise_http(exc)
    return _snapshot_response(snapshot)


@router.get("/v1/positions/{owner}/{nft_id}/snapshots", response_model=list[PositionSnapshotResponse])
def list_position_snapshots(
    owner: str,
    nft_id: str,
    start: datetime | None = None,
    end: datetime | None = None,
    use_case: ListPositionSnapshotsUseCase = Depends(get_list_position_snapshots_use_case),
):
    try:
        snapshots = use_case.execute(ListSnapshotsInput(owner=owner, nft_id=nft_id, start=start, end=end))
    except (PositionNotFoundError, PositionOwnershipError, PositionQueryInputError) as exc:
        _raise_http(exc)
    return [_snapshot_response(snapshot) for snapshot in snapshots]
