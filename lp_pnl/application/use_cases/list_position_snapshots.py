from __future__ import annotations

from datetime import datetime, timedelta, timezone

from lp_pnl.application.dto.positions import ListSnapshotsInput
from lp_pnl.application.ports.positions_port import PositionsPort
from lp_pnl.application.use_cases.position_common import Clock, load_owned_position, utc_now
from lp_pnl.domain.entities.position import PositionSnapshot
from lp_pnl.domain.exceptions import PositionQueryInputError


DEFAULT_SNAPSHOT_WINDOW = timedelta(days=7)


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class ListPositionSnapshotsUseCase:
    def __init__(self, *, positions_port: PositionsPort, clock: Clock = utc_now):
        self._positions_port = positions_port
        self._clock = clock

    def execute(self, command: ListSnapshotsInput) -> list[PositionSnapshot]:
        end = _as_utc(command.end) or self._clock()
        start = _as_utc(command.start) or (end - DEFAULT_SNAPSHOT_WINDOW)
        if start > end:
            raise PositionQueryInputError("start must be before end.")

        position = load_owned_position(
            self._positions_port,
            owner=command.owner,
            nft_id=command.nft_id,
        )
        return self._positions_port.get_snapshots(position_id=position.id, start=start, end=end)
