# fantasy_soccer/routers/roster.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlalchemy.orm import Session

from ..db import get_db
from ..logic.rejections import RejectionReason
from ..logic.roster_engine import RosterEngine
from ..schemas import OperationResult, ReplacePlayerBody, RosterOut, SetRoleBody
from ..services.catalog import PlayerCatalog
from ..services.roster_store import RosterStore
from ..services.time_rules import DeadlinePolicy

router = APIRouter(prefix="/roster", tags=["roster"])

_STATUS_FOR_REASON: dict[RejectionReason, int] = {
    RejectionReason.NOT_FOUND: 404,
    RejectionReason.DEADLINE_PASSED: 423,
    RejectionReason.PERSISTENCE_ERROR: 503,
}


def get_policy() -> DeadlinePolicy:
    """Deadline policy dependency (overridden in tests)."""
    return DeadlinePolicy.from_env()


def get_engine(db: Session = Depends(get_db), policy: DeadlinePolicy = Depends(get_policy)) -> RosterEngine:
    return RosterEngine(RosterStore(db), PlayerCatalog(db), policy=policy)


def _unwrap(result: OperationResult) -> RosterOut:
    if result.ok and result.roster is not None:
        return result.roster
    reason = result.reason or RejectionReason.PERSISTENCE_ERROR
    raise HTTPException(
        status_code=_STATUS_FOR_REASON.get(reason, 409),
        detail=result.model_dump(mode="json", exclude={"roster"}),
    )


@router.get("/{team_id}", response_model=RosterOut)
def read_roster(team_id: int = Path(..., ge=1), engine: RosterEngine = Depends(get_engine)):
    return _unwrap(engine.get_roster(team_id))


@router.post("/{team_id}/replace", response_model=RosterOut)
def replace_player(
    body: ReplacePlayerBody,
    team_id: int = Path(..., ge=1),
    engine: RosterEngine = Depends(get_engine),
):
    """
    Swap the player in one roster slot for another player of the same position.
    Refused after the transfer deadline.
    """
    return _unwrap(engine.replace_player(team_id, body.entry_id, body.player_id))


@router.post("/{team_id}/captain", response_model=RosterOut)
def set_captain(
    body: SetRoleBody,
    team_id: int = Path(..., ge=1),
    engine: RosterEngine = Depends(get_engine),
):
    return _unwrap(engine.set_captain(team_id, body.entry_id))


@router.post("/{team_id}/vice-captain", response_model=RosterOut)
def set_vice_captain(
    body: SetRoleBody,
    team_id: int = Path(..., ge=1),
    engine: RosterEngine = Depends(get_engine),
):
    return _unwrap(engine.set_vice_captain(team_id, body.entry_id))
