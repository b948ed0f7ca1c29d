# fantasy_soccer/routers/teams.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.orm import Session

from ..db import get_db
from ..logic.roster_engine import budget_after
from ..logic.roster_validator import validate_squad
from ..logic.squad import Role, Squad, SquadEntry
from ..logic.squad_rules import get_default_rules
from ..schemas import SeedTeamBody, TeamOut
from ..services.catalog import PlayerCatalog
from ..services.roster_store import RosterStore

router = APIRouter(prefix="/teams", tags=["teams"])

logger = logging.getLogger(__name__)


@router.get("/by-user/{user_id}", response_model=TeamOut)
def team_for_user(user_id: str, db: Session = Depends(get_db)):
    team = RosterStore(db).team_for_user(user_id)
    if not team:
        # No team yet: the client should send the user to team creation.
        raise HTTPException(status_code=404, detail="No fantasy team for this user")
    return team


@router.get("/{team_id}", response_model=TeamOut)
def read_team(team_id: int = Path(..., ge=1), db: Session = Depends(get_db)):
    team = RosterStore(db).load_team(team_id)
    if not team:
        raise HTTPException(status_code=404, detail="Team not found")
    return team


@router.post("/debug/seed", response_model=TeamOut, status_code=status.HTTP_201_CREATED)
def seed_team(body: SeedTeamBody, db: Session = Depends(get_db)):
    """
    Dev/test: create a team with a full roster in one shot.
    The roster must already satisfy every squad rule.
    """
    store = RosterStore(db)
    catalog = PlayerCatalog(db)
    rules = get_default_rules()

    if store.team_for_user(body.user_id):
        raise HTTPException(status_code=409, detail="User already has a fantasy team")

    n = len(body.picks)
    if body.captain_index >= n or body.vice_captain_index >= n:
        raise HTTPException(status_code=422, detail="captain/vice-captain index out of range")

    players = catalog.get_players(p.player_id for p in body.picks)
    missing = sorted({p.player_id for p in body.picks} - set(players))
    if missing:
        raise HTTPException(status_code=404, detail={"unknown_player_ids": missing})

    entries = tuple(
        SquadEntry(
            id=i + 1,  # placeholder; the database assigns real ids
            player_id=pick.player_id,
            squad_position=i + 1,
            slot_position=players[pick.player_id].position,
            is_starter=pick.is_starter,
        )
        for i, pick in enumerate(body.picks)
    )
    salary_cap = rules.salary_cap if body.salary_cap is None else body.salary_cap
    squad = Squad(team_id=0, salary_cap=salary_cap, entries=entries)
    squad = squad.with_role(body.captain_index + 1, Role.CAPTAIN)
    squad = squad.with_role(body.vice_captain_index + 1, Role.VICE_CAPTAIN)

    ok, detail = validate_squad(squad, players, rules)
    if not ok:
        reason = detail["reason"]
        logger.warning("Seed for user %s rejected: %s", body.user_id, reason.value)
        raise HTTPException(
            status_code=400,
            detail={"reason": reason.value, "message": reason.message, "explain": detail["explain"]},
        )

    return store.create_team(body.user_id, body.team_name, squad, budget_after(squad, players))
