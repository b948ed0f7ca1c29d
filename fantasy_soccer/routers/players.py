# fantasy_soccer/routers/players.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.orm import Session

from .. import models
from ..db import get_db
from ..logic.squad_rules import Position
from ..schemas import PlayerIn, PlayerOut
from ..services.catalog import PlayerCatalog

router = APIRouter(prefix="/players", tags=["players"])


@router.get("", response_model=list[PlayerOut])
def list_players(
    position: Position | None = Query(None, description="Filter by position (GK, DEF, MID, FWD)"),
    db: Session = Depends(get_db),
):
    """Catalog listing ordered by name; used by the replacement picker."""
    return PlayerCatalog(db).list_players(position)


@router.get("/{player_id}", response_model=PlayerOut)
def read_player(player_id: int = Path(..., ge=1), db: Session = Depends(get_db)):
    p = PlayerCatalog(db).get_player(player_id)
    if p is None:
        raise HTTPException(status_code=404, detail="Player not found")
    return p


@router.post("/seed")
def seed_players(items: list[PlayerIn], db: Session = Depends(get_db)):
    """
    Upsert a list of catalog players for dev/test.
    A player's position is fixed once created; re-seeding with another position is a 409.
    """
    upserted: list[int] = []
    for it in items:
        row = db.get(models.Player, it.id) if it.id is not None else None
        if row is not None and row.position != it.position:
            db.rollback()
            raise HTTPException(
                status_code=409,
                detail={"player_id": row.id, "position": row.position.value, "requested": it.position.value},
            )
        if not row:
            row = models.Player(id=it.id) if it.id is not None else models.Player()
            db.add(row)
        row.name = it.name.strip()
        row.position = it.position
        row.price = it.price
        row.club = it.club
        db.flush()
        upserted.append(row.id)
    db.commit()
    return {"ok": True, "upserted": upserted}
