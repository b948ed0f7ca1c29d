# fantasy_soccer/services/catalog.py
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .. import models
from ..logic.rejections import PersistenceError
from ..logic.squad import SquadPlayer
from ..logic.squad_rules import Position

__all__ = ["PlayerCatalog"]


class PlayerCatalog:
    """Read-only access to the draftable player pool."""

    def __init__(self, db: Session):
        self.db = db

    def get_player(self, player_id: int) -> Optional[SquadPlayer]:
        try:
            row = self.db.get(models.Player, player_id)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise PersistenceError(f"Failed to load player {player_id}: {exc}") from exc
        if row is None:
            return None
        return SquadPlayer.model_validate(row)

    def get_players(self, player_ids: Iterable[int]) -> Dict[int, SquadPlayer]:
        ids = set(player_ids)
        if not ids:
            return {}
        try:
            rows = self.db.query(models.Player).filter(models.Player.id.in_(ids)).all()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise PersistenceError(f"Failed to load players {sorted(ids)}: {exc}") from exc
        return {r.id: SquadPlayer.model_validate(r) for r in rows}

    def list_players(self, position: Position | None = None) -> List[SquadPlayer]:
        """All players (optionally one position), ordered by name."""
        query = self.db.query(models.Player)
        if position is not None:
            query = query.filter(models.Player.position == position)
        try:
            rows = query.order_by(models.Player.name.asc(), models.Player.id.asc()).all()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise PersistenceError(f"Failed to list players: {exc}") from exc
        return [SquadPlayer.model_validate(r) for r in rows]
