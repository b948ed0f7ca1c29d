# fantasy_soccer/services/roster_store.py
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from .. import models
from ..logic.rejections import PersistenceError
from ..logic.squad import Role, Squad, SquadEntry

__all__ = ["RosterStore", "squad_from_team"]

logger = logging.getLogger(__name__)


def _role_from_row(row: models.RosterEntry) -> Role:
    if row.is_captain:
        return Role.CAPTAIN
    if row.is_vice_captain:
        return Role.VICE_CAPTAIN
    return Role.NONE


def squad_from_team(team: models.FantasyTeam) -> Squad:
    """Snapshot a team's persisted rows into an immutable Squad."""
    return Squad(
        team_id=team.id,
        salary_cap=Decimal(team.salary_cap),
        entries=tuple(
            SquadEntry(
                id=row.id,
                player_id=row.player_id,
                squad_position=row.squad_position,
                slot_position=row.slot_position,
                is_starter=bool(row.is_starter),
                role=_role_from_row(row),
            )
            for row in sorted(team.entries, key=lambda r: r.squad_position)
        ),
    )


class RosterStore:
    """
    Persistence collaborator for the roster engine.

    Every write goes through a single session commit, so a multi-entry update
    is either fully visible or not at all.
    """

    def __init__(self, db: Session):
        self.db = db

    # ---- reads ----

    def load_team(self, team_id: int) -> Optional[models.FantasyTeam]:
        try:
            return self.db.get(models.FantasyTeam, team_id)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise PersistenceError(f"Failed to load team {team_id}: {exc}") from exc

    def team_for_user(self, user_id: str) -> Optional[models.FantasyTeam]:
        try:
            return self.db.query(models.FantasyTeam).filter(models.FantasyTeam.user_id == user_id).first()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise PersistenceError(f"Failed to load team for user {user_id}: {exc}") from exc

    def load_roster(self, team_id: int, for_update: bool = False) -> Optional[Squad]:
        """
        Load the team's roster. With for_update=True the team row is locked
        (SELECT ... FOR UPDATE on databases that support it) and any cached
        state in the session is refreshed.
        """
        stmt = (
            select(models.FantasyTeam)
            .where(models.FantasyTeam.id == team_id)
            .options(selectinload(models.FantasyTeam.entries))
        )
        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        try:
            team = self.db.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise PersistenceError(f"Failed to load roster for team {team_id}: {exc}") from exc
        if team is None:
            return None
        return squad_from_team(team)

    # ---- writes ----

    def commit_roster(self, squad: Squad, budget_remaining: Decimal) -> None:
        """
        Write every entry of `squad` plus the team's budget in one transaction.
        Rolls back and raises PersistenceError on any failure.
        """
        try:
            team = self.db.get(models.FantasyTeam, squad.team_id)
            if team is None:
                raise PersistenceError(f"Team {squad.team_id} disappeared before commit")

            rows = {row.id: row for row in team.entries}
            for entry in squad.entries:
                row = rows.get(entry.id)
                if row is None:
                    raise PersistenceError(f"Roster entry {entry.id} not found for team {squad.team_id}")
                row.player_id = entry.player_id
                row.is_starter = entry.is_starter
                row.is_captain = entry.role is Role.CAPTAIN
                row.is_vice_captain = entry.role is Role.VICE_CAPTAIN

            team.budget_remaining = budget_remaining
            self.db.commit()
        except PersistenceError:
            self.db.rollback()
            raise
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Roster commit failed for team %s", squad.team_id)
            raise PersistenceError(f"Failed to commit roster for team {squad.team_id}: {exc}") from exc

    def create_team(
        self,
        user_id: str,
        team_name: str,
        squad: Squad,
        budget_remaining: Decimal,
    ) -> models.FantasyTeam:
        """
        Bulk-create a team and its roster from an already validated Squad.
        Entry ids on the incoming squad are ignored; the database assigns them.
        """
        team = models.FantasyTeam(
            user_id=user_id,
            team_name=team_name,
            salary_cap=squad.salary_cap,
            budget_remaining=budget_remaining,
        )
        for entry in squad.entries:
            team.entries.append(
                models.RosterEntry(
                    player_id=entry.player_id,
                    squad_position=entry.squad_position,
                    slot_position=entry.slot_position,
                    is_starter=entry.is_starter,
                    is_captain=entry.role is Role.CAPTAIN,
                    is_vice_captain=entry.role is Role.VICE_CAPTAIN,
                )
            )
        self.db.add(team)
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Team creation failed for user %s", user_id)
            raise PersistenceError(f"Failed to create team for user {user_id}: {exc}") from exc
        self.db.refresh(team)
        logger.info("Created team %s (%s) for user %s with %d entries", team.id, team_name, user_id, len(squad.entries))
        return team
