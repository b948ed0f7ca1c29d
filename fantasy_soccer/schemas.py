# fantasy_soccer/schemas.py
from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from . import models
from .logic.rejections import RejectionReason
from .logic.squad import Squad, SquadPlayer, formation_counts, formation_label
from .logic.squad_rules import Position


# -----------------------
# Players (catalog)
# -----------------------
class PlayerIn(BaseModel):
    id: int | None = Field(None, ge=1, description="Optional explicit id (upserts when present).")
    name: str = Field(..., min_length=1, max_length=120)
    position: Position
    price: Decimal = Field(..., ge=0, max_digits=6, decimal_places=1)
    club: str | None = None


class PlayerOut(BaseModel):
    id: int
    name: str
    position: Position
    price: Decimal
    club: str | None = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


# -----------------------
# Fantasy team
# -----------------------
class TeamOut(BaseModel):
    id: int
    user_id: str
    team_name: str
    total_points: int
    gameweek_points: int
    rank: int | None = None
    salary_cap: Decimal
    budget_remaining: Decimal

    model_config = ConfigDict(from_attributes=True)


class SeedPick(BaseModel):
    player_id: int = Field(..., ge=1)
    is_starter: bool = False


class SeedTeamBody(BaseModel):
    """
    Dev/test seeding of a full roster. Picks are stored in the given order;
    captain/vice-captain are indexes into `picks`.
    """

    user_id: str = Field(..., min_length=1, max_length=64)
    team_name: str = Field(..., min_length=1, max_length=120)
    picks: List[SeedPick] = Field(..., min_length=1)
    captain_index: int = Field(..., ge=0)
    vice_captain_index: int = Field(..., ge=0)
    salary_cap: Decimal | None = Field(None, ge=0)


# -----------------------
# Roster view
# -----------------------
class RosterEntryOut(BaseModel):
    id: int
    squad_position: int
    slot_position: Position
    is_starter: bool
    is_captain: bool
    is_vice_captain: bool
    player: PlayerOut | None = None


class FormationOut(BaseModel):
    defenders: int
    midfielders: int
    forwards: int
    label: str


class RosterOut(BaseModel):
    team: TeamOut
    entries: List[RosterEntryOut]
    formation: FormationOut
    captain_entry_id: int | None = None
    vice_captain_entry_id: int | None = None
    can_make_changes: bool

    @classmethod
    def from_squad(
        cls,
        team: models.FantasyTeam,
        squad: Squad,
        players: Mapping[int, SquadPlayer],
        can_make_changes: bool,
    ) -> RosterOut:
        entries = []
        for e in squad.entries:
            p = players.get(e.player_id)
            entries.append(
                RosterEntryOut(
                    id=e.id,
                    squad_position=e.squad_position,
                    slot_position=e.slot_position,
                    is_starter=e.is_starter,
                    is_captain=e.is_captain,
                    is_vice_captain=e.is_vice_captain,
                    player=PlayerOut.model_validate(p) if p is not None else None,
                )
            )
        captain = next((e for e in squad.entries if e.is_captain), None)
        vice = next((e for e in squad.entries if e.is_vice_captain), None)
        return cls(
            team=TeamOut.model_validate(team),
            entries=entries,
            formation=FormationOut(**formation_counts(squad, players), label=formation_label(squad, players)),
            captain_entry_id=captain.id if captain else None,
            vice_captain_entry_id=vice.id if vice else None,
            can_make_changes=can_make_changes,
        )

    def starters(self) -> List[RosterEntryOut]:
        return [e for e in self.entries if e.is_starter]

    def bench(self) -> List[RosterEntryOut]:
        return [e for e in self.entries if not e.is_starter]


# -----------------------
# Engine requests / results
# -----------------------
class ReplacePlayerBody(BaseModel):
    entry_id: int = Field(..., ge=1)
    player_id: int = Field(..., ge=1)


class SetRoleBody(BaseModel):
    entry_id: int = Field(..., ge=1)


class OperationResult(BaseModel):
    """Tagged result: {ok: true, roster} or {ok: false, reason, message}."""

    ok: bool
    roster: Optional[RosterOut] = None
    reason: Optional[RejectionReason] = None
    message: Optional[str] = None
    retryable: bool = False
    detail: Optional[Dict[str, Any]] = None

    @classmethod
    def accepted(cls, roster: RosterOut) -> OperationResult:
        return cls(ok=True, roster=roster)

    @classmethod
    def rejected(cls, reason: RejectionReason, detail: Optional[Dict[str, Any]] = None) -> OperationResult:
        return cls(
            ok=False,
            reason=reason,
            message=reason.message,
            retryable=reason.is_retryable,
            detail=detail,
        )
