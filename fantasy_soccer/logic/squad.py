# fantasy_soccer/logic/squad.py
from __future__ import annotations

import enum
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from .squad_rules import OUTFIELD_POSITIONS, Position


class Role(str, enum.Enum):
    NONE = "NONE"
    CAPTAIN = "CAPTAIN"
    VICE_CAPTAIN = "VICE_CAPTAIN"


class SquadPlayer(BaseModel):
    """Read-only catalog view of a player, detached from any DB session."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    name: str
    position: Position
    price: Decimal
    club: Optional[str] = None


class SquadEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    player_id: int
    squad_position: int
    slot_position: Position
    is_starter: bool
    role: Role = Role.NONE

    @property
    def is_captain(self) -> bool:
        return self.role is Role.CAPTAIN

    @property
    def is_vice_captain(self) -> bool:
        return self.role is Role.VICE_CAPTAIN


class Squad(BaseModel):
    """
    Immutable roster aggregate for one fantasy team.

    Transitions (`with_player`, `with_role`) return a new Squad and leave this
    one unchanged.
    """

    model_config = ConfigDict(frozen=True)

    team_id: int
    salary_cap: Decimal
    entries: tuple[SquadEntry, ...]

    def entry(self, entry_id: int) -> Optional[SquadEntry]:
        for e in self.entries:
            if e.id == entry_id:
                return e
        return None

    def player_ids(self) -> List[int]:
        return [e.player_id for e in self.entries]

    def holder_of(self, role: Role) -> Optional[SquadEntry]:
        for e in self.entries:
            if e.role is role:
                return e
        return None

    def starters(self) -> List[SquadEntry]:
        return [e for e in self.entries if e.is_starter]

    def bench(self) -> List[SquadEntry]:
        return [e for e in self.entries if not e.is_starter]

    def with_player(self, entry_id: int, player_id: int) -> "Squad":
        entries = tuple(
            e.model_copy(update={"player_id": player_id}) if e.id == entry_id else e
            for e in self.entries
        )
        return self.model_copy(update={"entries": entries})

    def with_role(self, entry_id: int, role: Role) -> "Squad":
        """
        Move `role` onto `entry_id` in a single step: the previous holder drops
        to NONE and the target takes the tag. Whatever role the target held
        before is overwritten, which the validator reports as a role conflict.
        """
        if role is Role.NONE:
            raise ValueError("Role.NONE cannot be assigned; assign another role instead")

        def _next(e: SquadEntry) -> SquadEntry:
            if e.id == entry_id:
                return e.model_copy(update={"role": role})
            if e.role is role:
                return e.model_copy(update={"role": Role.NONE})
            return e

        return self.model_copy(update={"entries": tuple(_next(e) for e in self.entries)})


# ---- Pure helpers over a squad + resolved players ----


def squad_cost(squad: Squad, players: Mapping[int, SquadPlayer]) -> Decimal:
    total = Decimal("0")
    for e in squad.entries:
        p = players.get(e.player_id)
        if p is not None:
            total += p.price
    return total


def count_by_position(entries: Iterable[SquadEntry], players: Mapping[int, SquadPlayer]) -> Dict[Position, int]:
    out: Dict[Position, int] = {pos: 0 for pos in Position}
    for e in entries:
        p = players.get(e.player_id)
        # Unknown players count against their slot so counts stay stable.
        pos = p.position if p is not None else e.slot_position
        out[pos] += 1
    return out


def formation_counts(squad: Squad, players: Mapping[int, SquadPlayer]) -> Dict[str, int]:
    counts = count_by_position(squad.starters(), players)
    return {
        "defenders": counts[Position.DEF],
        "midfielders": counts[Position.MID],
        "forwards": counts[Position.FWD],
    }


def formation_label(squad: Squad, players: Mapping[int, SquadPlayer]) -> str:
    """Formation as 'D-M-F', e.g. '4-4-2'."""
    counts = count_by_position(squad.starters(), players)
    return "-".join(str(counts[pos]) for pos in OUTFIELD_POSITIONS)
