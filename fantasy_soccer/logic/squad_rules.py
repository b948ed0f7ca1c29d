# fantasy_soccer/logic/squad_rules.py
from __future__ import annotations

import enum
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class Position(str, enum.Enum):
    GK = "GK"
    DEF = "DEF"
    MID = "MID"
    FWD = "FWD"


OUTFIELD_POSITIONS: list[Position] = [Position.DEF, Position.MID, Position.FWD]

# ---- Starting XI (inclusive ranges per position) ----
STARTER_COUNT = 11
FORMATION_RANGES: dict[Position, tuple[int, int]] = {
    Position.GK: (1, 1),
    Position.DEF: (3, 5),
    Position.MID: (2, 5),
    Position.FWD: (1, 3),
}

# ---- Full squad (starters + bench) ----
SQUAD_SIZE = 15
SQUAD_COMPOSITION: dict[Position, int] = {
    Position.GK: 2,
    Position.DEF: 5,
    Position.MID: 5,
    Position.FWD: 3,
}

DEFAULT_SALARY_CAP = Decimal("100.0")


class SquadRules(BaseModel):
    model_config = ConfigDict(frozen=True)

    starter_count: int = Field(STARTER_COUNT, description="Exact number of starters.")
    squad_size: int = Field(SQUAD_SIZE, description="Total roster size (starters + bench).")
    formation_ranges: dict[Position, tuple[int, int]] = Field(
        ..., description="Inclusive [min, max] starters per position."
    )
    squad_composition: dict[Position, int] = Field(
        ..., description="Exact number of rostered players per position."
    )
    salary_cap: Decimal = Field(DEFAULT_SALARY_CAP, ge=0, description="Default cap for new teams (millions).")

    @classmethod
    def default(cls) -> "SquadRules":
        return cls(
            starter_count=STARTER_COUNT,
            squad_size=SQUAD_SIZE,
            formation_ranges=FORMATION_RANGES.copy(),
            squad_composition=SQUAD_COMPOSITION.copy(),
            salary_cap=DEFAULT_SALARY_CAP,
        )

    def range_for(self, position: Position) -> tuple[int, int]:
        return self.formation_ranges.get(position, (0, 0))

    @property
    def bench_size(self) -> int:
        return self.squad_size - self.starter_count


def get_default_rules() -> SquadRules:
    """Public accessor for the project-wide squad rules."""
    return SquadRules.default()
