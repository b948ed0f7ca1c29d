# fantasy_soccer/models.py
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy import (
    Enum as SAEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .db import Base
from .logic.squad_rules import DEFAULT_SALARY_CAP, Position


# --- Player catalog (read-only for the roster engine) ---
class Player(Base):
    __tablename__ = "players"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    position: Mapped[Position] = mapped_column(SAEnum(Position), nullable=False, index=True)
    price: Mapped[Decimal] = mapped_column(Numeric(6, 1), nullable=False)  # millions
    club: Mapped[str | None] = mapped_column(String(80), nullable=True)  # display only

    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)


class FantasyTeam(Base):
    __tablename__ = "fantasy_teams"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    team_name: Mapped[str] = mapped_column(String(120), nullable=False)

    # Written by the external scoring process only
    total_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    gameweek_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rank: Mapped[int | None] = mapped_column(Integer, nullable=True)

    salary_cap: Mapped[Decimal] = mapped_column(Numeric(6, 1), nullable=False, default=DEFAULT_SALARY_CAP)
    budget_remaining: Mapped[Decimal] = mapped_column(Numeric(6, 1), nullable=False, default=DEFAULT_SALARY_CAP)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    entries = relationship(
        "RosterEntry",
        back_populates="team",
        cascade="all, delete-orphan",
        order_by="RosterEntry.squad_position",
    )


class RosterEntry(Base):
    __tablename__ = "roster_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    fantasy_team_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("fantasy_teams.id", ondelete="CASCADE"), index=True
    )
    player_id: Mapped[int] = mapped_column(Integer, ForeignKey("players.id"), nullable=False)

    squad_position: Mapped[int] = mapped_column(Integer, nullable=False)  # display order, 1-based
    slot_position: Mapped[Position] = mapped_column(SAEnum(Position), nullable=False)  # fixed per slot

    is_starter: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_captain: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_vice_captain: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    team = relationship("FantasyTeam", back_populates="entries")
    player = relationship("Player")

    __table_args__ = (
        UniqueConstraint("fantasy_team_id", "player_id", name="uq_roster_team_player"),
        UniqueConstraint("fantasy_team_id", "squad_position", name="uq_roster_team_squad_position"),
    )
