"""roster baseline schema

Revision ID: 5b1d0c7e9a42
Revises:
Create Date: 2025-06-01 00:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "5b1d0c7e9a42"
down_revision = None
branch_labels = None
depends_on = None

POSITION = sa.Enum("GK", "DEF", "MID", "FWD", name="position")


def upgrade() -> None:
    # players (catalog)
    op.create_table(
        "players",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("position", POSITION, nullable=False),
        sa.Column("price", sa.Numeric(6, 1), nullable=False),
        sa.Column("club", sa.String(length=80), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_players_name", "players", ["name"])
    op.create_index("ix_players_position", "players", ["position"])

    # fantasy_teams
    op.create_table(
        "fantasy_teams",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("team_name", sa.String(length=120), nullable=False),
        sa.Column("total_points", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("gameweek_points", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("rank", sa.Integer(), nullable=True),
        sa.Column("salary_cap", sa.Numeric(6, 1), nullable=False, server_default=sa.text("100.0")),
        sa.Column("budget_remaining", sa.Numeric(6, 1), nullable=False, server_default=sa.text("100.0")),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_fantasy_teams_user_id", "fantasy_teams", ["user_id"], unique=True)

    # roster_entries
    op.create_table(
        "roster_entries",
        sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
        sa.Column(
            "fantasy_team_id",
            sa.Integer(),
            sa.ForeignKey("fantasy_teams.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("player_id", sa.Integer(), sa.ForeignKey("players.id"), nullable=False),
        sa.Column("squad_position", sa.Integer(), nullable=False),
        sa.Column("slot_position", POSITION, nullable=False),
        sa.Column("is_starter", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("is_captain", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("is_vice_captain", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint(
            "fantasy_team_id", "player_id", name="uq_roster_team_player"
        ),  # inline UNIQUE (SQLite-safe)
        sa.UniqueConstraint(
            "fantasy_team_id", "squad_position", name="uq_roster_team_squad_position"
        ),
    )
    op.create_index("ix_roster_entries_fantasy_team_id", "roster_entries", ["fantasy_team_id"])


def downgrade() -> None:
    # drop in reverse dependency order
    op.drop_index("ix_roster_entries_fantasy_team_id", table_name="roster_entries")
    op.drop_table("roster_entries")

    op.drop_index("ix_fantasy_teams_user_id", table_name="fantasy_teams")
    op.drop_table("fantasy_teams")

    op.drop_index("ix_players_position", table_name="players")
    op.drop_index("ix_players_name", table_name="players")
    op.drop_table("players")
    POSITION.drop(op.get_bind(), checkfirst=True)
