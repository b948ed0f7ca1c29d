# tests/conftest.py
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Make sure models are imported so Base has all tables
from fantasy_soccer import models  # noqa: F401
from fantasy_soccer.db import Base, get_db
from fantasy_soccer.logic.roster_engine import RosterEngine
from fantasy_soccer.logic.squad import Role, Squad, SquadEntry
from fantasy_soccer.logic.squad_rules import Position
from fantasy_soccer.main import app
from fantasy_soccer.routers.roster import get_policy
from fantasy_soccer.services.catalog import PlayerCatalog
from fantasy_soccer.services.roster_store import RosterStore
from fantasy_soccer.services.time_rules import DeadlinePolicy

TEST_DATABASE_URL = "sqlite+pysqlite://"

DEADLINE = datetime(2025, 6, 30, tzinfo=timezone.utc)
BEFORE_DEADLINE = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)
AFTER_DEADLINE = datetime(2025, 7, 1, 12, 0, tzinfo=timezone.utc)

GK, DEF, MID, FWD = Position.GK, Position.DEF, Position.MID, Position.FWD

# (id, name, position, price, club)
CATALOG = [
    # -- rostered: starters (4-4-2)
    (1, "Aldo Keeper", GK, "5.0", "Northfield"),
    (2, "Ben Back", DEF, "5.0", "Northfield"),
    (3, "Cal Centre", DEF, "6.0", "Eastport"),
    (4, "Dan Wide", DEF, "5.5", "Westbury"),
    (5, "Eli Stopper", DEF, "5.0", "Southgate"),
    (6, "Finn Playmaker", MID, "10.0", "Eastport"),
    (7, "Gus Engine", MID, "8.0", "Westbury"),
    (8, "Hal Winger", MID, "7.0", "Northfield"),
    (9, "Ike Holder", MID, "6.5", "Southgate"),
    (10, "Jon Striker", FWD, "11.0", "Westbury"),
    (11, "Kai Poacher", FWD, "9.0", "Eastport"),
    # -- rostered: bench
    (12, "Lou Backup", GK, "4.0", "Southgate"),
    (13, "Max Fullback", DEF, "4.0", "Eastport"),
    (14, "Ned Runner", MID, "4.5", "Westbury"),
    (15, "Oli Target", FWD, "9.0", "Northfield"),
    # -- free agents
    (16, "Pat Pricey", DEF, "6.0", "Northfield"),
    (17, "Quin Fit", DEF, "5.5", "Westbury"),
    (18, "Rex Cheap", MID, "4.5", "Southgate"),
    (19, "Sol Spare", GK, "4.0", "Eastport"),
    (20, "Tom Bargain", FWD, "4.5", "Southgate"),
    (21, "Uli Upgrade", MID, "5.5", "Eastport"),
]

STARTER_IDS = list(range(1, 12))
BENCH_IDS = [12, 13, 14, 15]
CAPTAIN_ID = 6
VICE_CAPTAIN_ID = 10
SQUAD_COST = Decimal("99.5")


def open_policy(**overrides) -> DeadlinePolicy:
    data = {"transfer_deadline": DEADLINE, "lock_roles_after_deadline": False}
    data.update(overrides)
    return DeadlinePolicy(**data)


def player_prices() -> dict[int, Decimal]:
    return {pid: Decimal(price) for pid, _, _, price, _ in CATALOG}


def build_standard_squad(team_id: int = 0, salary_cap: str = "100.0") -> Squad:
    """The 15-man squad above, in squad order, with placeholder entry ids 1..15."""
    positions = {pid: pos for pid, _, pos, _, _ in CATALOG}
    entries = []
    for i, pid in enumerate(STARTER_IDS + BENCH_IDS, start=1):
        role = Role.NONE
        if pid == CAPTAIN_ID:
            role = Role.CAPTAIN
        elif pid == VICE_CAPTAIN_ID:
            role = Role.VICE_CAPTAIN
        entries.append(
            SquadEntry(
                id=i,
                player_id=pid,
                squad_position=i,
                slot_position=positions[pid],
                is_starter=pid in STARTER_IDS,
                role=role,
            )
        )
    return Squad(team_id=team_id, salary_cap=Decimal(salary_cap), entries=tuple(entries))


@pytest.fixture()
def engine():
    # Fresh in-memory DB per test; StaticPool keeps every session on one connection.
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db_session(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def catalog_rows(db_session):
    for pid, name, pos, price, club in CATALOG:
        db_session.add(models.Player(id=pid, name=name, position=pos, price=Decimal(price), club=club))
    db_session.commit()
    return CATALOG


@pytest.fixture()
def team_id(db_session, catalog_rows):
    """A persisted team holding the standard squad (cost 99.5, cap 100.0)."""
    team = RosterStore(db_session).create_team(
        user_id="user-1",
        team_name="Test Athletic",
        squad=build_standard_squad(),
        budget_remaining=Decimal("100.0") - SQUAD_COST,
    )
    return team.id


@pytest.fixture()
def make_engine(db_session):
    def _make(policy: DeadlinePolicy | None = None, now: datetime = BEFORE_DEADLINE, **kwargs) -> RosterEngine:
        return RosterEngine(
            RosterStore(db_session),
            PlayerCatalog(db_session),
            policy=policy or open_policy(),
            clock=lambda: now,
            **kwargs,
        )

    return _make


@pytest.fixture()
def entry_ids(db_session, team_id):
    """player_id -> roster entry id for the seeded team."""
    rows = db_session.query(models.RosterEntry).filter(models.RosterEntry.fantasy_team_id == team_id).all()
    return {r.player_id: r.id for r in rows}


@pytest.fixture()
def client(db_session):
    # Override app DB dependency to use our shared in-memory session
    def _get_db_override():
        yield db_session

    app.dependency_overrides[get_db] = _get_db_override
    app.dependency_overrides[get_policy] = lambda: DeadlinePolicy(
        transfer_deadline=datetime(2100, 1, 1, tzinfo=timezone.utc)
    )

    from starlette.testclient import TestClient

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
