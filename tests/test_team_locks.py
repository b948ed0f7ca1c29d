import gc
import threading
import time
from decimal import Decimal
from types import SimpleNamespace

import pytest

from conftest import BEFORE_DEADLINE, CATALOG, build_standard_squad, open_policy

from fantasy_soccer.logic.rejections import RejectionReason
from fantasy_soccer.logic.roster_engine import RosterEngine
from fantasy_soccer.logic.squad import SquadPlayer
from fantasy_soccer.utils.team_locks import LockTimeout, _team_locks, team_lock

TEAM_ID = 7


class FakeCatalog:
    def __init__(self):
        self.players = {
            pid: SquadPlayer(id=pid, name=name, position=pos, price=Decimal(price), club=club)
            for pid, name, pos, price, club in CATALOG
        }

    def get_player(self, player_id):
        return self.players.get(player_id)

    def get_players(self, player_ids):
        return {pid: self.players[pid] for pid in player_ids if pid in self.players}


class SlowStore:
    """Dict-backed store whose locked reads stall, to widen any race window."""

    def __init__(self, squad, budget_remaining, delay=0.05):
        self.squad = squad
        self.team = SimpleNamespace(
            id=squad.team_id,
            user_id="user-7",
            team_name="Race Rovers",
            total_points=0,
            gameweek_points=0,
            rank=None,
            salary_cap=squad.salary_cap,
            budget_remaining=budget_remaining,
        )
        self.delay = delay
        self.commits = 0

    def load_team(self, team_id):
        return self.team if team_id == self.team.id else None

    def load_roster(self, team_id, for_update=False):
        if team_id != self.team.id:
            return None
        snapshot = self.squad
        if for_update:
            time.sleep(self.delay)
        return snapshot

    def commit_roster(self, squad, budget_remaining):
        self.squad = squad
        self.team.budget_remaining = budget_remaining
        self.commits += 1


def _engine(store, **kwargs):
    return RosterEngine(store, FakeCatalog(), policy=open_policy(), clock=lambda: BEFORE_DEADLINE, **kwargs)


def test_concurrent_replacements_are_serialized():
    # cap 101.0, cost 99.5: room for one of the two upgrades, not both
    squad = build_standard_squad(team_id=TEAM_ID, salary_cap="101.0")
    store = SlowStore(squad, Decimal("1.5"))
    engine = _engine(store)

    by_player = {e.player_id: e.id for e in squad.entries}
    jobs = [
        (by_player[13], 17),  # DEF 4.0 -> 5.5
        (by_player[14], 21),  # MID 4.5 -> 5.5
    ]
    barrier = threading.Barrier(len(jobs))
    results = [None] * len(jobs)

    def run(i, entry_id, player_id):
        barrier.wait()
        results[i] = engine.replace_player(TEAM_ID, entry_id, player_id)

    threads = [threading.Thread(target=run, args=(i, *job)) for i, job in enumerate(jobs)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)

    assert sorted(r.ok for r in results) == [False, True]
    failed = next(r for r in results if not r.ok)
    assert failed.reason is RejectionReason.BUDGET_EXCEEDED
    assert store.commits == 1
    assert store.team.budget_remaining >= 0


def test_lock_timeout_is_a_retryable_persistence_error():
    store = SlowStore(build_standard_squad(team_id=TEAM_ID), Decimal("0.5"))
    engine = _engine(store, lock_timeout=0.05)
    with team_lock(TEAM_ID):
        result = engine.set_captain(TEAM_ID, 7)
    assert result.reason is RejectionReason.PERSISTENCE_ERROR
    assert result.retryable is True
    assert store.commits == 0


def test_locks_are_per_team():
    with team_lock(101):
        with team_lock(102, timeout=0):
            pass
        with pytest.raises(LockTimeout):
            with team_lock(101, timeout=0):
                pass


def test_lock_released_after_error():
    with pytest.raises(RuntimeError):
        with team_lock(103):
            raise RuntimeError("boom")
    with team_lock(103, timeout=0):
        pass


def test_idle_team_locks_are_pruned():
    with team_lock(104):
        assert 104 in _team_locks
    gc.collect()
    assert 104 not in _team_locks
