# fantasy_soccer/logic/roster_engine.py
from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, Optional, Tuple, Union

from ..schemas import OperationResult, RosterOut
from ..services.catalog import PlayerCatalog
from ..services.roster_store import RosterStore
from ..services.time_rules import DeadlinePolicy, utc_now
from ..utils.team_locks import LockTimeout, team_lock
from .rejections import PersistenceError, RejectionReason
from .roster_validator import validate_squad
from .squad import Role, Squad, SquadPlayer, squad_cost
from .squad_rules import SquadRules

logger = logging.getLogger(__name__)

Players = Dict[int, SquadPlayer]
# A candidate builder returns either the next Squad, None for "nothing to change",
# or a (reason, explain) rejection.
Candidate = Union[Squad, None, Tuple[RejectionReason, Dict]]
CandidateBuilder = Callable[[Squad], Candidate]


class RosterEngine:
    """
    Transactional roster mutations for one fantasy team at a time.

    Each mutation follows the same steps under the team's writer lock:
    load current squad -> build candidate -> validate -> commit or reject.
    A rejection never writes anything.
    """

    def __init__(
        self,
        store: RosterStore,
        catalog: PlayerCatalog,
        policy: Optional[DeadlinePolicy] = None,
        rules: Optional[SquadRules] = None,
        clock: Callable[[], datetime] = utc_now,
        lock_timeout: Optional[float] = None,
    ):
        self.store = store
        self.catalog = catalog
        self.policy = policy or DeadlinePolicy.from_env()
        self.rules = rules or SquadRules.default()
        self.clock = clock
        self.lock_timeout = lock_timeout

    # ---------------- reads ----------------

    def get_roster(self, team_id: int) -> OperationResult:
        """Lock-free read of the last committed roster."""
        try:
            return self._view(team_id)
        except PersistenceError as exc:
            logger.exception("Roster read failed for team %s: %s", team_id, exc)
            return OperationResult.rejected(RejectionReason.PERSISTENCE_ERROR)

    def can_make_changes(self) -> bool:
        return self.policy.transfers_open(self.clock())

    # ---------------- mutations ----------------

    def replace_player(self, team_id: int, entry_id: int, new_player_id: int) -> OperationResult:
        if not self.policy.transfers_open(self.clock()):
            return self._reject(team_id, "replace_player", RejectionReason.DEADLINE_PASSED)

        def build(squad: Squad) -> Candidate:
            entry = squad.entry(entry_id)
            if entry is None:
                return RejectionReason.NOT_FOUND, {"entry_id": entry_id}

            incoming = self.catalog.get_player(new_player_id)
            if incoming is None:
                return RejectionReason.NOT_FOUND, {"player_id": new_player_id}

            if incoming.position != entry.slot_position:
                return RejectionReason.POSITION_MISMATCH, {
                    "entry_id": entry_id,
                    "need": entry.slot_position.value,
                    "got": incoming.position.value,
                }

            if entry.player_id == new_player_id:
                return None

            if new_player_id in squad.player_ids():
                return RejectionReason.DUPLICATE_PLAYER, {"duplicate_player_ids": [new_player_id]}

            return squad.with_player(entry_id, new_player_id)

        return self._mutate(team_id, "replace_player", build)

    def set_captain(self, team_id: int, entry_id: int) -> OperationResult:
        return self._set_role(team_id, entry_id, Role.CAPTAIN)

    def set_vice_captain(self, team_id: int, entry_id: int) -> OperationResult:
        return self._set_role(team_id, entry_id, Role.VICE_CAPTAIN)

    def _set_role(self, team_id: int, entry_id: int, role: Role) -> OperationResult:
        op = "set_captain" if role is Role.CAPTAIN else "set_vice_captain"
        if not self.policy.role_changes_open(self.clock()):
            return self._reject(team_id, op, RejectionReason.DEADLINE_PASSED)

        def build(squad: Squad) -> Candidate:
            entry = squad.entry(entry_id)
            if entry is None:
                return RejectionReason.NOT_FOUND, {"entry_id": entry_id}
            if entry.role is role:
                return None
            if entry.role is not Role.NONE:
                return RejectionReason.CAPTAIN_ROLE_CONFLICT, {"entry_id": entry_id, "holds": entry.role.value}
            return squad.with_role(entry_id, role)

        return self._mutate(team_id, op, build)

    # ---------------- internals ----------------

    def _mutate(self, team_id: int, op: str, build: CandidateBuilder) -> OperationResult:
        try:
            with team_lock(team_id, self.lock_timeout):
                current = self.store.load_roster(team_id, for_update=True)
                if current is None:
                    return self._reject(team_id, op, RejectionReason.NOT_FOUND, {"team_id": team_id})

                candidate = build(current)
                if candidate is None:
                    logger.info("%s on team %s: no change", op, team_id)
                    return self._view(team_id)
                if isinstance(candidate, tuple):
                    reason, explain = candidate
                    return self._reject(team_id, op, reason, explain)

                players = self.catalog.get_players(candidate.player_ids())
                ok, detail = validate_squad(candidate, players, self.rules)
                if not ok:
                    return self._reject(team_id, op, detail["reason"], detail.get("explain"))

                budget_remaining = budget_after(candidate, players)
                self.store.commit_roster(candidate, budget_remaining)
                logger.info(
                    "%s on team %s committed (cost %s, budget_remaining %s)",
                    op,
                    team_id,
                    detail["cost"],
                    budget_remaining,
                )
        except LockTimeout as exc:
            logger.warning("%s on team %s: %s", op, team_id, exc)
            return OperationResult.rejected(RejectionReason.PERSISTENCE_ERROR, {"error": str(exc)})
        except PersistenceError as exc:
            logger.exception("%s on team %s failed to persist: %s", op, team_id, exc)
            return OperationResult.rejected(RejectionReason.PERSISTENCE_ERROR)

        return self.get_roster(team_id)

    def _view(self, team_id: int) -> OperationResult:
        team = self.store.load_team(team_id)
        squad = self.store.load_roster(team_id)
        if team is None or squad is None:
            return OperationResult.rejected(RejectionReason.NOT_FOUND, {"team_id": team_id})
        players = self.catalog.get_players(squad.player_ids())
        return OperationResult.accepted(RosterOut.from_squad(team, squad, players, self.can_make_changes()))

    def _reject(
        self,
        team_id: int,
        op: str,
        reason: RejectionReason,
        explain: Optional[Dict] = None,
    ) -> OperationResult:
        logger.warning("%s on team %s rejected: %s %s", op, team_id, reason.value, explain or "")
        return OperationResult.rejected(reason, explain)


def budget_after(squad: Squad, players: Players) -> Decimal:
    """Remaining budget for a squad: cap minus the price of every rostered player."""
    return squad.salary_cap - squad_cost(squad, players)
