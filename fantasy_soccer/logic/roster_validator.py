# fantasy_soccer/logic/roster_validator.py
from __future__ import annotations

from collections import Counter
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from .rejections import RejectionReason
from .squad import Role, Squad, SquadPlayer, count_by_position, squad_cost
from .squad_rules import Position, SquadRules

Players = Mapping[int, SquadPlayer]
Check = Callable[[Squad, Players, SquadRules], Optional[Dict]]


def _check_duplicates(squad: Squad, players: Players, rules: SquadRules) -> Optional[Dict]:
    counts = Counter(squad.player_ids())
    dupes = sorted(pid for pid, n in counts.items() if n > 1)
    if dupes:
        return {"duplicate_player_ids": dupes}
    return None


def _check_positions(squad: Squad, players: Players, rules: SquadRules) -> Optional[Dict]:
    mismatched: List[Dict] = []
    for e in squad.entries:
        p = players.get(e.player_id)
        got = p.position.value if p is not None else None
        if got != e.slot_position.value:
            mismatched.append(
                {"entry_id": e.id, "player_id": e.player_id, "need": e.slot_position.value, "got": got}
            )
    if mismatched:
        return {"mismatched_entries": mismatched}
    return None


def _check_formation(squad: Squad, players: Players, rules: SquadRules) -> Optional[Dict]:
    explain: Dict = {}

    # 1) Starting XI
    starters = squad.starters()
    if len(starters) != rules.starter_count:
        explain["wrong_starter_count"] = {"need": rules.starter_count, "got": len(starters)}

    starter_counts = count_by_position(starters, players)
    out_of_range: Dict[str, Dict] = {}
    for pos in Position:
        lo, hi = rules.range_for(pos)
        got = starter_counts[pos]
        if got < lo or got > hi:
            out_of_range[pos.value] = {"min": lo, "max": hi, "got": got}
    if out_of_range:
        explain["starters_out_of_range"] = out_of_range

    # 2) Whole squad
    if len(squad.entries) != rules.squad_size:
        explain["wrong_squad_size"] = {"need": rules.squad_size, "got": len(squad.entries)}

    squad_counts = count_by_position(squad.entries, players)
    composition: Dict[str, Dict] = {}
    for pos, need in rules.squad_composition.items():
        got = squad_counts[pos]
        if got != need:
            composition[pos.value] = {"need": need, "got": got}
    if composition:
        explain["squad_composition_unmet"] = composition

    return explain or None


def _check_budget(squad: Squad, players: Players, rules: SquadRules) -> Optional[Dict]:
    cost = squad_cost(squad, players)
    if cost > squad.salary_cap:
        return {"cap": str(squad.salary_cap), "cost": str(cost), "over_by": str(cost - squad.salary_cap)}
    return None


def _check_roles(squad: Squad, players: Players, rules: SquadRules) -> Optional[Dict]:
    captains = [e.id for e in squad.entries if e.role is Role.CAPTAIN]
    vices = [e.id for e in squad.entries if e.role is Role.VICE_CAPTAIN]
    if len(captains) != 1 or len(vices) != 1:
        return {"captain_entry_ids": captains, "vice_captain_entry_ids": vices}
    return None


# Order is part of the contract: the first failing check decides the reason.
CHECKS: List[Tuple[RejectionReason, Check]] = [
    (RejectionReason.DUPLICATE_PLAYER, _check_duplicates),
    (RejectionReason.POSITION_MISMATCH, _check_positions),
    (RejectionReason.FORMATION_OUT_OF_RANGE, _check_formation),
    (RejectionReason.BUDGET_EXCEEDED, _check_budget),
    (RejectionReason.CAPTAIN_ROLE_CONFLICT, _check_roles),
]


def validate_squad(squad: Squad, players: Players, rules: Optional[SquadRules] = None) -> Tuple[bool, Dict]:
    """
    Validates a candidate squad against the squad rules.
    - players: resolved catalog data keyed by player id (must cover every entry)
    - rules: defaults to the project-wide rules
    Returns: (ok, detail). On failure detail["reason"] is the first violated
    RejectionReason and detail["explain"] says why.
    """
    rules = rules or SquadRules.default()
    detail: Dict = {
        "cost": str(squad_cost(squad, players)),
        "cap": str(squad.salary_cap),
    }

    for reason, check in CHECKS:
        explain = check(squad, players, rules)
        if explain:
            detail["reason"] = reason
            detail["explain"] = explain
            return False, detail

    return True, detail
