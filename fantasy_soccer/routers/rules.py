# fantasy_soccer/routers/rules.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..logic.squad_rules import SquadRules, get_default_rules
from ..services.time_rules import DeadlinePolicy
from .roster import get_policy

route = APIRouter(prefix="/rules", tags=["rules"])


class RulesOut(BaseModel):
    squad: SquadRules
    deadline: DeadlinePolicy
    bench_size: int


@route.get("", response_model=RulesOut)
def read_rules(policy: DeadlinePolicy = Depends(get_policy)):
    rules = get_default_rules()
    return RulesOut(squad=rules, deadline=policy, bench_size=rules.bench_size)
