# smoke.py: end-to-end run against a live Fantasy Soccer Roster API
import json

import requests

BASE = "http://127.0.0.1:8000"


def post(path, data, ok=(200, 201)):
    r = requests.post(BASE + path, json=data)
    if r.status_code not in ok:
        r.raise_for_status()
    return r.status_code, r.json()


def get(path):
    r = requests.get(BASE + path)
    r.raise_for_status()
    return r.json()


def entry_id_for(roster, player_id):
    for row in roster["entries"]:
        if row["player"] and row["player"]["id"] == player_id:
            return row["id"]
    raise RuntimeError(f"entry not found for player {player_id}")


print("=== 1) seed catalog ===")
catalog = [
    (1, "Aldo Keeper", "GK", "5.0"),
    (2, "Ben Back", "DEF", "5.0"),
    (3, "Cal Centre", "DEF", "6.0"),
    (4, "Dan Wide", "DEF", "5.5"),
    (5, "Eli Stopper", "DEF", "5.0"),
    (6, "Finn Playmaker", "MID", "10.0"),
    (7, "Gus Engine", "MID", "8.0"),
    (8, "Hal Winger", "MID", "7.0"),
    (9, "Ike Holder", "MID", "6.5"),
    (10, "Jon Striker", "FWD", "11.0"),
    (11, "Kai Poacher", "FWD", "9.0"),
    (12, "Lou Backup", "GK", "4.0"),
    (13, "Max Fullback", "DEF", "4.0"),
    (14, "Ned Runner", "MID", "4.5"),
    (15, "Oli Target", "FWD", "9.0"),
    (16, "Pat Pricey", "DEF", "6.0"),
    (17, "Quin Fit", "DEF", "5.5"),
]
post("/players/seed", [{"id": i, "name": n, "position": p, "price": c} for i, n, p, c in catalog])

print("=== 2) seed team ===")
user_id = "smoke-user"
try:
    team = get(f"/teams/by-user/{user_id}")
except requests.HTTPError:
    _, team = post(
        "/teams/debug/seed",
        {
            "user_id": user_id,
            "team_name": "Smoke FC",
            "picks": [{"player_id": i, "is_starter": i <= 11} for i in range(1, 16)],
            "captain_index": 5,
            "vice_captain_index": 9,
        },
    )
team_id = team["id"]
print("team_id", team_id)

print("=== 3) roster ===")
roster = get(f"/roster/{team_id}")
print("formation", roster["formation"]["label"], "budget", roster["team"]["budget_remaining"])

print("=== 4) replace over budget (expect 409 unless the window closed) ===")
slot = entry_id_for(roster, 2) if any(e["player"]["id"] == 2 for e in roster["entries"]) else entry_id_for(roster, 17)
status, body = post(f"/roster/{team_id}/replace", {"entry_id": slot, "player_id": 16}, ok=(200, 409, 423))
print(status, json.dumps(body, indent=2)[:400])

print("=== 5) replace within budget ===")
status, body = post(f"/roster/{team_id}/replace", {"entry_id": slot, "player_id": 17}, ok=(200, 423))
print(status)

print("=== 6) captaincy ===")
status, body = post(f"/roster/{team_id}/captain", {"entry_id": entry_id_for(roster, 7)}, ok=(200, 409, 423))
print(status)
status, body = post(f"/roster/{team_id}/vice-captain", {"entry_id": entry_id_for(roster, 7)}, ok=(200, 409, 423))
print(status, body.get("detail", {}).get("reason") if isinstance(body, dict) else body)

print("\n-- final roster --\n", json.dumps(get(f"/roster/{team_id}"), indent=2))
