# routers/debug.py
import os
from fastapi import APIRouter, HTTPException
from leagues import LEAGUES, league_by_id
from services.sportsdb import api_key, fetch_events_for_league, masked_key
from utils.dates import current_season, previous_season

router = APIRouter()

def require_debug():
    if os.getenv("DEBUG", "0") != "1":
        raise HTTPException(status_code=404, detail="Not found")

@router.get("/health")
def health():
    return {"status": "ok"}

@router.get("/debug/env")
def debug_env():
    require_debug()
    key = api_key()
    return {"sportsdb_key": masked_key(key), "key_length": len(key), "demo_key": key == "3"}

@router.get("/debug/leagues")
def debug_leagues():
    require_debug()
    out = []
    for lg in LEAGUES:
        season = current_season(lg)
        out.append({
            "id": lg.id,
            "name": lg.name,
            "season_type": lg.season_type,
            "season": season,
            "previous_season": previous_season(lg, season),
        })
    return {"count": len(out), "leagues": out}

@router.get("/debug/league/{league_id}")
def debug_league(league_id: int):
    require_debug()
    league = league_by_id(league_id)
    if not league:
        raise HTTPException(status_code=404, detail=f"Unknown league {league_id}")
    events = fetch_events_for_league(league)
    return {"league": league.name, "count": len(events), "events": events[:25]}
