from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from readtrack.db import get_db
from readtrack.domain.leaderboard.service import LeaderboardPeriod, LeaderboardType, get_leaderboard

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])

@router.get("")
def leaderboard(
    type: LeaderboardType = "students",
    period: LeaderboardPeriod = "all",
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """
    Ranking por puntos acumulados (siempre históricos). `period` solo acota
    las estadísticas derivadas (páginas, resúmenes, racha...).
    """
    return {"success": True, "data": get_leaderboard(db, kind=type, period=period, limit=limit)}
