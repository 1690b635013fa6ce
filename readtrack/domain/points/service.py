import logging
from sqlalchemy import update
from sqlalchemy.orm import Session
from readtrack.models.user import User

log = logging.getLogger("points")

# Puntos por evento
POINTS_BOOK_COMPLETED = 100
POINTS_HALFWAY = 25          # READING con progreso >= 50 %
POINTS_SUMMARY_CREATED = 50
POINTS_PER_RATING_STAR = 10  # 1★ -> 10 ... 5★ -> 50

HALFWAY_THRESHOLD_PCT = 50.0
LEVEL_STEP = 500             # un nivel cada 500 puntos

def level_for_points(points: int) -> int:
    return max(int(points or 0), 0) // LEVEL_STEP + 1

def rating_bonus(rating: int) -> int:
    return int(rating) * POINTS_PER_RATING_STAR

def award_points(db: Session, user_id: int, amount: int, *, reason: str) -> None:
    """
    Incremento atómico en SQL (no read-modify-write) y recálculo del nivel
    en la misma sentencia. No hace commit: corre dentro de la transacción del llamador.
    """
    if amount <= 0:
        return
    new_points = User.points + amount
    db.execute(
        update(User)
        .where(User.id == user_id)
        .values(points=new_points, level=new_points // LEVEL_STEP + 1)
        .execution_options(synchronize_session="fetch")
    )
    log.info("awarded %s points to user=%s (%s)", amount, user_id, reason)
