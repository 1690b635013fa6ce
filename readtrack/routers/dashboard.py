from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from readtrack.db import get_db
from readtrack.deps import get_current_user
from readtrack.domain.dashboard.service import get_dashboard_stats
from readtrack.models.user import User
from readtrack.schemas.common import dump
from readtrack.schemas.progress import ProgressOut

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

@router.get("/stats")
def dashboard_stats(db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    data = get_dashboard_stats(db, me)
    data["recentProgress"] = [dump(ProgressOut.model_validate(p)) for p in data["recentProgress"]]
    return {"success": True, "data": data}
