from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy import select, func
from sqlalchemy.orm import Session

from readtrack.db import get_db
from readtrack.deps import get_current_user
from readtrack.domain.summaries import service
from readtrack.models.summary import Summary
from readtrack.models.user import User
from readtrack.schemas.common import dump, make_pagination
from readtrack.schemas.summary import RatingIn, SummaryDetail, SummaryIn, SummaryOut

router = APIRouter(prefix="/summaries", tags=["summaries"])

def _summary_out(summary: Summary) -> dict:
    return dict(dump(SummaryOut.model_validate(summary)), counts={"comments": len(summary.comments)})

@router.get("")
def list_summaries(
    bookId: Optional[int] = None,
    userId: Optional[int] = None,
    isPublic: Optional[bool] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    conds = []
    if bookId is not None:
        conds.append(Summary.book_id == bookId)
    if userId is not None:
        conds.append(Summary.author_id == userId)
    if isPublic is not None:
        conds.append(Summary.is_public == isPublic)

    total = db.execute(select(func.count(Summary.id)).where(*conds)).scalar_one() or 0
    rows = db.execute(
        select(Summary).where(*conds)
        .order_by(Summary.created_at.desc(), Summary.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    ).unique().scalars().all()
    return {
        "success": True,
        "data": {
            "summaries": [_summary_out(s) for s in rows],
            "pagination": dump(make_pagination(page, limit, int(total))),
        },
    }

@router.post("", status_code=201)
def create_summary(body: SummaryIn, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    summary = service.create_summary(
        db, me,
        book_id=body.book_id,
        content=body.content,
        title=body.title,
        is_public=body.is_public,
    )
    return {"success": True, "data": _summary_out(summary), "message": "Summary created successfully"}

@router.get("/{summary_id}")
def get_summary(summary_id: int, db: Session = Depends(get_db)):
    summary = service.get_summary(db, summary_id)
    data = dump(SummaryDetail.model_validate(summary))
    data["counts"] = {"comments": len(summary.comments)}
    return {"success": True, "data": data}

@router.patch("/{summary_id}")
def rate_summary(summary_id: int, body: RatingIn, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    result = service.rate_summary(db, me, summary_id, rating=body.rating, feedback=body.feedback)
    if result.points_awarded:
        message = f"Summary rated successfully. Student awarded {result.points_awarded} bonus points!"
    else:
        message = "Summary rating updated. Bonus points were already awarded for this summary."
    return {"success": True, "data": _summary_out(result.summary), "message": message}

@router.delete("/{summary_id}")
def delete_summary(summary_id: int, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    service.delete_summary(db, me, summary_id)
    return {"success": True, "message": "Summary deleted successfully"}
