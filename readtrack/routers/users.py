from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from readtrack.core.exceptions import NotFound, ValidationError
from readtrack.core.roles import Role, require_role
from readtrack.db import get_db, transaction
from readtrack.deps import get_current_user
from readtrack.models.user import User
from readtrack.schemas.common import dump
from readtrack.schemas.user import UserOut, UserUpdate, RoleIn

router = APIRouter(prefix="/users", tags=["users"])

@router.get("/me")
def read_me(current_user: User = Depends(get_current_user)):
    return {"success": True, "data": dump(UserOut.model_validate(current_user))}

@router.put("/me")
def update_me(payload: UserUpdate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    if payload.name is not None:
        name = payload.name.strip()
        if not name:
            raise ValidationError("Name cannot be empty")
        current_user.name = name
    if payload.avatar_url is not None:
        current_user.avatar_url = payload.avatar_url.strip() or None

    with transaction(db):
        db.add(current_user)
    db.refresh(current_user)
    return {"success": True, "data": dump(UserOut.model_validate(current_user))}

@router.get("")
def list_users(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    require_role(current_user, Role.ADMIN)
    users = db.query(User).order_by(User.id.asc()).all()
    return {"success": True, "data": [dump(UserOut.model_validate(u)) for u in users]}

@router.patch("/{user_id}/role")
def set_role(user_id: int, payload: RoleIn, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    require_role(current_user, Role.ADMIN)
    user = db.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    with transaction(db):
        user.role = payload.role.value
    db.refresh(user)
    return {"success": True, "data": dump(UserOut.model_validate(user))}
