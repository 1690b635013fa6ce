import logging
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from readtrack.core.exceptions import Conflict
from readtrack.core.roles import Role
from readtrack.core.timeutils import utcnow
from readtrack.schemas.common import dump
from readtrack.schemas.user import UserCreate, UserOut, Token
from readtrack.models.user import User
from readtrack.security import hash_password, verify_password, create_access_token
from readtrack.db import get_db, transaction

router = APIRouter(prefix="/auth", tags=["auth"])
log = logging.getLogger("auth")

def email_taken(db: Session, email: str) -> bool:
    return db.query(User.id).filter(User.email == email).first() is not None

@router.post("/register", status_code=201)
def register(payload: UserCreate, db: Session = Depends(get_db)):
    email = payload.email.lower()
    if email_taken(db, email):
        raise Conflict("Email already registered")

    user = User(
        email=email,
        name=payload.name,
        password=hash_password(payload.password),   # guarda HASH
        role=Role.STUDENT.value,
        points=0,
        level=1,
        created_at=utcnow(),
    )
    try:
        with transaction(db):
            db.add(user)
    except IntegrityError as e:
        # otro registro con el mismo email ganó la carrera
        log.warning("duplicate registration for %s: %s", email, e)
        raise Conflict("Email already registered") from e
    db.refresh(user)
    return {"success": True, "data": dump(UserOut.model_validate(user))}

@router.post("/login", response_model=Token)
def login(form_data: OAuth2PasswordRequestForm = Depends(),
            db: Session = Depends(get_db)):
    email = form_data.username.lower()
    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(form_data.password, user.password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED,
                            detail="Incorrect email or password")
    return {"access_token": create_access_token(user), "token_type": "bearer"}
