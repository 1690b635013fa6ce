from typing import Optional
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from jose import JWTError
from readtrack.db import get_db
from readtrack.core.exceptions import AuthenticationRequired
from readtrack.models.user import User
from readtrack.security import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)

def get_current_user(token: Optional[str] = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> User:
    """Actor autenticado; 401 si no hay token o no es válido."""
    if not token:
        raise AuthenticationRequired()
    try:
        claims = decode_access_token(token)
    except JWTError:
        raise AuthenticationRequired("Invalid credentials")
    user = db.get(User, claims.get("uid")) if claims.get("uid") is not None else None
    # el id y el email del token deben seguir apuntando al mismo usuario
    if user is None or user.email != claims["sub"]:
        raise AuthenticationRequired("Invalid credentials")
    return user

__all__ = ["get_db", "get_current_user", "oauth2_scheme"]
