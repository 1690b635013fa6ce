"""
Contraseñas (bcrypt vía passlib) y tokens de acceso JWT (python-jose).
El token lleva el email como `sub` más el id y el rol del usuario; el rol
vigente se vuelve a leer de la base en cada request.
"""
import os
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from dotenv import load_dotenv

from readtrack.models.user import User

load_dotenv()

SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain_password: str, stored_hash: Optional[str]) -> bool:
    if not stored_hash:
        return False
    try:
        return pwd_context.verify(plain_password, stored_hash)
    except ValueError:
        # hash con formato desconocido (filas cargadas a mano)
        return False

def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    issued = datetime.now(tz=timezone.utc)
    claims = {
        "sub": user.email,
        "uid": user.id,
        "role": user.role,
        "iat": issued,
        "exp": issued + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)),
    }
    return jwt.encode(claims, SECRET_KEY, algorithm=ALGORITHM)

def decode_access_token(token: str) -> dict:
    """Claims del token; JWTError si la firma, la expiración o el `sub` no son válidos."""
    claims = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    if not claims.get("sub"):
        raise JWTError("token without subject")
    return claims

__all__ = ["JWTError", "hash_password", "verify_password", "create_access_token", "decode_access_token"]
