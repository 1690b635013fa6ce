import os
import logging
from contextlib import contextmanager
from sqlalchemy import create_engine, MetaData
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, declarative_base, Session
from dotenv import load_dotenv
from typing import Generator, Iterator

load_dotenv()

log = logging.getLogger("db")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./readtrack.db")
# Naming convention para que Alembic genere nombres estables y limpios
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

if DATABASE_URL.startswith("sqlite"):
    engine = create_engine(DATABASE_URL, connect_args={"check_same_thread": False})
else:
    engine = create_engine(DATABASE_URL, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base(metadata=MetaData(naming_convention=NAMING_CONVENTION))

def get_db() -> Generator[Session, None, None]:
    """Dependency de FastAPI para obtener y cerrar la sesión de DB por request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Unit of work: commit al salir sin errores, rollback ante cualquier fallo.
    Agrupa "actualizar registro + otorgar puntos" en una sola escritura.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        log.error("transaction rolled back: %s", e)
        raise
    except Exception:
        db.rollback()
        raise

__all__ = ["Base", "engine", "SessionLocal", "get_db", "transaction"]
