"""
Configuration de la connexion à la base de données (SQLite ou PostgreSQL).
Chaque RatingStore possède son propre moteur, créé via create_db_engine().
"""

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Type

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.errors import NotFoundError, StoreError, translate_db_error

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """SQLite n'applique les clés étrangères que si le PRAGMA est activé par connexion."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


def create_db_engine(url: str, timeout: float = 10.0) -> Engine:
    """
    Crée le moteur SQLAlchemy pour l'URL donnée.
    Le timeout borne l'attente d'un verrou (SQLite) ou de la connexion (PostgreSQL).
    """
    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            connect_args={"timeout": timeout, "check_same_thread": False},
        )
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    else:
        engine = create_engine(
            url,
            connect_args={"connect_timeout": int(timeout)},
            pool_pre_ping=True,
        )
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_schema(engine: Engine) -> None:
    """Crée les tables absentes. Idempotent : sans effet sur une base existante."""
    import app.models  # noqa: F401  enregistre toutes les tables dans Base.metadata

    Base.metadata.create_all(bind=engine)


def utc_now() -> datetime:
    """Horodatage naïf en UTC, à la microseconde (ordre d'insertion fiable)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


@contextmanager
def write_transaction(
    db: Session,
    message: str,
    foreign_key: Type[StoreError] = NotFoundError,
) -> Iterator[Session]:
    """
    Exécute les écritures du bloc puis valide la transaction.
    En cas d'échec SQL : rollback puis erreur métier correspondant à la contrainte violée.
    """
    try:
        yield db
        db.commit()
    except DBAPIError as exc:
        db.rollback()
        raise translate_db_error(exc, message, foreign_key=foreign_key) from exc
