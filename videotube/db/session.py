# ============================================================================
# FILE: videotube/db/session.py
# ============================================================================
from typing import Iterator
from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Engine for the configured URL; SQLite needs cross-thread access under FastAPI"""
    kwargs = {"echo": echo}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in database_url or database_url.rstrip("/") == "sqlite:":
            # one shared connection, otherwise every session sees an empty database
            kwargs["poolclass"] = StaticPool
    return create_engine(database_url, **kwargs)

def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)

def get_db(request: Request) -> Iterator[Session]:
    """One session per request, taken from the factory built in create_app"""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
