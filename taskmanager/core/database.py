from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base

from taskmanager.core.config import settings

Base = declarative_base()


def make_engine(url: str = None) -> Engine:
    return create_engine(url or settings.DATABASE_URL, echo=False, pool_pre_ping=True)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request):
    """Dépendance sessionDB: une session par requête, toujours fermée"""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
