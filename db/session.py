from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from typing import Any, Dict


def build_engine(database_url: str) -> Engine:
    """
    Create an engine for the given URL.
    In-memory SQLite URLs share one connection so every session sees the same data.
    """
    # SQLite-specific connection arguments
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}

    if database_url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(
            database_url, connect_args=connect_args, poolclass=StaticPool, future=True
        )
    return create_engine(database_url, connect_args=connect_args, future=True)


def build_session_factory(engine: Engine) -> sessionmaker:
    # Records are turned into dicts after commit, so keep loaded attributes
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        expire_on_commit=False,
        future=True,
    )


class RecordMixin:
    """Converts ORM rows to and from the plain dict records used by the services."""

    def to_dict(self) -> Dict[str, Any]:
        return {col.name: getattr(self, col.key) for col in self.__table__.columns}

    @classmethod
    def from_dict(cls, record: Dict[str, Any]):
        columns = {col.key for col in cls.__table__.columns}
        return cls(**{k: v for k, v in record.items() if k in columns})


# Base class for models
Base = declarative_base(cls=RecordMixin)
