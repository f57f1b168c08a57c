# cronos/db.py

from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from . import models  # noqa: F401  registers the tables on SQLModel.metadata


def make_engine(database_url: str, echo: bool = False):
    connect_args = {}
    kwargs = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False  # required for SQLite + FastAPI
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # keep a single connection so the in-memory database survives
            kwargs["poolclass"] = StaticPool

    return create_engine(database_url, echo=echo, connect_args=connect_args, **kwargs)


def init_db(engine) -> None:
    SQLModel.metadata.create_all(engine)
