# /app/db/database.py

"""
Engine and session management.

There is no module-level engine. `Database` owns one engine and its session
factory; the FastAPI lifespan builds it at startup, stores it on `app.state`
and disposes it at shutdown. Request handlers receive a fresh Session through
the `get_db` dependency.
"""

import logging
from contextlib import contextmanager
from typing import Generator, Iterator

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .base_class import Base

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    def __init__(self, database_url: str):
        self.url = database_url
        # The 'check_same_thread' argument is only needed for SQLite.
        engine_args = {"connect_args": {"check_same_thread": False, "timeout": 15}} if database_url.startswith("sqlite") else {"pool_pre_ping": True}
        self.engine: Engine = create_engine(database_url, **engine_args)
        if database_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        self.session_factory = sessionmaker(bind=self.engine, autocommit=False, autoflush=False, expire_on_commit=False)

    def create_all(self) -> None:
        # Import the model registry so every table is attached to Base.metadata.
        from . import base  # noqa: F401
        Base.metadata.create_all(bind=self.engine)

    def new_session(self) -> Session:
        return self.session_factory()

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Yields a Session and always closes it, for scripts and threads outside FastAPI."""
        session = self.session_factory()
        try:
            yield session
        finally:
            session.close()

    def dispose(self) -> None:
        logger.info("Disposing database engine for %s", self.engine.url.render_as_string(hide_password=True))
        self.engine.dispose()


# Dependency to get a DB session. This will be used in our API routers.
def get_db(request: Request) -> Generator[Session, None, None]:
    database: Database = request.app.state.database
    db = database.new_session()
    try:
        yield db
    finally:
        db.close()
