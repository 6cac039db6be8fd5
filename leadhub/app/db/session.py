from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from leadhub.app.core.settings import get_settings
from leadhub.app.db.gateway import Gateway

settings = get_settings()


def build_engine(url: str) -> Engine:
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    new_engine = create_engine(url, connect_args=connect_args)
    if url.startswith("sqlite"):
        @event.listens_for(new_engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            # Notes and events cascade with their client
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return new_engine


engine = build_engine(settings.database_url)


def get_gateway() -> Iterator[Gateway]:
    # One gateway per request so transaction scopes never leak across requests
    yield Gateway(engine)
