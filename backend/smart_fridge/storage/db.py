from sqlmodel import SQLModel, Session, create_engine

from smart_fridge.config import settings


def _connect_args(url: str) -> dict:
    # TestClient and the request threadpool share the SQLite connection across threads
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,
    connect_args=_connect_args(settings.database_url),
)


def create_db_and_tables() -> None:
    # Import registers every table on SQLModel.metadata
    from smart_fridge.storage import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session() -> Session:
    return Session(engine)
