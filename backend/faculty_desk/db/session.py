from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from faculty_desk.core.config import get_settings

settings = get_settings()


def _engine_options(database_url: str) -> dict:
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return {"pool_pre_ping": True}
    options: dict = {"connect_args": {"check_same_thread": False}}
    if url.database in (None, "", ":memory:"):
        # A single shared connection keeps the in-memory database alive across sessions.
        options["poolclass"] = StaticPool
    return options


engine = create_engine(settings.database_url, echo=settings.database_echo, **_engine_options(settings.database_url))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
