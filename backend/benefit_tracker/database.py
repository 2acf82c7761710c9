import logging
import pathlib

from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from benefit_tracker.config import settings

logger = logging.getLogger(__name__)


def _is_sqlite(url: str) -> bool:
    return make_url(url).get_backend_name() == "sqlite"


def _ensure_sqlite_dir(url: str) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    database = make_url(url).database
    if not database or database == ":memory:":
        return
    pathlib.Path(database).parent.mkdir(parents=True, exist_ok=True)


if _is_sqlite(settings.database_url):
    _ensure_sqlite_dir(settings.database_url)
    engine = create_engine(settings.database_url, connect_args={"check_same_thread": False})

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA busy_timeout=5000")
        cursor.close()
else:
    engine = create_engine(settings.database_url, pool_pre_ping=True)


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    pass


def init_db(bind=None) -> None:
    """Create any missing tables. The schema is a single key/value table."""
    from benefit_tracker.models import stored_dataset  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database ready at %s", make_url(settings.database_url).render_as_string(hide_password=True))


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
