"""VITRINE — Raw Snapshot Store: engine and session factory.

The store is an audit trail and a fallback source for the cache; the service
keeps serving from memory when it is unreachable.
"""

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from vitrine.config import settings
from vitrine.core.logging import get_logger

logger = get_logger("database")

db_url = settings.effective_database_url

logger.info(
    f"Snapshot store: {make_url(db_url).render_as_string(hide_password=True)}"
)

if db_url.startswith("sqlite"):
    engine_kwargs: dict = {"connect_args": {"check_same_thread": False}}
    if db_url in ("sqlite://", "sqlite:///:memory:"):
        # One shared connection, or every session sees an empty database
        engine_kwargs["poolclass"] = StaticPool
else:
    engine_kwargs = {"pool_pre_ping": True}

engine = create_engine(db_url, **engine_kwargs)


def test_connection() -> bool:
    """Run SELECT 1 against the snapshot store."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Snapshot store unreachable: {e}")
        return False


def init_db() -> None:
    """Create the snapshot table."""
    from vitrine.models import raw_models  # noqa: F401

    SQLModel.metadata.create_all(engine)
    logger.info("Snapshot table ready")


def get_session():
    """Dependency — yields a DB session."""
    with Session(engine) as session:
        yield session
