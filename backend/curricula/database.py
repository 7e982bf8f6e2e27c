from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from pathlib import Path

from curricula.config import settings


def configure_sqlite(engine: Engine) -> None:
    """
    Make SQLite behave like the production database.

    Foreign keys are enforced on every connection, and transactions are
    started explicitly so SAVEPOINTs (used for slug retries) work with pysqlite.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


# Database configuration
# Use DATABASE_URL from environment if available, otherwise use local SQLite
DATABASE_URL = settings.DATABASE_URL

if not DATABASE_URL:
    # Local development: use SQLite
    DB_DIR = Path(__file__).parent / "data"
    DB_DIR.mkdir(exist_ok=True)
    DATABASE_URL = f"sqlite:///{DB_DIR}/curricula.db"

if DATABASE_URL.startswith("sqlite"):
    engine = create_engine(
        DATABASE_URL,
        connect_args={"check_same_thread": False}  # Needed for SQLite
    )
    configure_sqlite(engine)
else:
    # Production: PostgreSQL, MySQL, etc.
    engine = create_engine(DATABASE_URL, pool_pre_ping=True)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Dependency to get DB session
def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()
