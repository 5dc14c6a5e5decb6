# backend/database.py
import logging
import sqlite3
from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from config import settings
from services.errors import ConflictOnAllocation, InventoryError, StorageError

logger = logging.getLogger(__name__)

SQLALCHEMY_DATABASE_URL = settings.DATABASE_URL

# Hosted Postgres hands out postgres://, SQLAlchemy wants postgresql://
if SQLALCHEMY_DATABASE_URL.startswith("postgres://"):
    SQLALCHEMY_DATABASE_URL = SQLALCHEMY_DATABASE_URL.replace("postgres://", "postgresql://", 1)

if "sqlite" in SQLALCHEMY_DATABASE_URL:
    connect_args = {"check_same_thread": False}
else:
    connect_args = {}

engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args=connect_args
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


# SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection
@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db():
    import models.users, models.product, models.stock, models.sequence  # noqa: F401
    Base.metadata.create_all(bind=engine)


def _rollback(db: Session, cause: Exception) -> None:
    try:
        db.rollback()
    except SQLAlchemyError:
        logger.exception("Rollback failed after %s", type(cause).__name__)
        kind = getattr(cause, "kind", type(cause).__name__)
        raise StorageError(f"Rollback failed after {kind} error") from cause


@contextmanager
def unit_of_work(db: Session):
    """Run the enclosed block as one transaction.

    Commits when the block finishes, rolls back everything on any error.
    Domain errors pass through unchanged; store errors become
    ConflictOnAllocation (unique/foreign key violations) or StorageError.
    """
    try:
        yield db
        db.commit()
    except InventoryError as e:
        _rollback(db, e)
        raise
    except IntegrityError as e:
        _rollback(db, e)
        logger.warning("Integrity error: %s", e.orig)
        raise ConflictOnAllocation("Record conflicts with an existing one") from e
    except SQLAlchemyError as e:
        _rollback(db, e)
        logger.exception("Database error")
        raise StorageError("Database error, operation was not applied") from e
    except Exception as e:
        _rollback(db, e)
        raise
