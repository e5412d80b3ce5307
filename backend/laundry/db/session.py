"""Database engine and session management.

The engine and session factory are built once by ``create_app()`` and kept
on ``app.state``; request handlers receive sessions through ``get_db``.
"""

from collections.abc import Generator
from typing import Annotated, Optional

from fastapi import Depends, Request
from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.orm import Session, sessionmaker


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine, handling SQLite specially for check_same_thread."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
        pool_config = {
            "pool_pre_ping": True,
        }
    else:
        # PostgreSQL/MySQL connection pooling configuration
        pool_config = {
            "pool_size": 10,          # Number of connections to keep open
            "max_overflow": 20,       # Additional connections allowed beyond pool_size
            "pool_pre_ping": True,    # Test connections before using them
            "pool_recycle": 3600,     # Recycle connections after 1 hour
        }

    engine = create_engine(
        database_url,
        connect_args=connect_args,
        echo=echo,
        **pool_config,
    )
    enable_sqlite_foreign_keys(engine)
    return engine


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """Enable foreign key enforcement for SQLite connections."""
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request) -> Generator[Session, None, None]:
    """Get database session dependency."""
    db: Session = request.app.state.session_factory()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def ping(session_factory: sessionmaker) -> Optional[str]:
    """Run a trivial query. Returns an error string, or None when healthy."""
    db = session_factory()
    try:
        db.execute(text("SELECT 1"))
        return None
    except Exception as e:
        return str(e)
    finally:
        db.close()


# Type alias for dependency injection
DbSession = Annotated[Session, Depends(get_db)]
