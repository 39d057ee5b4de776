"""Database connection and session management."""
from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import NullPool

Base = declarative_base()


def make_engine(database_url: str, environment: str = "development") -> Engine:
    """
    Create the SQLAlchemy engine for the site registry.

    SQLite is used for local runs and tests; any other URL (PostgreSQL in
    production) gets a regular connection pool.

    Args:
        database_url: SQLAlchemy database URL
        environment: Deployment environment name, enables SQL echo in development

    Returns:
        Configured engine
    """
    echo = environment == "development"
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=NullPool,
            echo=echo,
        )
    # Pooler connections (e.g. pgbouncer on 6543) must not be pooled twice
    if database_url.endswith(":6543") or "pooler" in database_url:
        return create_engine(database_url, poolclass=NullPool, echo=echo)
    return create_engine(
        database_url,
        pool_size=20,
        max_overflow=10,
        pool_pre_ping=True,
        echo=echo,
    )


def make_session_factory(engine: Engine) -> sessionmaker:
    """Create the session factory bound to an engine."""
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def get_db(request: Request):
    """Dependency for getting database session."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
