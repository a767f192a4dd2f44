"""
Database schema and connection management.

Uses SQLAlchemy. Table definitions mirror the companies/jobs schema the
repository queries; `Database` is the persistence handle injected into
repositories.
"""

import re
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    create_engine,
    event,
    text,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from .logger import get_logger

Base = declarative_base()

_PLACEHOLDER_RE = re.compile(r"\$(\d+)")


class Company(Base):
    """Company table."""

    __tablename__ = "companies"

    handle = Column(String(25), primary_key=True)
    name = Column(Text, nullable=False)
    num_employees = Column(Integer, CheckConstraint("num_employees >= 0"), nullable=True)
    description = Column(Text, nullable=False)
    logo_url = Column(Text, nullable=True)


class Job(Base):
    """Job table. Written elsewhere; only joined here."""

    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    salary = Column(Integer, CheckConstraint("salary >= 0"), nullable=True)
    equity = Column(Numeric, CheckConstraint("equity <= 1.0"), nullable=True)
    company_handle = Column(
        String(25),
        ForeignKey("companies.handle", ondelete="CASCADE"),
        nullable=False,
    )


def get_engine(database_url: str) -> Engine:
    """
    Create an engine for the given URL.

    Args:
        database_url: SQLAlchemy database URL
    """
    engine = create_engine(database_url)

    # SQLite only enforces foreign keys (and ON DELETE CASCADE) per connection
    if engine.dialect.name == "sqlite":
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def init_database(database_url: str) -> Engine:
    """
    Initialize database and create tables.

    Args:
        database_url: SQLAlchemy database URL

    Returns:
        Engine bound to the initialized database
    """
    engine = get_engine(database_url)
    Base.metadata.create_all(engine)
    get_logger().debug("Database initialized", url=engine.url.render_as_string(hide_password=True))
    return engine


def to_named_params(sql: str, params: Sequence[Any]):
    """
    Rewrite `$n` positional placeholders as SQLAlchemy named binds.

    Returns:
        Tuple of (rewritten SQL, {"p1": params[0], ...})
    """
    statement = _PLACEHOLDER_RE.sub(lambda m: f":p{m.group(1)}", sql)
    binds = {f"p{i}": value for i, value in enumerate(params, start=1)}
    return statement, binds


class Database:
    """
    Persistence handle: SQL text plus ordered parameters in, rows out.

    Each call runs in its own `engine.begin()` block, so a statement is
    committed when it returns. Errors from SQLAlchemy propagate unchanged;
    IntegrityError marks constraint violations and OperationalError
    marks connectivity problems.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    @classmethod
    def from_url(cls, database_url: str) -> "Database":
        return cls(get_engine(database_url))

    def query(self, sql: str, params: Optional[Sequence[Any]] = None) -> List[Dict[str, Any]]:
        """
        Execute one statement.

        Args:
            sql: Statement text using $1, $2, ... placeholders
            params: Values for the placeholders, in order

        Returns:
            Rows as dicts keyed by column label (empty for statements
            that return nothing)
        """
        params = list(params or [])
        statement, binds = to_named_params(sql, params)

        logger = get_logger()
        logger.record_query()
        logger.debug("Executing query", sql=" ".join(sql.split()), param_count=len(params))

        with self.engine.begin() as conn:
            result = conn.execute(text(statement), binds)
            if not result.returns_rows:
                return []
            return [dict(row._mapping) for row in result]

    def dispose(self) -> None:
        self.engine.dispose()
