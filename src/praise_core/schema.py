"""SQLAlchemy table definitions for the data the engine reads."""

from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, MetaData, String, Table
from sqlalchemy.engine import Engine

metadata = MetaData()

periods = Table(
    "periods",
    metadata,
    Column("id", String, primary_key=True),
    Column("name", String),
    Column("end_date", DateTime(timezone=True), nullable=False),
)

period_settings = Table(
    "period_settings",
    metadata,
    Column("period_id", String, nullable=False),
    Column("key", String, nullable=False),
    Column("value", String),
)

praise = Table(
    "praise",
    metadata,
    Column("id", String, primary_key=True),
    Column("giver_id", String),
    Column("receiver_id", String, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
)

users = Table(
    "users",
    metadata,
    Column("id", String, primary_key=True),
    Column("username", String),
    Column("is_quantifier", Boolean, nullable=False, default=False),
)

user_accounts = Table(
    "user_accounts",
    metadata,
    Column("id", String, primary_key=True),
    Column("user_id", String),
    Column("name", String),
)


def create_schema(engine: Engine) -> None:
    """Create all tables if they do not already exist."""

    metadata.create_all(engine)
