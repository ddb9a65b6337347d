from __future__ import annotations

import logging

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine

from applytrack.auth import hash_password
from applytrack.config import settings


logger = logging.getLogger(__name__)


def _add_column_if_missing(conn, table_name: str, column_name: str, column_sql: str) -> None:
    columns = {column["name"] for column in inspect(conn).get_columns(table_name)}
    if column_name in columns:
        return
    conn.execute(text(f"ALTER TABLE {table_name} ADD COLUMN {column_sql}"))
    logger.info("Added column %s.%s", table_name, column_name)


def run_runtime_migrations(engine: Engine) -> None:
    with engine.begin() as conn:
        _add_column_if_missing(conn, "users", "adzuna_app_id", "adzuna_app_id VARCHAR(255)")
        _add_column_if_missing(conn, "users", "adzuna_api_key", "adzuna_api_key VARCHAR(255)")
        _add_column_if_missing(conn, "scraped_jobs", "match_score", "match_score FLOAT")

        owner_username = settings.default_owner_username.strip().lower()
        if not owner_username:
            return
        owner_row = conn.execute(
            text("SELECT id FROM users WHERE username = :username"),
            {"username": owner_username},
        ).fetchone()
        if owner_row:
            return
        conn.execute(
            text(
                "INSERT INTO users (username, password_hash, is_active) VALUES (:username, :password_hash, :is_active)"
            ),
            {
                "username": owner_username,
                "password_hash": hash_password(settings.default_owner_password),
                "is_active": True,
            },
        )
        logger.info("Created default owner account %r", owner_username)
