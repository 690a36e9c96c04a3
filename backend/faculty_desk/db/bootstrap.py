from __future__ import annotations

import logging

from sqlalchemy import inspect, text

import faculty_desk.models  # noqa: F401
from faculty_desk.core.config import get_settings
from faculty_desk.db.base import Base
from faculty_desk.db.session import engine

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "accounts": {
        "id",
        "username",
        "email",
        "department",
        "role",
        "hashed_password",
        "salary",
        "max_leaves",
        "total_leaves",
    },
    "faculty_schedule": {"schedule_id", "account_id", "day_of_week", "start_time", "end_time", "subject", "room_number"},
    "leave_applications": {"id", "email", "leave_type", "start_date", "end_date", "reason", "status"},
    "auth_sessions": {"id", "account_id", "expires_at", "revoked_at"},
    "activity_logs": {"id", "action", "details"},
}


def _ensure_account_leave_counter_columns() -> None:
    # Account tables created before leave tracking existed lack the counters.
    max_leaves_default = get_settings().max_leaves_default
    with engine.begin() as connection:
        inspector = inspect(connection)
        if "accounts" not in set(inspector.get_table_names()):
            return
        column_names = {item["name"] for item in inspector.get_columns("accounts")}
        if "max_leaves" not in column_names:
            connection.execute(
                text(f"ALTER TABLE accounts ADD COLUMN max_leaves INTEGER NOT NULL DEFAULT {int(max_leaves_default)}")
            )
        if "total_leaves" not in column_names:
            connection.execute(text("ALTER TABLE accounts ADD COLUMN total_leaves INTEGER NOT NULL DEFAULT 0"))


def _assert_required_columns() -> None:
    with engine.begin() as connection:
        inspector = inspect(connection)
        table_names = set(inspector.get_table_names())
        missing_tables = [name for name in REQUIRED_COLUMNS if name not in table_names]
        if missing_tables:
            raise RuntimeError(f"Missing required tables: {', '.join(sorted(missing_tables))}")

        missing_columns: list[str] = []
        for table_name, required in REQUIRED_COLUMNS.items():
            existing = {item["name"] for item in inspector.get_columns(table_name)}
            for column_name in sorted(required - existing):
                missing_columns.append(f"{table_name}.{column_name}")
        if missing_columns:
            raise RuntimeError(f"Missing required columns: {', '.join(missing_columns)}")


def ensure_runtime_schema_compatibility() -> None:
    try:
        Base.metadata.create_all(bind=engine)
        _ensure_account_leave_counter_columns()
        _assert_required_columns()
    except Exception as exc:  # pragma: no cover - runtime environment dependent
        logger.exception("Runtime schema compatibility bootstrap failed")
        raise RuntimeError("Runtime schema compatibility bootstrap failed") from exc
