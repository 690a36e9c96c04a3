from __future__ import annotations

from sqlalchemy.orm import Session

from faculty_desk.models.activity_log import ActivityLog


def log_activity(
    db: Session,
    *,
    account_id: int | None,
    action: str,
    entity_type: str | None = None,
    entity_id: int | str | None = None,
    details: dict | None = None,
) -> None:
    """Stage an audit row on ``db``; it is committed together with the audited write."""
    db.add(
        ActivityLog(
            account_id=account_id,
            action=action,
            entity_type=entity_type,
            entity_id=str(entity_id) if entity_id is not None else None,
            details=details or {},
        )
    )
