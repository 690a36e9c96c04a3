"""Login sessions: a persisted row per login plus the bearer token that names it."""

from __future__ import annotations

from datetime import datetime, timezone
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from faculty_desk.core.exceptions import StoreError
from faculty_desk.core.security import create_access_token, session_expiry
from faculty_desk.models.account import Account
from faculty_desk.models.auth_session import AuthSession

logger = logging.getLogger(__name__)


def as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def open_session(db: Session, account: Account) -> str:
    """Create a session row for ``account`` and return its signed bearer token."""
    expires_at = session_expiry(datetime.now(timezone.utc))
    record = AuthSession(
        account_id=account.id,
        email=account.email,
        role=account.role.value,
        department=account.department.value,
        expires_at=expires_at,
    )
    try:
        db.add(record)
        db.commit()
    except SQLAlchemyError as exc:
        logger.exception("Unable to open session for account %s", account.id)
        db.rollback()
        raise StoreError() from exc
    return create_access_token(account.id, session_id=record.id, expires_at=expires_at)


def load_active_session(db: Session, session_id: str, account_id: int) -> AuthSession | None:
    try:
        record = db.get(AuthSession, session_id)
    except SQLAlchemyError as exc:
        logger.exception("Unable to load session %s", session_id)
        raise StoreError() from exc
    if record is None or record.account_id != account_id or record.revoked_at is not None:
        return None
    expires_at = as_utc(record.expires_at)
    if expires_at is None or expires_at <= datetime.now(timezone.utc):
        return None
    return record


def revoke_session(db: Session, session_id: str) -> None:
    try:
        record = db.get(AuthSession, session_id)
        if record is not None and record.revoked_at is None:
            record.revoked_at = datetime.now(timezone.utc)
        db.commit()
    except SQLAlchemyError as exc:
        logger.exception("Unable to revoke session %s", session_id)
        db.rollback()
        raise StoreError("Error logging out") from exc
