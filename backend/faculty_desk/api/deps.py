from collections.abc import Generator
from dataclasses import dataclass

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from faculty_desk.core.exceptions import AuthenticationError
from faculty_desk.core.security import decode_token
from faculty_desk.db.session import SessionLocal
from faculty_desk.services.availability import AvailabilityResolver
from faculty_desk.services.directory import DirectoryStore
from faculty_desk.services.leave_evaluator import LeaveEvaluator, LeaveRecordWriter
from faculty_desk.services.sessions import load_active_session

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class RequestContext:
    """Who is calling, resolved once per request from the bearer session."""

    account_id: int
    email: str
    role: str
    department: str
    session_id: str


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_directory_store(db: Session = Depends(get_db)) -> DirectoryStore:
    return DirectoryStore(db)


def get_availability_resolver(store: DirectoryStore = Depends(get_directory_store)) -> AvailabilityResolver:
    return AvailabilityResolver(store)


def get_leave_evaluator(
    store: DirectoryStore = Depends(get_directory_store),
    resolver: AvailabilityResolver = Depends(get_availability_resolver),
) -> LeaveEvaluator:
    return LeaveEvaluator(store, resolver, LeaveRecordWriter(store))


def get_request_context(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> RequestContext:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()
    try:
        payload = decode_token(credentials.credentials)
        account_id = int(payload["sub"])
        session_id = str(payload["jti"])
    except (JWTError, KeyError, TypeError, ValueError) as exc:
        raise AuthenticationError() from exc

    session = load_active_session(db, session_id, account_id)
    if session is None:
        raise AuthenticationError()
    return RequestContext(
        account_id=session.account_id,
        email=session.email,
        role=session.role,
        department=session.department,
        session_id=session.id,
    )
