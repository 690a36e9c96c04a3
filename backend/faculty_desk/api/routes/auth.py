import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from faculty_desk.api.deps import RequestContext, get_db, get_directory_store, get_request_context
from faculty_desk.core.config import get_settings
from faculty_desk.core.exceptions import AuthenticationError, ConflictError, ValidationError
from faculty_desk.core.security import get_password_hash, verify_password
from faculty_desk.schemas.account import AccountOut, LoginRequest, LoginResponse, MessageOut, SignupRequest
from faculty_desk.services.audit import log_activity
from faculty_desk.services.directory import DirectoryStore
from faculty_desk.services.rate_limit import enforce_rate_limit
from faculty_desk.services.sessions import open_session, revoke_session

settings = get_settings()
router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/signup", response_model=AccountOut, status_code=status.HTTP_201_CREATED)
def signup(
    payload: SignupRequest,
    request: Request,
    store: DirectoryStore = Depends(get_directory_store),
) -> AccountOut:
    enforce_rate_limit(
        request=request,
        scope="auth.signup",
        limit=settings.auth_rate_limit_signup_max_requests,
        window_seconds=settings.auth_rate_limit_window_seconds,
        identity=payload.email,
    )
    if payload.password != payload.confirm_password:
        raise ValidationError("Passwords do not match")
    if store.username_or_email_taken(payload.username, payload.email):
        raise ConflictError("Username or email already exists")

    account = store.create_account(
        username=payload.username,
        email=payload.email,
        department=payload.department,
        role=payload.role,
        hashed_password=get_password_hash(payload.password),
        salary=payload.salary,
        max_leaves=settings.max_leaves_default,
    )
    log_activity(
        store.db,
        account_id=account.id,
        action="account.signup",
        entity_type="account",
        entity_id=account.id,
        details={"role": account.role.value, "department": account.department.value},
    )
    store.commit()
    logger.info("Account %s created (%s, %s)", account.id, account.role.value, account.department.value)
    return account


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    request: Request,
    store: DirectoryStore = Depends(get_directory_store),
) -> LoginResponse:
    enforce_rate_limit(
        request=request,
        scope="auth.login",
        limit=settings.auth_rate_limit_login_max_requests,
        window_seconds=settings.auth_rate_limit_window_seconds,
        identity=payload.username,
    )
    account = store.find_account_for_login(payload.username)
    if account is None or not verify_password(payload.password, account.hashed_password):
        raise AuthenticationError("Invalid username or password")

    access_token = open_session(store.db, account)
    return LoginResponse(
        access_token=access_token,
        token_type="bearer",
        email=account.email,
        role=account.role,
        department=account.department,
    )


@router.post("/logout", response_model=MessageOut)
def logout(
    context: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
) -> MessageOut:
    revoke_session(db, context.session_id)
    return MessageOut(message="Logout successful")
