from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from faculty_desk.api.routes import auth, health, leaves, profile, timetable
from faculty_desk.core.config import get_settings
from faculty_desk.core.exceptions import AppError, ValidationError
from faculty_desk.core.middleware import RequestSizeLimitMiddleware, SecurityHeadersMiddleware
from faculty_desk.db.bootstrap import ensure_runtime_schema_compatibility
from faculty_desk.services.rate_limit import RateLimitExceededError

settings = get_settings()


@asynccontextmanager
async def lifespan(_: FastAPI):
    ensure_runtime_schema_compatibility()
    yield


async def app_error_handler(request: Request, exc: AppError):
    headers = None
    if isinstance(exc, RateLimitExceededError):
        headers = {"Retry-After": str(exc.retry_after)}
    return JSONResponse(
        status_code=exc.status_code,
        content={"kind": exc.kind, "message": exc.message, "details": exc.details},
        headers=headers,
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        if first.get("type") == "missing":
            message = "Missing required fields"
        else:
            message = str(first.get("msg", message)).removeprefix("Value error, ")
    return JSONResponse(
        status_code=400,
        content={
            "kind": ValidationError.kind,
            "message": message,
            "details": {"errors": jsonable_encoder(errors)},
        },
    )


app = FastAPI(title=settings.project_name, lifespan=lifespan)
app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_error_handler)

app.add_middleware(RequestSizeLimitMiddleware, max_bytes=settings.max_request_size_bytes)
app.add_middleware(SecurityHeadersMiddleware, settings=settings)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix=settings.api_prefix, tags=["health"])
app.include_router(auth.router, prefix=f"{settings.api_prefix}/auth", tags=["auth"])
app.include_router(profile.router, prefix=settings.api_prefix, tags=["profile"])
app.include_router(timetable.router, prefix=f"{settings.api_prefix}/timetable", tags=["timetable"])
app.include_router(leaves.router, prefix=settings.api_prefix, tags=["leaves"])
