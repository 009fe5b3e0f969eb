from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from contextlib import asynccontextmanager
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
import logging
import uuid

from .config import settings
from .database import create_tables, SessionLocal
from .models.operator import Operator
from .utils.security import hash_password
from .utils.rate_limiter import limiter
from .utils.logging_config import setup_logging, set_request_context, clear_request_context

from .routers import auth, rooms, availability, emergency, bookings, payments, health

logger = logging.getLogger(__name__)


def seed_admin_operator() -> None:
    """Create the configured admin operator if no operator with that name exists"""
    db = SessionLocal()
    try:
        admin = db.query(Operator).filter(Operator.username == settings.admin_username).first()
        if not admin:
            db.add(Operator(
                username=settings.admin_username,
                hashed_password=hash_password(settings.admin_password),
                is_active=True
            ))
            db.commit()
            logger.info(f"Created admin operator {settings.admin_username!r}")
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    setup_logging(level=settings.log_level, json_format=settings.log_json or settings.is_production)

    logger.info("Starting stayadmin...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"CORS Origins: {settings.cors_origins}")

    create_tables()
    seed_admin_operator()
    logger.info("Database ready")

    yield

    logger.info("Shutting down stayadmin...")


app = FastAPI(
    title="stayadmin API",
    description="Availability, pricing and booking administration",
    version="1.0.0",
    lifespan=lifespan
)

# Rate limiter state
app.state.limiter = limiter


# ================================
# CORS MIDDLEWARE - MUST BE FIRST!
# ================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)


# Request ID Middleware
class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4())[:8])
        request.state.request_id = request_id
        set_request_context(request_id)
        try:
            response = await call_next(request)
        finally:
            clear_request_context()
        response.headers["X-Request-ID"] = request_id
        return response


app.add_middleware(RequestIdMiddleware)


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={"detail": "Too many requests, try again later"}
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Database error"}
    )


app.include_router(auth.router)
app.include_router(rooms.router)
app.include_router(availability.router)
app.include_router(emergency.router)
app.include_router(bookings.router)
app.include_router(payments.router)
app.include_router(health.router)


@app.get("/")
async def root():
    return {
        "message": "stayadmin API",
        "version": "1.0.0",
        "docs": "/docs",
        "status": "running"
    }
