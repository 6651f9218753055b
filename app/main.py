import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# ✅ Import All API Routes
from app.api.routes import auth, registration, profiles, matching, payments, subscriptions, contracts, comments, health

from app.core import config
from app.core.errors import AppError, InternalError
from app.core.logging_config import sanitize_log_data, setup_logging
from app.schemas.base import ErrorResponse
from app.services.email_service import EmailSender
from app.services.stripe_service import StripeService

logger = logging.getLogger(__name__)


# ============================================
# ✅ STARTUP / SHUTDOWN
# ============================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(config.LOG_LEVEL, config.LOG_DIR)

    if config.RUN_MIGRATIONS:
        from app.db.migrate import run_migrations
        run_migrations()
    elif config.DATABASE_URL.startswith("sqlite"):
        from app.db.init_db import init_db
        init_db()

    payments_service = StripeService.from_config()
    payments_service.initialize()
    app.state.payments = payments_service

    app.state.mailer = EmailSender.from_config()
    if not app.state.mailer.configured:
        logger.warning("SMTP_HOST is not set; OTP emails cannot be sent")

    settings = sanitize_log_data({
        "app_env": config.APP_ENV,
        "database_url": config.DATABASE_URL,
        "smtp_password": config.SMTP_PASSWORD,
        "stripe_secret_key": config.STRIPE_SECRET_KEY,
        "run_migrations": config.RUN_MIGRATIONS,
    })
    logger.info(f"Doula Connect API started: {settings}")
    yield
    logger.info("Doula Connect API stopped")


# ============================================
# ✅ FASTAPI APP INIT
# ============================================

app = FastAPI(
    title="Doula Connect API",
    version="1.0.0",
    lifespan=lifespan,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Authorization", "Content-Type", "Stripe-Signature"],
)


# ============================================
# ✅ ERROR RESPONSES
# ============================================

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.warning(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message, "code": exc.code})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    if field:
        message = f"{field}: {message}"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message, "code": "validation_error"},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    error = InternalError()
    return JSONResponse(status_code=error.status_code, content={"error": error.message, "code": error.code})


# ============================================
# ✅ REGISTER ALL ROUTERS
# ============================================

app.include_router(auth.router)
app.include_router(registration.router)
app.include_router(profiles.parents_router)
app.include_router(profiles.doulas_router)
app.include_router(matching.router)
app.include_router(payments.router)
app.include_router(subscriptions.router)
app.include_router(contracts.router)
app.include_router(contracts.users_router)
app.include_router(comments.router)
app.include_router(health.router)


# ============================================
# ✅ ROOT ENDPOINT
# ============================================

@app.get("/")
def root():
    return {"status": "Doula Connect API running"}
