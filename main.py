import logging
import time
import traceback
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config.settings import Settings
from app.database import Database
from app.routers import auth, dashboard, employee, task
from app.utils.security import build_password_context

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


def configure_logging(level: str):
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s %(message)s",
        datefmt="%I:%M:%S %p",
    )


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Validation failed"
    first = errors[0]
    # loc looks like ("body", "employeeId") or ("query", "limit")
    field = ".".join(str(part) for part in first.get("loc", ())[1:])
    message = first.get("msg", "Invalid value")
    return f"{field}: {message}" if field else message


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code >= 500:
            logger.error("HTTP error on %s %s: %s", request.method, request.url.path, exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": _validation_message(exc)},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception on %s %s: %s\n%s",
            request.method,
            request.url.path,
            exc,
            traceback.format_exc(),
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal Server Error"},
        )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Task Tracker API", version="1.0.0")
    app.state.settings = settings
    app.state.database = Database(settings)
    # per-app so two apps in one process keep their own bcrypt cost
    app.state.pwd_context = build_password_context(settings.bcrypt_rounds)

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def log_api_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        if request.url.path.startswith(API_PREFIX):
            duration_ms = (time.perf_counter() - start) * 1000
            logger.info(
                "%s %s %s in %dms",
                request.method,
                request.url.path,
                response.status_code,
                duration_ms,
            )
        return response

    register_exception_handlers(app)

    # Route registration
    app.include_router(auth.router, prefix=API_PREFIX)
    app.include_router(employee.router, prefix=API_PREFIX)
    app.include_router(task.router, prefix=API_PREFIX)
    app.include_router(dashboard.router, prefix=API_PREFIX)

    # Startup and shutdown events
    @app.on_event("startup")
    def startup_event():
        logger.info("Starting Task Tracker API...")
        app.state.database.create_all()

    @app.on_event("shutdown")
    def shutdown_event():
        logger.info("Shutting down Task Tracker API...")
        app.state.database.dispose()

    # Root route
    @app.get("/")
    def read_root():
        return {"message": "Task Tracker API"}

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
