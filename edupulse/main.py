"""EduPulse API - Main Application."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from cassandra import DriverException
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from edupulse.auth.permissions import UserRole
from edupulse.config import Settings, get_settings
from edupulse.core.context import get_request_id
from edupulse.core.exceptions import AppError, InternalError
from edupulse.core.logging import configure_structlog, get_logger
from edupulse.core.middleware import RequestContextMiddleware
from edupulse.courses.repository import CourseRepository
from edupulse.courses.router import router as courses_router
from edupulse.courses.service import CourseService
from edupulse.health import router as health_router
from edupulse.progress.repository import EnrollmentRepository
from edupulse.progress.router import router as enrollments_router
from edupulse.progress.service import ProgressService
from edupulse.users.repository import UserRepository
from edupulse.users.router import router as users_router
from edupulse.users.service import UserService


# Configure logging early (before creating logger)
settings = get_settings()
configure_structlog(settings)

logger = get_logger(__name__)


_HTTP_ERROR_CODES = {
    status.HTTP_401_UNAUTHORIZED: "unauthenticated",
    status.HTTP_403_FORBIDDEN: "access_denied",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
    status.HTTP_503_SERVICE_UNAVAILABLE: "service_unavailable",
}


def install_services(
    app: FastAPI,
    courses: CourseRepository,
    enrollments: EnrollmentRepository,
    users: UserRepository,
    settings: Settings,
) -> None:
    """Wire repositories into services and expose them on ``app.state``."""
    progress_service = ProgressService(
        enrollments,
        courses,
        max_update_attempts=settings.progress_update_max_attempts,
    )
    course_service = CourseService(courses, progress_service)
    user_service = UserService(users, course_service, progress_service)

    app.state.progress_service = progress_service
    app.state.course_service = course_service
    app.state.user_service = user_service


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings = get_settings()
    logger.info(
        "starting_application",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )

    # Driver import deferred to startup
    from edupulse.core.database import init_cassandra, shutdown_cassandra

    try:
        session = init_cassandra()
        keyspace = settings.cassandra_keyspace
        install_services(
            app,
            courses=CourseRepository(session, keyspace),
            enrollments=EnrollmentRepository(session, keyspace),
            users=UserRepository(session, keyspace),
            settings=settings,
        )
        app.state.cassandra_session = session
        logger.info("services_initialized")
    except Exception as e:
        logger.warning(
            "database_init_skipped",
            error=str(e),
            message="Running without database connection",
        )

    if settings.bootstrap_admin_id and getattr(app.state, "user_service", None):
        app.state.user_service.ensure_profile(
            settings.bootstrap_admin_id,
            email=settings.bootstrap_admin_email,
            name=settings.bootstrap_admin_name,
            role=UserRole.ADMIN,
        )

    yield

    logger.info("shutting_down_application")
    shutdown_cassandra()


def _error_body(
    request: Request, status_code: int, message: str, code: str
) -> dict[str, Any]:
    return {
        "error": True,
        "message": message,
        "code": code,
        "status_code": status_code,
        "request_id": getattr(request.state, "request_id", None)
        or get_request_id()
        or None,
    }


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    # Never let Starlette render stack traces; the handlers below log them
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Online course marketplace API",
        debug=False,
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        openapi_url="/openapi.json" if settings.is_development else None,
    )

    app.add_middleware(
        RequestContextMiddleware,
        log_requests=settings.log_requests,
        exclude_paths=settings.log_exclude_paths,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
        max_age=settings.cors_max_age,
    )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> ORJSONResponse:
        """Render domain errors with their status and code."""
        logger.warning(
            "app_error",
            status_code=exc.status_code,
            code=exc.code,
            detail=exc.message,
            path=request.url.path,
            method=request.method,
        )
        return ORJSONResponse(
            status_code=exc.status_code,
            content=_error_body(request, exc.status_code, exc.message, exc.code),
        )

    @app.exception_handler(DriverException)
    async def driver_error_handler(
        request: Request, exc: DriverException
    ) -> ORJSONResponse:
        """Cassandra failures become a generic 500 with the traceback logged."""
        logger.exception(
            "database_error",
            error_type=type(exc).__name__,
            path=request.url.path,
            method=request.method,
        )
        error = InternalError("A database error occurred. Please try again later.")
        return ORJSONResponse(
            status_code=error.status_code,
            content=_error_body(request, error.status_code, error.message, error.code),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> ORJSONResponse:
        """Handle HTTP exceptions with safe error messages."""
        logger.warning(
            "http_exception",
            status_code=exc.status_code,
            detail=str(exc.detail),
            path=request.url.path,
            method=request.method,
        )
        message = (
            str(exc.detail)
            if exc.status_code < status.HTTP_500_INTERNAL_SERVER_ERROR
            else "Internal server error"
        )
        return ORJSONResponse(
            status_code=exc.status_code,
            content=_error_body(
                request,
                exc.status_code,
                message,
                _HTTP_ERROR_CODES.get(exc.status_code, "http_error"),
            ),
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> ORJSONResponse:
        """Handle request validation errors with field details."""
        logger.warning(
            "validation_error",
            errors=exc.errors(),
            path=request.url.path,
            method=request.method,
        )
        body = _error_body(
            request,
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "Validation error",
            "validation_error",
        )
        body["details"] = [
            {
                "field": ".".join(str(loc) for loc in err.get("loc", [])),
                "message": err.get("msg", "Invalid value"),
            }
            for err in exc.errors()
        ]
        return ORJSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=body
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request, exc: Exception
    ) -> ORJSONResponse:
        """Catch-all handler: log the traceback, return a generic message."""
        logger.exception(
            "unhandled_exception",
            error_type=type(exc).__name__,
            error_message=str(exc),
            path=request.url.path,
            method=request.method,
        )
        return ORJSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(
                request,
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "An unexpected error occurred. Please try again later.",
                "internal_error",
            ),
        )

    app.include_router(health_router)
    app.include_router(courses_router)
    app.include_router(enrollments_router)
    app.include_router(users_router)

    @app.get("/", include_in_schema=False)
    async def root(request: Request) -> dict[str, str]:
        """Root endpoint."""
        return {
            "message": "EduPulse API",
            "version": settings.app_version,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "edupulse.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
