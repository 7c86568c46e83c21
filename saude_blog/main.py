import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from saude_blog.core.config import Settings, get_settings
from saude_blog.core.errors import BlogError
from saude_blog.core.log import configure_logging
from saude_blog.db.init_db import init_db
from saude_blog.db.session import build_engine
from saude_blog.routers.admin_auth import router as admin_auth_router
from saude_blog.routers.admin_post import router as admin_post_router
from saude_blog.routers.public import router as public_router
from saude_blog.services.auth_service import (
    decode_session_cookie,
    encode_session_cookie,
    is_authenticated,
)

SESSION_COOKIE_NAME = "saude_blog_session"
ADMIN_API_PREFIX = "/admin/api"
_PUBLIC_ADMIN_PATHS = {f"{ADMIN_API_PREFIX}/login"}

logger = logging.getLogger(__name__)


def _is_guarded_path(path: str) -> bool:
    if path in _PUBLIC_ADMIN_PATHS:
        return False
    return path == ADMIN_API_PREFIX or path.startswith(f"{ADMIN_API_PREFIX}/")


_REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}


def _validation_message(exc: RequestValidationError) -> str:
    fields = [
        ".".join(str(part) for part in error.get("loc", ()) if part not in _REQUEST_LOCATIONS)
        for error in exc.errors()
    ]
    fields = [field for field in fields if field]
    if not fields:
        return "Dados inválidos."
    return f"Dados inválidos: {', '.join(sorted(set(fields)))}."


def create_app(settings: Settings | None = None, engine: Engine | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    engine = engine or build_engine(settings.database_url, echo=settings.app_debug)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.auto_init_db:
            init_db(engine, settings)
            logger.info("Database initialized")
        yield
        engine.dispose()

    app = FastAPI(title=settings.app_name, debug=settings.app_debug, lifespan=lifespan)
    app.state.engine = engine
    app.state.settings = settings

    @app.middleware("http")
    async def session_and_admin_guard(request: Request, call_next):
        request.scope["session"] = decode_session_cookie(
            settings.secret_key,
            request.cookies.get(SESSION_COOKIE_NAME),
        )

        if _is_guarded_path(request.url.path) and not is_authenticated(request):
            return JSONResponse(
                {"error": "Autenticação necessária."},
                status_code=status.HTTP_401_UNAUTHORIZED,
            )

        response = await call_next(request)
        session_data = request.scope.get("session")
        if isinstance(session_data, dict) and session_data:
            response.set_cookie(
                key=SESSION_COOKIE_NAME,
                value=encode_session_cookie(settings.secret_key, session_data),
                httponly=True,
                samesite="lax",
                secure=settings.is_production,
                path="/",
            )
        elif SESSION_COOKIE_NAME in request.cookies:
            response.delete_cookie(
                key=SESSION_COOKIE_NAME,
                httponly=True,
                samesite="lax",
                secure=settings.is_production,
                path="/",
            )
        return response

    @app.exception_handler(BlogError)
    async def blog_error_handler(request: Request, exc: BlogError):
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            {"error": _validation_message(exc)},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            {"error": "Erro interno do servidor."},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    app.include_router(public_router)
    app.include_router(admin_auth_router)
    app.include_router(admin_post_router)
    return app
