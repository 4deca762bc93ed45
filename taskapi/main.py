import logging
import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskapi.config import DEFAULT_SECRET_KEY, VERSION, Settings, load_settings
from taskapi.database import Database
from taskapi.errors import AppError
from taskapi.logging_config import configure_logging
from taskapi.routers import auth, health, tasks
from taskapi.services.auth import AuthService
from taskapi.stores.base import TaskStore, UserStore
from taskapi.stores.sql import SqlTaskStore, SqlUserStore
from taskapi.utils.auth import TokenIssuer

logger = logging.getLogger(__name__)

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]


def _preflight_headers(request: Request) -> dict:
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": ", ".join(CORS_METHODS),
        "Access-Control-Allow-Headers": request.headers.get(
            "access-control-request-headers", "Content-Type, Authorization"
        ),
        "Access-Control-Max-Age": "600",
    }


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        if err.get("type") == "json_invalid":
            parts.append("invalid JSON body")
            continue
        # integer locations are list indexes or byte offsets, not field names
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body" and not isinstance(p, int))
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "invalid request"


def create_app(
    settings: Optional[Settings] = None,
    *,
    database: Optional[Database] = None,
    task_store: Optional[TaskStore] = None,
    user_store: Optional[UserStore] = None,
) -> FastAPI:
    """Build the app with its stores wired in explicitly.

    Stores default to the SQLAlchemy implementations over ``database``; tests
    can pass their own.
    """
    settings = settings or load_settings()
    if settings.is_release and settings.secret_key == DEFAULT_SECRET_KEY:
        logger.warning("SECRET_KEY is not set; tokens are signed with the development default")

    database = database or Database(settings)
    database.create_all()

    tokens = TokenIssuer(settings.secret_key, settings.algorithm, settings.access_token_expire_minutes)
    user_store = user_store or SqlUserStore(database)

    docs = {} if not settings.is_release else {"docs_url": None, "redoc_url": None, "openapi_url": None}
    app = FastAPI(title="Task API", version=VERSION, **docs)
    app.state.settings = settings
    app.state.database = database
    app.state.task_store = task_store or SqlTaskStore(database)
    app.state.user_store = user_store
    app.state.token_issuer = tokens
    app.state.auth_service = AuthService(user_store, tokens)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=CORS_METHODS,
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def answer_preflight(request: Request, call_next):
        # every OPTIONS is a successful preflight, with or without CORS request headers
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=_preflight_headers(request))
        return await call_next(request)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        logger.debug("Started %s %s", request.method, request.url.path)
        response = await call_next(request)
        elapsed = (time.perf_counter() - start) * 1000
        logger.info(
            "Completed %s %s %s in %.1fms", request.method, request.url.path, response.status_code, elapsed
        )
        return response

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _validation_message(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code, content={"error": exc.detail}, headers=getattr(exc, "headers", None)
        )

    # Generic error handler to return JSON errors for unexpected exceptions
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "internal server error"})

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(tasks.router)
    return app


def run():
    import uvicorn

    settings = load_settings()
    configure_logging(settings.mode)
    logger.info("starting Task API %s on %s:%s (%s mode)", VERSION, settings.host, settings.port, settings.mode)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level="info" if settings.is_release else "debug",
    )


if __name__ == "__main__":
    run()
