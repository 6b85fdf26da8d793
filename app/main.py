import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from supabase import Client

from .config import Settings, get_settings
from .errors import ValidationError
from .routers import comments, ratings
from .supabase_client import build_supabase_client
from .utils.logging import configure_logging

logger = logging.getLogger(__name__)


def _describe_request_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        field = error.get("loc", ())[-1] if error.get("loc") else "request"
        parts.append(f"{field}: {error.get('msg')}")
    return "; ".join(parts) or "Invalid request"


def create_app(settings: Settings | None = None, supabase: Client | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.supabase = supabase or build_supabase_client(settings)
        logger.info("%s started", settings.APP_NAME)
        yield
        app.state.supabase = None

    app = FastAPI(title=settings.APP_NAME, redirect_slashes=False, lifespan=lifespan)
    app.dependency_overrides[get_settings] = lambda: settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(ratings.router, prefix=settings.API_PREFIX)
    app.include_router(comments.router, prefix=settings.API_PREFIX)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _describe_request_errors(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "An internal error occurred."})

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
