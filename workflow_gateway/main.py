from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from typing import Optional
import uuid
from workflow_gateway.config import Settings, settings as default_settings
from workflow_gateway.api import workflows, executions
from workflow_gateway.core.exceptions import AppError
from workflow_gateway.core.logging import get_logger, log_context, setup_logger
from workflow_gateway.database import create_engine_from_settings, create_session_factory, init_models
from workflow_gateway.integrations.http_client import close_http_client, create_http_client

logger = get_logger("main")

def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    settings: Settings = app.state.settings
    engine = create_engine_from_settings(settings)
    if settings.AUTO_CREATE_TABLES:
        await init_models(engine)
    app.state.session_factory = create_session_factory(engine)
    app.state.http_client = create_http_client(settings)
    yield
    # Shutdown
    await close_http_client(app.state.http_client)
    await engine.dispose()

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _error_response(400, "Invalid request")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return _error_response(500, "Internal server error")

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings
    setup_logger(level=settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Set all CORS enabled origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]
        with log_context(request_id=request_id):
            response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    register_exception_handlers(app)

    app.include_router(workflows.router, prefix=settings.API_PREFIX, tags=["workflows"])
    app.include_router(executions.router, prefix=settings.API_PREFIX, tags=["executions"])

    @app.get("/")
    async def root():
        return {"message": "AI Workflow Gateway is running"}

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app

app = create_app()
