import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from softadmin.api.auth import router as auth_router
from softadmin.api.pages import GuardedStaticFiles, router as pages_router
from softadmin.api.software import router as software_router
from softadmin.config import Settings, settings as default_settings
from softadmin.errors import RegistryError
from softadmin.services.registry import RegistryService
from softadmin.sessions import SessionStore
from softadmin.storage import BlobStore, RegistryStore, build_blob_store, build_registry_store

logger = logging.getLogger(__name__)

ROUTE_NOT_FOUND = -4


def _install_error_handlers(app: FastAPI) -> None:
    # API failures are always HTTP 200 with a nonzero envelope code.

    @app.exception_handler(RegistryError)
    async def registry_error_handler(request: Request, exc: RegistryError):
        return JSONResponse(exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info(f"Invalid request to {request.url.path}: {exc.errors()}")
        return JSONResponse({"code": -1, "msg": "invalid request"})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if not request.url.path.startswith("/api/"):
            return PlainTextResponse(str(exc.detail), status_code=exc.status_code)
        if exc.status_code in (404, 405):
            return JSONResponse({"code": ROUTE_NOT_FOUND, "msg": "endpoint not found"})
        return JSONResponse({"code": -1, "msg": str(exc.detail)})


def create_app(
    settings: Settings | None = None,
    store: RegistryStore | None = None,
    blobs: BlobStore | None = None,
) -> FastAPI:
    settings = settings or default_settings
    store = store or build_registry_store(settings)
    blobs = blobs or build_blob_store(settings)
    sessions = SessionStore()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.initialize()
        blobs.initialize()
        yield
        sessions.clear()

    app = FastAPI(title="Software Admin", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.sessions = sessions
    app.state.blobs = blobs
    app.state.registry = RegistryService(store, blobs, sessions)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _install_error_handlers(app)

    app.include_router(auth_router, prefix="/api")
    app.include_router(software_router, prefix="/api")
    app.include_router(pages_router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    # Serve the admin UI
    public_dir = Path(settings.public_dir)
    if public_dir.is_dir():
        app.mount("/", GuardedStaticFiles(directory=str(public_dir), html=True), name="public")

    return app


app = create_app()
