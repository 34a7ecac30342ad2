import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse, Response
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.config.context import AppContext, build_context
from src.config.database import Base, engine
from src.config.settings import settings
from src.modules.actions.router import router as actions_router
from src.modules.common.errors import ReadwiseAudioError
from src.modules.feed.router import router as feed_router
from src.modules.store.service import SqlKeyValueStore
from src.modules.tts.router import router as tts_router

logger = logging.getLogger(__name__)

CORS_METHODS = ["GET", "POST", "OPTIONS"]
CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": ", ".join(CORS_METHODS),
    "Access-Control-Allow-Headers": "Content-Type",
}

MANIFEST = {
    "name": "Readwise Audio",
    "short_name": "RW Audio",
    "start_url": "/",
    "display": "standalone",
    "background_color": "#1a1a2e",
    "theme_color": "#e94560",
    "icons": [
        {"src": "/static/icon.svg", "sizes": "192x192", "type": "image/svg+xml"},
    ],
}

static_dir = Path(__file__).parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    context: AppContext = app.state.context
    if isinstance(context.store, SqlKeyValueStore):
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables synced")
    context.maintenance.start()
    yield
    context.maintenance.stop()
    await engine.dispose()


def create_app(context: AppContext | None = None) -> FastAPI:
    app = FastAPI(title="Readwise Audio", lifespan=lifespan)
    app.state.context = context or build_context(settings)

    # Answers browser preflights (Origin + Access-Control-Request-Method).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=CORS_METHODS,
        allow_headers=["Content-Type"],
    )

    # API routes
    app.include_router(feed_router, prefix="/api", tags=["feed"])
    app.include_router(actions_router, prefix="/api", tags=["actions"])
    app.include_router(tts_router, prefix="/api", tags=["tts"])

    @app.exception_handler(ReadwiseAudioError)
    async def service_error(request: Request, exc: ReadwiseAudioError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse({"error": str(exc)}, status_code=500, headers=CORS_HEADERS)

    @app.exception_handler(StarletteHTTPException)
    async def not_found(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            return PlainTextResponse("Not Found", status_code=404)
        return await http_exception_handler(request, exc)

    # Static files
    app.mount("/static", StaticFiles(directory=static_dir), name="static")

    @app.get("/")
    @app.get("/index.html")
    async def root():
        return FileResponse(static_dir / "index.html", media_type="text/html")

    @app.get("/manifest.json")
    async def manifest():
        return MANIFEST

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    # Bare OPTIONS requests pass through the middleware untouched and land here.
    @app.options("/{path:path}")
    async def preflight(path: str):
        return Response(status_code=204, headers=CORS_HEADERS)

    return app


app = create_app()


def run() -> None:
    import uvicorn

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "src.main:app",
        host=settings.app_host,
        port=settings.app_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
