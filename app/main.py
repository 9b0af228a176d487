# app/main.py
from fastapi import FastAPI, Request
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from app.config import Settings, get_settings
from app.api.deps import get_store
from app.api.routes import reviews as reviews_routes
from app.middleware.cors_config import configure_cors
from app.middleware.security_headers import add_security_headers


logger = logging.getLogger("uvicorn.error")

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"]


def _resolve_public_file(public_dir: Path, url_path: str) -> Optional[Path]:
    """Map a URL path to a file under public_dir, refusing anything outside it."""
    root = public_dir.resolve()
    candidate = (root / url_path.lstrip("/")).resolve()
    try:
        candidate.relative_to(root)
    except ValueError:
        return None
    if candidate.is_dir():
        candidate = candidate / "index.html"
    return candidate if candidate.is_file() else None


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    public_dir = Path(settings.PUBLIC_DIR)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Startup checks: report where reviews are kept and whether the
        static site is present.
        """
        store = get_store(settings)
        logger.info("[reviews] Using file: %s (%d site reviews)", store.path, store.count())
        if not public_dir.is_dir():
            logger.warning("Public directory %s not found; only the API will be served", public_dir)
        if not (settings.GOOGLE_PLACE_ID and settings.GOOGLE_API_KEY):
            logger.info("GOOGLE_PLACE_ID / GOOGLE_API_KEY not set; serving site reviews only")
        yield
        logger.info("Shutting down site reviews server")

    app = FastAPI(title="Site Reviews", version="0.1.0", lifespan=lifespan)
    app.dependency_overrides[get_settings] = lambda: settings
    configure_cors(app, settings.cors_origins_list)
    add_security_headers(app)

    for exc_class, handler in reviews_routes.EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exc_class, handler)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    app.include_router(reviews_routes.router)

    @app.get("/health", tags=["root"])
    def health():
        store = get_store(settings)
        return {"status": "ok", "site_reviews": store.count()}

    # Registered last so API routes win. Serves files from public/, falls back
    # to index.html for extension-less GETs (client-side routes), else 404.
    @app.api_route("/{full_path:path}", methods=ALL_METHODS, include_in_schema=False)
    async def static_or_fallback(request: Request, full_path: str):
        if request.method in ("GET", "HEAD"):
            found = _resolve_public_file(public_dir, full_path)
            if found:
                return FileResponse(found)
            if request.method == "GET" and not Path(full_path).suffix:
                index = public_dir / "index.html"
                if index.is_file():
                    return FileResponse(index)
        return PlainTextResponse("Not found: " + request.url.path, status_code=404)

    return app


app = create_app()
