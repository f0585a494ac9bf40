import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.cors import CORSMiddleware

from .config import Settings
from .database import connect
from .routes import ROUTES
from .uploads import UPLOADS_PREFIX

logger = logging.getLogger(__name__)

CORS_REJECTION_PREFIX = "The CORS policy"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def create_app(settings: Optional[Settings] = None, db=None) -> FastAPI:
    """Build the API. Pass db to run against an already opened database."""
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = FastAPI(title="Mini LinkedIn API")
    app.state.settings = settings
    app.state.mongo_client = None
    if db is None:
        app.state.mongo_client = connect(settings)
        db = app.state.mongo_client[settings.db_name]
    app.state.db = db

    # Serve uploads folder statically for media files
    settings.uploads_dir.mkdir(parents=True, exist_ok=True)
    app.mount(UPLOADS_PREFIX, StaticFiles(directory=settings.uploads_dir), name="uploads")

    for prefix, router in ROUTES:
        app.include_router(router, prefix=prefix)

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return "Welcome to Mini LinkedIn API"

    # Registered before CORSMiddleware so error responses still get CORS headers
    @app.middleware("http")
    async def unhandled_error(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            return JSONResponse(status_code=500, content={"message": "Server error"})

    app.add_middleware(
        CORSMiddleware,
        allow_credentials=True,
        allow_origins=settings.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Registered after CORSMiddleware so it runs first
    @app.middleware("http")
    async def reject_unknown_origins(request: Request, call_next):
        origin = request.headers.get("origin")
        if origin and origin not in settings.allowed_origins:
            logger.warning("Rejected request from origin %s", origin)
            return JSONResponse(
                status_code=403,
                content={"message": f"{CORS_REJECTION_PREFIX} for this site does not allow access from Origin: {origin}"},
            )
        return await call_next(request)

    @app.on_event("shutdown")
    async def shutdown_db_client():
        if app.state.mongo_client is not None:
            app.state.mongo_client.close()

    return app


def main() -> None:
    settings = Settings.from_env()
    app = create_app(settings)
    logger.info("Server running on port %s", settings.port)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
