from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from bookstore import models  # noqa: F401  registers tables on Base.metadata
from bookstore.api.books import error_body, router as books_router
from bookstore.config import load_settings
from bookstore.db import Base, get_db, make_engine, make_session_factory
from bookstore.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(database_url: Optional[str] = None) -> FastAPI:
    """
    Build the API. The store URL comes from DATABASE_URL (suffixed under APP_ENV=test)
    unless given explicitly; the engine lives exactly as long as the lifespan.
    """
    settings = load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level)
        url = database_url or settings.db_uri
        engine = make_engine(url, echo=settings.db_echo)
        try:
            # Create tables at startup; bookstore.migrate is the managed path
            Base.metadata.create_all(bind=engine)
            app.state.engine = engine
            app.state.session_factory = make_session_factory(engine)
            logger.info("store ready (%s)", engine.url.render_as_string(hide_password=True))
            yield
        finally:
            engine.dispose()
            logger.info("store closed")

    app = FastAPI(title="Bookstore API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(error_body(str(exc.detail), exc.status_code), status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.error("unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(error_body("Internal Server Error", 500), status_code=500)

    app.include_router(books_router)

    @app.get("/")
    def root():
        return {"message": "Bookstore API is up. Try /books, /health or /db-ping."}

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/db-ping")
    def db_ping(db: Session = Depends(get_db)):
        db.execute(text("select 1")).scalar()
        return {"db": "ok"}

    return app


app = create_app()
