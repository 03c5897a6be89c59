import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo import MongoClient

from school_chat import __version__
from school_chat.core.config import Settings, settings as default_settings
from school_chat.core.logging import setup_logging
from school_chat.database import Database, create_client
from school_chat.routers import classroom, rooms, users
from school_chat.services import ServiceRegistry

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, client: Optional[MongoClient] = None) -> FastAPI:
    """
    Build the FastAPI application.

    The MongoDB client is opened when the application starts and closed when
    it stops. Passing ``client`` hands over an already-built client instead
    (the tests pass a mongomock client).
    """
    settings = settings or default_settings
    setup_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        mongo = client or create_client(settings)
        db = Database.from_client(mongo, settings.DATABASE_NAME)
        db.ensure_indexes()

        app.state.services = ServiceRegistry(db)
        logger.info("%s started on database %s", settings.APP_NAME, settings.DATABASE_NAME)
        try:
            yield
        finally:
            mongo.close()
            logger.info("%s stopped", settings.APP_NAME)

    app = FastAPI(
        title=settings.APP_NAME,
        description="School communication API: users, classes and chat rooms",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Missing or malformed input is reported as 406 before any service runs."""
        return JSONResponse(
            status_code=status.HTTP_406_NOT_ACCEPTABLE,
            content={"detail": jsonable_errors(exc)},
        )

    # Include routers
    app.include_router(users.router)
    app.include_router(classroom.router)
    app.include_router(rooms.router)

    @app.get("/", tags=["Health"])
    async def root():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "message": f"Welcome to {settings.APP_NAME}",
            "docs": "/docs",
        }

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Detailed health check endpoint."""
        return {
            "status": "healthy",
            "app_name": settings.APP_NAME,
            "debug": settings.DEBUG,
            "database": settings.DATABASE_NAME,
        }

    return app


def jsonable_errors(exc: RequestValidationError) -> list:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in exc.errors()
    ]


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("school_chat.main:app", host="127.0.0.1", port=8000, reload=True)
