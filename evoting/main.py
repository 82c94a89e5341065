# main.py
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from evoting import config
from evoting.database.connection import MongoStore
from evoting.errors import VotingError
from evoting.routes.auth_routes import auth_router
from evoting.routes.vote_routes import vote_router

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)


def _envelope(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def create_app(store: MongoStore = None) -> FastAPI:
    """
    Build the API around a store.

    The store is opened when the application starts and closed on shutdown.
    Pass one in to point the app at a different database or client.
    """
    store = store or MongoStore()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store.connect()
        yield
        store.close()

    app = FastAPI(title="E-Voting Backend", lifespan=lifespan)
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ==========================================================================
    # Request logging
    # ==========================================================================
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info(f"Request received: {request.method} {request.url.path}")
        return await call_next(request)

    # ==========================================================================
    # Error envelopes
    # ==========================================================================
    @app.exception_handler(VotingError)
    async def voting_error_handler(request: Request, exc: VotingError):
        return _envelope(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info(f"Rejected malformed request to {request.url.path}")
        return _envelope(400, "Invalid request body")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            logger.info(f"404: {request.method} {request.url.path}")
            return _envelope(404, "Route not found")
        return _envelope(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return _envelope(500, "Internal server error")

    # ==========================================================================
    # Routes
    # ==========================================================================
    app.include_router(auth_router)
    app.include_router(vote_router)

    @app.get("/", tags=["Root"])
    def read_root():
        return {"success": True, "message": "Welcome to the e-voting backend!"}

    @app.get("/test", tags=["Root"])
    def test():
        return {"success": True, "message": "Backend is running!"}

    @app.get("/health", tags=["Root"])
    def health_check():
        if not store.ping():
            return JSONResponse(
                status_code=503,
                content={"success": False, "database": "unavailable"},
            )
        return {"success": True, "database": "connected"}

    return app


app = create_app()


def run():
    uvicorn.run("evoting.main:app", host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    run()
