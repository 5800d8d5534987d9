# api/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.config import Settings, load_settings
from api.dependencies.services import ServiceContainer, build_container
from api.routers import health, reporting, research
from services.errors import ResearchDigestError

logger = logging.getLogger(__name__)


def _error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ResearchDigestError)
    async def research_digest_error_handler(request: Request, exc: ResearchDigestError):
        if exc.status_code >= 500:
            logger.error(f"❌ {request.url.path} failed: {exc.message}", exc_info=exc)
        else:
            logger.warning(f"{request.url.path} rejected ({exc.status_code}): {exc.message}")
        return _error_response(exc.message, exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
        return _error_response("Invalid request payload", 400)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.url.path}", exc_info=exc)
        return _error_response("Internal server error", 500)


def create_app(settings: Optional[Settings] = None, services: Optional[ServiceContainer] = None) -> FastAPI:
    """
    Build the API. Collaborators are constructed once in the lifespan hook
    unless a prebuilt container is passed in.
    """
    settings = settings or load_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = app.state.services is None
        if owned:
            logger.info(f"🚀 Starting Research Digest backend ({settings.app_env})")
            try:
                app.state.services = build_container(settings)
            except Exception as e:
                logger.error(f"❌ Failed to initialize services: {e}", exc_info=True)
                raise
        yield
        if owned:
            await app.state.services.aclose()
            app.state.services = None
        logger.info("🛑 Shutting down Research Digest backend")

    app = FastAPI(
        title="Research Digest API",
        version="1.0.0",
        description="Paper search, AI summaries and structured research reports.",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "Authorization"],
    )

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(research.router, prefix="/api", tags=["Research"])
    app.include_router(reporting.router, prefix="/api", tags=["Reporting"])

    return app


app = create_app()


def run():
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=app.state.settings.port)


if __name__ == "__main__":
    run()
