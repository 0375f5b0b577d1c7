"""FastAPI application for the interpret-search edge gateway."""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from propsearch.ai.errors import InterpretError, RateLimitError
from propsearch.ai.extractor import FilterExtractor
from propsearch.api.rate_limit import limiter
from propsearch.api.v1.interpret import get_extractor
from propsearch.api.v1.interpret import router as interpret_router
from propsearch.logging_config import get_logger
from propsearch.settings import settings

logger = get_logger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


class CorsHeadersMiddleware(BaseHTTPMiddleware):
    """Open cross-origin access for browser clients.

    Preflight ``OPTIONS`` requests are answered here with an empty body.
    Unhandled errors become a JSON 500 so they still carry the CORS headers.
    """

    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)

        try:
            response = await call_next(request)
        except Exception:
            logger.exception("unhandled_error", path=request.url.path)
            response = JSONResponse(status_code=500, content=InterpretError().to_payload())

        response.headers.update(CORS_HEADERS)
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("app_starting", env=settings.env, model=settings.ai_model)

    if not get_extractor().is_configured:
        # Keep serving; every call answers 500 until the key is set
        logger.error(
            "gateway_not_configured",
            message="AI_GATEWAY_API_KEY is not set; every interpret call will fail",
        )

    yield

    logger.info("app_shutting_down")


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Returns:
        Configured FastAPI app
    """
    is_production = settings.env == "production"

    app = FastAPI(
        title="Propsearch Gateway",
        description="Natural-language property search interpretation",
        version="1.0.0",
        docs_url=None if is_production else "/api/docs",
        redoc_url=None if is_production else "/api/redoc",
        openapi_url=None if is_production else "/api/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(CorsHeadersMiddleware)

    app.state.limiter = limiter

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        return JSONResponse(status_code=429, content=RateLimitError().to_payload())

    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError):
        logger.info("request_body_invalid", path=request.url.path, errors=len(exc.errors()))
        return JSONResponse(status_code=400, content={"error": "invalid request body"})

    app.include_router(interpret_router, prefix="/api/v1")

    @app.get("/health")
    async def health_check(extractor: FilterExtractor = Depends(get_extractor)):
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": "1.0.0",
            "env": settings.env,
            "backend_configured": extractor.is_configured,
        }

    return app


# Create app instance
app = create_app()
