"""Main FastAPI application with modular architecture."""
from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from thumbgen.core.config import settings
from thumbgen.core.exceptions import ThumbGenBaseException
from thumbgen.api import channels_router, generation_router, health_router
from thumbgen.utils.logging import CorrelatedLogger, LoggerSetup
from thumbgen.utils.response_helpers import ResponseHelper

# Setup logging
LoggerSetup.setup_logging()
logger = CorrelatedLogger(__name__)

PROTECTED_PATHS = ["/generate", "/channels/dictionary", "/channels/pattern"]

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info(f"{settings.api_title} v{settings.api_version} starting up")
    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY is not set; image generation and scene reasoning are unavailable")
    if not settings.replicate_api_token:
        logger.warning("REPLICATE_API_TOKEN is not set; face swap requests will keep the generated image")
    yield
    logger.info("Application shutting down")

# Create FastAPI application
app = FastAPI(
    title=settings.api_title,
    description=settings.api_description,
    version=settings.api_version,
    lifespan=lifespan,
    swagger_ui_parameters={
        "defaultModelsExpandDepth": -1,
        "tryItOutEnabled": True,
    }
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Configure OpenAPI security scheme
def custom_openapi():
    """Custom OpenAPI configuration with security."""
    if app.openapi_schema:
        return app.openapi_schema

    from fastapi.openapi.utils import get_openapi
    openapi_schema = get_openapi(
        title=settings.api_title,
        version=settings.api_version,
        description=settings.api_description,
        routes=app.routes,
    )

    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "ApiKeyAuth": {
            "type": "apiKey",
            "in": "header",
            "name": "x-api-key"
        }
    }

    # Apply security to protected endpoints
    for path in openapi_schema["paths"]:
        for method in openapi_schema["paths"][path]:
            if method == "post" and path in PROTECTED_PATHS:
                openapi_schema["paths"][path][method]["security"] = [{"ApiKeyAuth": []}]

    app.openapi_schema = openapi_schema
    return app.openapi_schema

app.openapi = custom_openapi

@app.exception_handler(ThumbGenBaseException)
async def thumbgen_exception_handler(request, exc: ThumbGenBaseException):
    """Handle service exceptions raised outside the route handlers."""
    return ResponseHelper.create_error_from_exception(exc)

@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    """Handle FastAPI HTTP exceptions."""
    return ResponseHelper.create_error_response(
        error_code="HTTP_ERROR",
        message=str(exc.detail),
        status_code=exc.status_code
    )

@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unhandled error on {request.url.path}: {exc}")

    return ResponseHelper.create_error_response(
        error_code="INTERNAL_SERVER_ERROR",
        message="An unexpected error occurred",
        status_code=500
    )

# Include routers
app.include_router(health_router)
app.include_router(generation_router)
app.include_router(channels_router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "thumbgen.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug_mode,
        log_level=settings.log_level.lower()
    )
