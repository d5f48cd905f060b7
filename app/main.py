"""Main FastAPI application."""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.errors import ValidationError
from app.routers import health, variants

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)

INVALID_BODY_MESSAGE = "Missing or invalid 'handle' or 'selectedOptions' array in request body."
INVALID_DECREASE_MESSAGE = "'decreaseBy' must be a positive integer."

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Resolves Shopify variants by option and keeps their custom stock metafield in step"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(variants.router, tags=["Variants"])


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as 400 instead of FastAPI's 422."""
    errors = exc.errors()
    if any("decreaseBy" in error.get("loc", ()) for error in errors):
        bad_request = ValidationError(INVALID_DECREASE_MESSAGE)
    else:
        bad_request = ValidationError(INVALID_BODY_MESSAGE)
    details = [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg")}
        for error in errors
    ]
    return JSONResponse(
        status_code=bad_request.status_code,
        content={"error": bad_request.message, "details": details},
    )


@app.on_event("startup")
async def startup_event():
    """Refuse to start without Shopify credentials."""
    missing = settings.missing_credentials()
    if missing:
        for name in missing:
            logger.error("Error: %s is missing in environment or .env file.", name)
        raise RuntimeError(f"Missing required configuration: {', '.join(missing)}")
    logger.info(
        "%s %s ready for %s (API %s)",
        settings.app_name,
        settings.app_version,
        settings.shopify_store_domain,
        settings.shopify_api_version,
    )
