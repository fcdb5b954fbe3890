"""FastAPI application for the CalendAI website scanner.

This module provides the main FastAPI application instance with CORS
middleware configuration and router registration for the website scanning
service used by CalendAI's AI-assisted event type setup.
"""

# Load environment variables before any other imports
from dotenv import load_dotenv

load_dotenv()

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import CORS_ORIGINS
from app.routers.scanner import router as scanner_router


# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# API version and metadata
API_VERSION = "0.1.0"
API_TITLE = "CalendAI Website Scanner API"
API_DESCRIPTION = """
Website scanning API for CalendAI.

Given a business website, this API:
- Validates the address and fetches the page
- Extracts title, description, logo and theme colour
- Uses an LLM to suggest business details and brand colours for booking pages
"""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager.

    Reports whether AI analysis is available at startup and closes the
    shared OpenAI client on shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup is complete.
    """
    from app.services import get_openai_service

    service = get_openai_service()
    logger.info(f"OpenAI service configured: {service.is_configured}")
    if not service.is_configured:
        logger.warning("No OpenAI API key configured - scans will return raw metadata only")
    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application...")
    await get_openai_service().close()
    logger.info("OpenAI service closed")


# Create FastAPI application instance
app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)


# Configure CORS middleware
# Allow requests from Vite dev server (localhost:5173) by default
# Can be overridden via CORS_ORIGINS environment variable (comma-separated list)
_default_origins = [
    "http://localhost:5173",  # Vite dev server
    "http://127.0.0.1:5173",  # Vite dev server (alternative)
    "http://localhost:5000",  # CalendAI web app
    "http://127.0.0.1:5000",  # CalendAI web app (alternative)
]

if CORS_ORIGINS:
    ALLOWED_ORIGINS = [
        origin.strip() for origin in CORS_ORIGINS.split(",") if origin.strip()
    ]
else:
    ALLOWED_ORIGINS = _default_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=[
        "Content-Type",
        "Authorization",
        "Accept",
        "Origin",
        "X-Requested-With",
    ],
    expose_headers=["Content-Length", "Content-Type"],
)


@app.get("/", tags=["Root"])
async def root() -> dict[str, Any]:
    """Root endpoint returning API information.

    Returns:
        Dict containing API metadata including name, version,
        description, and available documentation URLs.
    """
    return {
        "name": API_TITLE,
        "version": API_VERSION,
        "description": "Website scanning API for CalendAI",
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc",
            "openapi": "/openapi.json",
        },
        "status": "operational",
    }


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint for monitoring and load balancers.

    Returns:
        Dict with status indicating the API is healthy.
    """
    return {"status": "healthy"}


# Router registration
app.include_router(scanner_router, prefix="/api")
