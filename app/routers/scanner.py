"""Scanner router for the CalendAI website scanner.

Exposes the website scan used by the AI event type creation flow.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from app.models import ScanResult
from app.services import WebsiteScanner
from app.services.url_utils import sanitize_for_log

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["AI"])


class ScanWebsiteRequest(BaseModel):
    """Request model for a website scan.

    Attributes:
        url: Website address; the scheme is optional.
    """

    url: str = Field(..., min_length=1, max_length=2048, description="Website URL to scan")


def get_website_scanner() -> WebsiteScanner:
    """Dependency hook returning a scanner with default collaborators."""
    return WebsiteScanner()


@router.post("/scan-website", response_model=ScanResult)
async def scan_website_endpoint(
    payload: ScanWebsiteRequest,
    scanner: WebsiteScanner = Depends(get_website_scanner),
) -> ScanResult:
    """Scan a website and return detected business details and branding.

    Failures such as an invalid URL or unreachable site are reported in the
    ``warning`` field of a 200 response, not as error statuses.
    """
    logger.info(f"Website scan requested for {sanitize_for_log(payload.url)!r}")
    try:
        return await scanner.scan(payload.url)
    except Exception as e:
        logger.exception(f"Error scanning website: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to scan website",
        ) from e
