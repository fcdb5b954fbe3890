"""Services package for the CalendAI website scanner."""

from app.services.metadata_extractor import RawMetadata, extract_metadata
from app.services.openai_service import OpenAIService, get_openai_service
from app.services.page_fetcher import FetchedPage, PageFetcher
from app.services.url_utils import normalize_url, resolve_url
from app.services.website_scanner import WebsiteScanner, scan_website

__all__ = [
    "RawMetadata",
    "extract_metadata",
    "OpenAIService",
    "get_openai_service",
    "FetchedPage",
    "PageFetcher",
    "normalize_url",
    "resolve_url",
    "WebsiteScanner",
    "scan_website",
]
