"""Website scanner for pre-populating booking pages with a business's branding.

A scan runs a short linear pipeline:

1. Validate and normalize the URL (no I/O for rejected URLs)
2. Fetch the page
3. Extract raw metadata from the HTML
4. Ask the LLM for business details and brand colours
5. Assemble the result, falling back to raw metadata if step 4 fails

Scanning never raises; every failure is reported through ``ScanResult.warning``.
"""

import logging
import re
from typing import Any

import httpx

from app.core.config import SCANNER_BODY_TEXT_LIMIT
from app.exceptions import EnrichmentFailedError, InvalidUrlError, UnreachableHostError
from app.models import Branding, ScanResult
from app.services.metadata_extractor import RawMetadata, extract_metadata
from app.services.openai_service import OpenAIService, get_openai_service
from app.services.page_fetcher import PageFetcher
from app.services.url_utils import normalize_url, sanitize_for_log

logger = logging.getLogger(__name__)

INVALID_URL_WARNING = "The provided URL is not valid. Please enter a valid website address."
UNREACHABLE_WARNING = "Could not reach the website. Please enter your branding details manually."
AI_FAILED_WARNING = "AI analysis failed. Basic metadata has been extracted from the website."

# Patterns stripped from page text before it is placed in the prompt
PROMPT_INJECTION_PATTERNS = [
    r"ignore\s+(previous|all|above)\s+instructions",
    r"disregard\s+(previous|all|above)",
    r"forget\s+(everything|all|previous)",
    r"new\s+instructions?:",
    r"system\s*:",
    r"assistant\s*:",
    r"\[INST\]",
    r"\[/INST\]",
    r"<\|im_start\|>",
    r"<\|im_end\|>",
]

BRANDING_PROMPT = """You are a branding analysis assistant. Analyse the website metadata and content below and extract structured branding information.

Website URL: {url}

Title: {title}
Meta description: {meta_description}
OG image URL: {og_image}
Favicon URL: {favicon}
Theme color: {theme_color}

Body text excerpt:
{body_text}

Respond with a JSON object of this exact shape:
{{
  "businessName": "Name of the business or organisation (string or null)",
  "description": "Concise 1-2 sentence description of what the business does (string or null)",
  "suggestedEventDescription": "Short, professional description for a booking page hosted by this business, e.g. 'Book a consultation with <business>' (string or null)",
  "primaryColor": "Primary brand colour as a hex code, e.g. #1a73e8 (string or null)",
  "secondaryColor": "Secondary/accent brand colour as a hex code (string or null)",
  "logoUrl": "Best logo URL from the candidates (OG image: {og_image}, Favicon: {favicon}). Prefer the OG image, otherwise the favicon. Full absolute URL or null."
}}

Rules:
- Colours must be 6-digit hex codes prefixed with #.
- If you cannot confidently determine a value, use null.
- If a theme color is given, use it as the primary colour unless the page content suggests a better one.
- Do NOT invent URLs. Only use the OG image or favicon URLs listed above."""


class WebsiteScanner:
    """Scans a website and extracts business details and branding."""

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        ai_service: OpenAIService | None = None,
    ) -> None:
        """
        Args:
            http_client: Client for the page fetch. A short-lived client is
                created per scan when omitted.
            ai_service: Text generation service. Defaults to the shared
                OpenAIService.
        """
        self._http_client = http_client
        self._ai_service = ai_service

    @property
    def ai_service(self) -> OpenAIService:
        """Text generation service, the shared OpenAIService unless one was injected."""
        if self._ai_service is None:
            self._ai_service = get_openai_service()
        return self._ai_service

    async def scan(self, url: str) -> ScanResult:
        """
        Scan a website for business name, description and branding.

        Args:
            url: User-supplied website address (scheme optional)

        Returns:
            ScanResult; ``warning`` is set when the scan degraded
        """
        try:
            target_url = normalize_url(url)
        except InvalidUrlError as e:
            logger.info(f"Rejected URL {sanitize_for_log(url or '')!r}: {e}")
            return ScanResult.empty(INVALID_URL_WARNING)

        try:
            async with PageFetcher(self._http_client) as fetcher:
                page = await fetcher.fetch(target_url)
        except UnreachableHostError as e:
            logger.info(f"Website unreachable: {e.reason}")
            return ScanResult.empty(UNREACHABLE_WARNING)

        metadata = extract_metadata(page.text, page.url)
        logger.debug(
            f"Extracted metadata from {sanitize_for_log(page.url)}: "
            f"title={metadata.title!r} logo={metadata.logo_url!r}"
        )

        try:
            analysis = await self._analyze(page.url, metadata)
        except EnrichmentFailedError as e:
            logger.error(f"Website scan AI analysis error: {e}")
            return self._fallback_result(metadata)
        except Exception as e:
            logger.exception(f"Unexpected error during AI analysis: {e}")
            return self._fallback_result(metadata)

        return self._assemble_result(analysis, metadata)

    async def _analyze(self, url: str, metadata: RawMetadata) -> dict[str, Any]:
        """Send the metadata to the LLM and return its parsed JSON answer."""
        prompt = self._build_prompt(url, metadata)
        return await self.ai_service.generate_json(prompt)

    def _build_prompt(self, url: str, metadata: RawMetadata) -> str:
        """Build the branding prompt.

        URLs are embedded exactly as resolved so the model can pass them
        through as the logo URL. Page-supplied text is sanitized.
        """
        return BRANDING_PROMPT.format(
            url=url,
            title=self._sanitize_prompt_input(metadata.title, 300) or "(none)",
            meta_description=(
                self._sanitize_prompt_input(metadata.meta_description, 1000) or "(none)"
            ),
            og_image=metadata.og_image or "none",
            favicon=metadata.favicon or "none",
            theme_color=self._sanitize_prompt_input(metadata.theme_color, 50) or "(none)",
            body_text=self._sanitize_prompt_input(metadata.body_text, SCANNER_BODY_TEXT_LIMIT),
        )

    def _sanitize_prompt_input(self, text: str | None, max_length: int) -> str:
        """Truncate page text and redact common prompt injection patterns."""
        if not text:
            return ""

        text = text[:max_length]
        for pattern in PROMPT_INJECTION_PATTERNS:
            text = re.sub(pattern, "[REDACTED]", text, flags=re.IGNORECASE)
        return text

    def _assemble_result(self, analysis: dict[str, Any], metadata: RawMetadata) -> ScanResult:
        """Merge the LLM answer with raw metadata; LLM values win."""
        return ScanResult(
            business_name=_string_field(analysis, "businessName"),
            description=_string_field(analysis, "description"),
            suggested_event_description=_string_field(analysis, "suggestedEventDescription"),
            branding=Branding(
                logo_url=_string_field(analysis, "logoUrl") or metadata.logo_url,
                primary_color=_string_field(analysis, "primaryColor") or metadata.theme_color,
                secondary_color=_string_field(analysis, "secondaryColor"),
            ),
        )

    def _fallback_result(self, metadata: RawMetadata) -> ScanResult:
        """Result built from raw metadata only, used when the LLM step fails."""
        return ScanResult(
            business_name=metadata.title,
            description=metadata.meta_description,
            suggested_event_description=None,
            branding=Branding(
                logo_url=metadata.logo_url,
                primary_color=metadata.theme_color,
                secondary_color=None,
            ),
            warning=AI_FAILED_WARNING,
        )


def _string_field(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if isinstance(value, str) and value.strip():
        return value
    return None


async def scan_website(url: str) -> ScanResult:
    """
    Convenience function to scan a website with the default collaborators.

    Args:
        url: User-supplied website address

    Returns:
        ScanResult for the website
    """
    return await WebsiteScanner().scan(url)
