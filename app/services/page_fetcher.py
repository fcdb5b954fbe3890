"""Page fetcher for the website scanner.

Performs the single outbound GET of a scan. Transport errors and non-2xx
responses are both reported as ``UnreachableHostError``.
"""

import asyncio
import logging
from dataclasses import dataclass

import httpx

from app.core import config
from app.core.config import SCANNER_REQUEST_TIMEOUT, SCANNER_USER_AGENT
from app.exceptions import UnreachableHostError
from app.services.url_utils import sanitize_for_log

logger = logging.getLogger(__name__)

REQUEST_HEADERS = {
    "User-Agent": SCANNER_USER_AGENT,
    "Accept": "text/html,application/xhtml+xml",
}


@dataclass
class FetchedPage:
    """HTML page returned by a successful fetch."""

    url: str
    status_code: int
    text: str


class PageFetcher:
    """Fetches a single web page over HTTP(S).

    Use as an async context manager. A client passed in is used as-is and
    left open on exit; otherwise a client is created and closed here.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = SCANNER_REQUEST_TIMEOUT,
        deadline: float | None = None,
        max_body_bytes: int | None = None,
    ) -> None:
        """
        Args:
            client: Client to use; one is created on enter when omitted
            timeout: Per-operation httpx timeout (connect, read, write)
            deadline: Seconds allowed for the whole fetch
            max_body_bytes: Bytes of body kept before the rest is dropped
        """
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout
        self._deadline = deadline or config.SCANNER_FETCH_DEADLINE
        self._max_body_bytes = max_body_bytes or config.SCANNER_MAX_BODY_BYTES

    async def __aenter__(self) -> "PageFetcher":
        """Enter async context and create HTTP client if needed."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                headers=REQUEST_HEADERS,
            )
        return self

    async def __aexit__(self, *args: object) -> None:
        """Exit async context and close the HTTP client we created."""
        if self._owns_client and self._client:
            await self._client.aclose()
            self._client = None

    async def fetch(self, url: str) -> FetchedPage:
        """
        Fetch a page and return its body.

        The whole exchange, redirects and body download included, must finish
        within the fetch deadline. Bodies larger than the byte limit are
        truncated.

        Args:
            url: Absolute http(s) URL, already validated

        Returns:
            FetchedPage with the effective URL after redirects

        Raises:
            UnreachableHostError: On transport errors, timeouts, unparseable
                hosts, or non-2xx status
        """
        if not self._client:
            raise RuntimeError("Fetcher not initialized. Use 'async with' context manager.")

        try:
            return await asyncio.wait_for(self._download(url), timeout=self._deadline)
        except asyncio.TimeoutError as e:
            logger.warning(
                f"Fetching {sanitize_for_log(url)} exceeded {self._deadline}s deadline"
            )
            raise UnreachableHostError(url, f"No complete response within {self._deadline}s") from e
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeError, ValueError) as e:
            # idna raises UnicodeError subclasses for hosts it cannot encode
            logger.warning(f"HTTP error fetching {sanitize_for_log(url)}: {e!r}")
            raise UnreachableHostError(url, str(e) or type(e).__name__) from e

    async def _download(self, url: str) -> FetchedPage:
        async with self._client.stream(
            "GET",
            url,
            headers=REQUEST_HEADERS,
            timeout=self._timeout,
            follow_redirects=True,
        ) as response:
            if not response.is_success:
                logger.warning(
                    f"Fetching {sanitize_for_log(url)} returned HTTP {response.status_code}"
                )
                raise UnreachableHostError(
                    url, f"HTTP {response.status_code}", status_code=response.status_code
                )

            body = bytearray()
            async for chunk in response.aiter_bytes():
                body.extend(chunk)
                if len(body) >= self._max_body_bytes:
                    logger.info(
                        f"Body of {sanitize_for_log(url)} truncated at {self._max_body_bytes} bytes"
                    )
                    break

            content = bytes(body[: self._max_body_bytes])
            try:
                text = content.decode(response.charset_encoding or "utf-8", errors="replace")
            except LookupError:
                # Unknown charset in Content-Type
                text = content.decode("utf-8", errors="replace")

            return FetchedPage(
                url=str(response.url),
                status_code=response.status_code,
                text=text,
            )
