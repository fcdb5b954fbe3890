"""Exceptions raised between the stages of the website scan pipeline.

None of these cross the public ``scan_website`` boundary: the scanner turns
each one into a ``ScanResult`` carrying a warning.
"""


class WebsiteScanError(Exception):
    """Base class for website scan failures."""


class InvalidUrlError(WebsiteScanError):
    """The URL is empty, malformed, or uses a scheme other than http(s)."""


class UnreachableHostError(WebsiteScanError):
    """The page could not be fetched or answered with a non-2xx status."""

    def __init__(self, url: str, reason: str, status_code: int | None = None) -> None:
        super().__init__(f"Could not fetch {url}: {reason}")
        self.url = url
        self.reason = reason
        self.status_code = status_code


class EnrichmentFailedError(WebsiteScanError):
    """The AI branding analysis failed or returned unusable output."""
