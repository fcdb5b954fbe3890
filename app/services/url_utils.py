"""URL helpers for the website scanner.

Validation here is the security boundary for user-supplied URLs: it runs
before any network I/O and only lets http(s) URLs through.
"""

import re
from urllib.parse import urljoin, urlparse

import httpx

from app.exceptions import InvalidUrlError

ALLOWED_SCHEMES = {"http", "https"}

# Schemes rejected outright, even where the remainder could pass for a port
BLOCKED_SCHEMES = {"javascript", "data", "file", "vbscript", "blob", "about", "filesystem"}

_SCHEME_RE = re.compile(r"^([a-zA-Z][a-zA-Z0-9+.\-]*):(.*)$", re.DOTALL)

# "example.com:8080/path" parses like a scheme but is really host:port
_PORT_RE = re.compile(r"^\d+(?:[/?#]|$)")


def normalize_url(raw: str) -> str:
    """
    Validate a user-supplied website address and return an absolute URL.

    Adds ``https://`` when no scheme is present and rejects anything that is
    not http(s) with a host.

    Args:
        raw: URL as typed by the user (e.g. "acme.com", "http://acme.com")

    Returns:
        Normalized absolute URL

    Raises:
        InvalidUrlError: If the URL is empty, malformed, or uses another scheme
    """
    url = (raw or "").strip()
    if not url:
        raise InvalidUrlError("URL is empty")
    if any(c.isspace() or not c.isprintable() for c in url):
        raise InvalidUrlError("URL contains whitespace or control characters")

    match = _SCHEME_RE.match(url)
    if match:
        scheme = match.group(1).lower()
        if scheme in BLOCKED_SCHEMES:
            raise InvalidUrlError(f"Scheme '{scheme}' is not allowed")
        if scheme not in ALLOWED_SCHEMES:
            if not _PORT_RE.match(match.group(2)):
                raise InvalidUrlError(f"Scheme '{scheme}' is not allowed")
            url = f"https://{url}"
    elif url.startswith("//"):
        # Protocol-relative, e.g. "//example.com"
        url = f"https:{url}"
    else:
        url = f"https://{url}"

    try:
        parsed = urlparse(url)
        # Accessing .port validates it
        parsed.port
    except ValueError as e:
        raise InvalidUrlError(f"Malformed URL: {e}") from e

    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        raise InvalidUrlError(f"Scheme '{parsed.scheme}' is not allowed")
    if not parsed.hostname:
        raise InvalidUrlError("URL has no host")

    try:
        # Decoding the host runs the same IDNA checks httpx applies on request
        httpx.URL(url).host
    except (httpx.InvalidURL, UnicodeError, ValueError) as e:
        raise InvalidUrlError(f"Invalid host: {e}") from e

    return parsed.geturl()


def resolve_url(base_url: str, value: str | None) -> str | None:
    """Resolve a possibly-relative reference against a page URL.

    Returns None for empty values, unresolvable references, and results that
    are not http(s) (e.g. ``javascript:`` hrefs).
    """
    if not value or not value.strip():
        return None

    try:
        resolved = urljoin(base_url, value.strip())
    except ValueError:
        return None

    if urlparse(resolved).scheme.lower() not in ALLOWED_SCHEMES:
        return None
    return resolved


def sanitize_for_log(value: str, max_length: int = 100) -> str:
    """Sanitize a string for safe logging to prevent log injection."""
    sanitized = "".join(c if c.isprintable() and c not in "\n\r\t" else " " for c in value)
    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length] + "..."
    return sanitized
