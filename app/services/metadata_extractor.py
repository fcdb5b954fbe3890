"""Best-effort extraction of branding metadata from an HTML page."""

import re
from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag

from app.core.config import SCANNER_BODY_TEXT_LIMIT
from app.services.url_utils import resolve_url

# Tags whose text never reaches the visible page
NON_CONTENT_TAGS = ["script", "style", "noscript", "template", "svg"]


@dataclass
class RawMetadata:
    """Metadata pulled straight from the page markup.

    URL fields are already absolute.
    """

    title: str | None = None
    meta_description: str | None = None
    og_image: str | None = None
    favicon: str | None = None
    theme_color: str | None = None
    body_text: str = ""

    @property
    def logo_url(self) -> str | None:
        """Best logo candidate: the og:image, otherwise the favicon."""
        return self.og_image or self.favicon


def extract_metadata(html: str, base_url: str) -> RawMetadata:
    """
    Extract title, description, og:image, favicon and theme-color from HTML.

    Missing or malformed tags leave the matching field as None.

    Args:
        html: Raw HTML document
        base_url: URL the document was fetched from, used to resolve links

    Returns:
        RawMetadata with relative URLs resolved against base_url
    """
    soup = BeautifulSoup(html or "", "lxml")

    return RawMetadata(
        title=_extract_title(soup),
        meta_description=_meta_content(soup, "name", "description"),
        og_image=resolve_url(
            base_url,
            _meta_content(soup, "property", "og:image") or _meta_content(soup, "name", "og:image"),
        ),
        favicon=resolve_url(base_url, _favicon_href(soup)),
        theme_color=_meta_content(soup, "name", "theme-color"),
        body_text=_extract_body_text(soup),
    )


def _clean(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    value = re.sub(r"\s+", " ", value).strip()
    return value or None


def _extract_title(soup: BeautifulSoup) -> str | None:
    title = soup.find("title")
    if not isinstance(title, Tag):
        return None
    return _clean(title.get_text(separator=" "))


def _meta_content(soup: BeautifulSoup, attr: str, value: str) -> str | None:
    """Content of the first <meta> whose ``attr`` equals ``value`` (any case)."""
    pattern = re.compile(rf"^\s*{re.escape(value)}\s*$", re.I)
    for meta in soup.find_all("meta", attrs={attr: pattern}):
        content = _clean(meta.get("content"))
        if content:
            return content
    return None


def _is_icon_link(tag: Tag) -> bool:
    if tag.name != "link":
        return False
    rel = tag.get("rel") or []
    if isinstance(rel, str):
        rel = rel.split()
    return "icon" in (r.lower() for r in rel)


def _favicon_href(soup: BeautifulSoup) -> str | None:
    for link in soup.find_all(_is_icon_link):
        href = _clean(link.get("href"))
        if href:
            return href
    return None


def _extract_body_text(soup: BeautifulSoup) -> str:
    """Visible text, whitespace-collapsed and capped for the prompt."""
    for tag in soup(NON_CONTENT_TAGS):
        tag.decompose()

    root = soup.body or soup
    text = root.get_text(separator=" ", strip=True)
    text = re.sub(r"\s+", " ", text).strip()
    return text[:SCANNER_BODY_TEXT_LIMIT]
