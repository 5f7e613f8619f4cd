"""
HTML Text Extraction Module.
Parses an article body once and exposes everything the SEO checks need:
plain text, the h2/h3 structure, the first image's alt text and the anchors.
"""

import html
import logging
import re
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup

from .schemas import HeadingInfo

logger = logging.getLogger(__name__)

TAG_RE = re.compile(r'<[^>]*>')

# Page chrome removed before reading a fetched page
BOILERPLATE_TAGS = ["script", "style", "noscript", "template", "nav", "footer", "aside", "form", "iframe", "svg"]


@dataclass(frozen=True)
class ParsedDocument:
    """One parse of an HTML fragment, shared by every consumer."""
    text: str
    headings: Tuple[HeadingInfo, ...] = ()
    first_image_alt: Optional[str] = None
    hrefs: Tuple[str, ...] = ()

    @property
    def word_count(self) -> int:
        return len(self.text.split())

    @property
    def has_image_alt(self) -> bool:
        return bool(self.first_image_alt and self.first_image_alt.strip())

    def count_headings(self, level: int) -> int:
        return sum(1 for h in self.headings if h.level == level)


def strip_tags(content: str) -> str:
    """Regex fallback: drop every tag and decode entities.

    Adjacent text nodes are concatenated without a separator, exactly like
    the parser path, so word counts agree between the two.
    """
    return html.unescape(TAG_RE.sub('', content))


def parse_html(content: str) -> ParsedDocument:
    """Parse an HTML fragment. Never raises; falls back to tag stripping."""
    if not content:
        return ParsedDocument(text="")

    try:
        soup = BeautifulSoup(content, "html.parser")
    except Exception as e:
        logger.warning(f"HTML parser failed, falling back to tag stripping: {e}")
        return ParsedDocument(text=strip_tags(content))

    headings = tuple(
        HeadingInfo(level=int(tag.name[1]), text=tag.get_text().strip())
        for tag in soup.find_all(["h2", "h3"])
    )

    first_image = soup.find("img")
    first_image_alt = first_image.get("alt") if first_image else None

    hrefs = tuple(a["href"] for a in soup.find_all("a", href=True))

    return ParsedDocument(
        text=soup.get_text(),
        headings=headings,
        first_image_alt=first_image_alt,
        hrefs=hrefs,
    )


def _hostname(url: str) -> Optional[str]:
    try:
        return urlsplit(url).hostname
    except ValueError:
        return None


def classify_links(hrefs: Sequence[str], source_url: str) -> Tuple[int, int]:
    """
    Count internal vs. external links relative to the source URL.

    Each href is resolved against ``source_url``; an exact hostname match is
    internal, anything else external. Hrefs that do not resolve to a URL with
    a hostname (mailto:, javascript:, malformed) are skipped.

    Returns:
        (internal_count, external_count); (0, 0) when the source URL has no hostname.
    """
    source_host = _hostname(source_url or "")
    if not source_host:
        return 0, 0

    internal = external = 0
    for href in hrefs:
        try:
            resolved = urljoin(source_url, href.strip())
        except ValueError:
            continue
        host = _hostname(resolved)
        if not host:
            continue
        if host == source_host:
            internal += 1
        else:
            external += 1
    return internal, external


def readable_text(page_html: str) -> str:
    """Extract the readable text of a full web page, one block per line."""
    soup = BeautifulSoup(page_html, "html.parser")
    for tag in soup(BOILERPLATE_TAGS):
        tag.decompose()

    root = soup.find("article") or soup.find("main") or soup.body or soup
    lines = (line.strip() for line in root.get_text("\n").splitlines())
    return "\n".join(line for line in lines if line)
