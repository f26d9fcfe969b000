"""
Article link discovery on the listing page

Turns the links of a rendered listing page into the ordered, duplicate-free
list of candidate article URLs.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)


_DEFAULT_PORTS = {'http': 80, 'https': 443}


def page_origin(page_url: str) -> str:
    """
    Scheme, host and non-default port of a URL, as a browser reports
    location.origin (credentials and default ports are left out)
    """
    parts = urlsplit(page_url)
    if not parts.scheme or not parts.hostname:
        return ""
    host = parts.hostname
    if ':' in host:
        host = f"[{host}]"
    try:
        port = parts.port
    except ValueError:
        port = None
    if port is not None and port != _DEFAULT_PORTS.get(parts.scheme):
        host = f"{host}:{port}"
    return f"{parts.scheme}://{host}"


@dataclass(frozen=True)
class LinkFilterConfig:
    """Filters applied to the raw links of one listing page"""
    selector: str = "a[href]"
    exclude_prefixes: Tuple[str, ...] = ()
    only_internal: bool = True
    filter_substring: Optional[str] = None
    origin: str = ""
    current_path: str = "/"

    @classmethod
    def from_page(
        cls,
        page_url: str,
        selector: str = "a[href]",
        exclude_prefixes: Iterable[str] = (),
        only_internal: bool = True,
        filter_substring: Optional[str] = None,
    ) -> "LinkFilterConfig":
        """
        Build a filter for the page currently shown at page_url

        Args:
            page_url: URL of the listing page, as reported by the browser
            selector: CSS selector for candidate link elements
            exclude_prefixes: Links starting with any of these are rejected
            only_internal: Keep only links on the page's origin
            filter_substring: Keep only links containing this text

        Returns:
            LinkFilterConfig with origin and current path filled in
        """
        parts = urlsplit(page_url)
        origin = page_origin(page_url)
        return cls(
            selector=selector,
            exclude_prefixes=tuple(exclude_prefixes),
            only_internal=only_internal,
            filter_substring=filter_substring or None,
            origin=origin,
            current_path=parts.path or "/",
        )


def extract_hrefs(html: str, selector: str, page_url: str) -> List[str]:
    """
    Extract absolute link targets from rendered HTML

    Each matching element's href is resolved the way a browser resolves
    ``a.href``: against ``<base href>`` if present, else the page URL.

    Args:
        html: Rendered page HTML
        selector: CSS selector for link elements
        page_url: URL the HTML was rendered from

    Returns:
        Absolute URLs in document order (duplicates kept)
    """
    soup = BeautifulSoup(html, 'html.parser')

    base_url = page_url
    base = soup.find('base', href=True)
    if base:
        base_url = urljoin(page_url, base['href'].strip())

    hrefs = []
    for element in soup.select(selector):
        href = element.get('href')
        if href is None:
            continue
        href = href.strip()
        try:
            hrefs.append(urljoin(base_url, href) if href else "")
        except ValueError:
            logger.debug(f"Unresolvable href skipped: {href[:80]}")

    return hrefs


def _is_parseable(link) -> bool:
    if not isinstance(link, str) or not link.strip():
        return False
    try:
        urlsplit(link)
    except ValueError:
        return False
    return True


def _is_self_link(link: str, current_path: str) -> bool:
    # A root listing page would match every link by containment
    if current_path in ("", "/"):
        return urlsplit(link).path in ("", "/")
    return current_path in link


def collect(raw_links: Sequence[str], config: LinkFilterConfig) -> List[str]:
    """
    Filter raw page links down to candidate article URLs

    Order is the first occurrence of each link in raw_links; the filters
    after deduplication only remove entries. An empty result means no
    candidates were found and is not an error.

    Args:
        raw_links: Link targets in document order
        config: Filters for this listing page

    Returns:
        Candidate URLs, duplicate-free
    """
    seen = set()
    links = []
    for link in raw_links:
        if not _is_parseable(link):
            continue
        if any(link.startswith(prefix) for prefix in config.exclude_prefixes):
            continue
        if link in seen:
            continue
        seen.add(link)
        links.append(link)

    if config.only_internal:
        links = [link for link in links if link.startswith(config.origin)]

    if config.filter_substring:
        links = [link for link in links if config.filter_substring in link]

    links = [link for link in links if not _is_self_link(link, config.current_path)]

    logger.debug(f"Collected {len(links)} of {len(raw_links)} raw links")
    return links
