"""
Browser-based page rendering and PDF export

Uses Playwright (Chromium, the engine that supports page.pdf()) to load
pages with the saved session and print them.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from playwright.sync_api import Page, sync_playwright

from ..config import ScraperConfig
from ..core.session import normalize_cookies

logger = logging.getLogger(__name__)

LAUNCH_ARGS = [
    '--no-sandbox',
    '--disable-setuid-sandbox',
    '--disable-web-security',
    '--disable-features=IsolateOrigins,site-per-process',
]


class BrowserSession:
    """A single browser page shared by login, discovery and export"""

    def __init__(self, config: ScraperConfig):
        """
        Initialize browser session

        Args:
            config: Scraper configuration (headless, viewport, user agent, timeout)
        """
        self.config = config
        self.timeout = config.navigation_timeout * 1000  # Playwright uses milliseconds
        self._playwright = None
        self._browser = None
        self._context = None
        self._page: Optional[Page] = None

    def __enter__(self) -> "BrowserSession":
        try:
            self.start()
        except Exception:
            self.close()
            raise
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def start(self) -> None:
        """Launch the browser and open a page"""
        logger.info("Launching browser...")
        self._playwright = sync_playwright().start()
        self._browser = self._playwright.chromium.launch(
            headless=self.config.headless,
            args=LAUNCH_ARGS,
        )
        width, height = self.config.viewport
        self._context = self._browser.new_context(
            viewport={"width": width, "height": height},
            user_agent=self.config.user_agent,
        )
        self._page = self._context.new_page()

    def close(self) -> None:
        """Close the browser, ignoring a browser that already went away"""
        try:
            if self._browser:
                self._browser.close()
        finally:
            if self._playwright:
                self._playwright.stop()
            self._browser = None
            self._context = None
            self._page = None
            self._playwright = None

    @property
    def page(self) -> Page:
        if self._page is None:
            raise RuntimeError("Browser session is not started")
        return self._page

    def add_cookies(self, cookies: List[Dict[str, Any]]) -> None:
        """Restore a saved session into the browser context"""
        usable = normalize_cookies(cookies)
        if len(usable) < len(cookies):
            logger.debug(f"Dropped {len(cookies) - len(usable)} unusable cookie records")
        if usable:
            self._context.add_cookies(usable)

    def cookies(self) -> List[Dict[str, Any]]:
        """Current cookies of the browser context"""
        return self._context.cookies()

    def open(self, url: str) -> Page:
        """Open the listing page"""
        logger.info(f"Opening: {url}")
        return self.navigate(url)

    def snapshot(self) -> Tuple[str, str]:
        """
        Capture the rendered page

        Returns:
            Tuple of (html, url) of the current page
        """
        return self.page.content(), self.page.url

    def navigate(self, url: str) -> Page:
        """Load url and wait until the network is idle"""
        self.page.goto(url, wait_until="networkidle", timeout=self.timeout)
        return self.page

    def export_pdf(self, page: Page, path: Path, options: Dict[str, Any]) -> int:
        """
        Print page to a PDF file

        Returns:
            Size of the written file in bytes
        """
        page.pdf(path=str(path), **options)
        return path.stat().st_size

    def screenshot(self, page: Optional[Page], path: Path) -> None:
        """Save a screenshot of page, or of the current page if none is given"""
        (page or self.page).screenshot(path=str(path))
