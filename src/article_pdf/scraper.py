"""
Article scraper: login, link discovery and PDF export in one run
"""

import logging
from typing import Callable, List

from .config import PREVIEW_LINKS, ScraperConfig
from .core.errors import SetupError
from .core.links import LinkFilterConfig, collect, extract_hrefs
from .core.pipeline import ExportPipeline, RunSummary
from .core.report import ErrorLog
from .core.session import SessionStore
from .core.utils import ensure_dir
from .services.browser import BrowserSession

logger = logging.getLogger(__name__)


class ArticleScraper:
    """
    Runs the whole export for one configuration

    The browser is opened on the listing page, the user confirms that the
    session is authenticated, the cookies are saved, and the links found on
    the page are exported one by one.
    """

    def __init__(
        self,
        config: ScraperConfig,
        confirm: Callable[[], None],
        browser_factory: Callable[[ScraperConfig], BrowserSession] = BrowserSession,
    ):
        """
        Initialize scraper

        Args:
            config: Scraper configuration
            confirm: Blocks until the user confirms the login step
            browser_factory: Creates the browser session (context manager)
        """
        if not config.start_url:
            raise SetupError("No start URL configured")

        self.config = config
        self.confirm = confirm
        self.browser_factory = browser_factory
        self.session_store = SessionStore(config.session_file)
        self.error_log = ErrorLog(config.output_folder)

    def run(self) -> RunSummary:
        """
        Login, discover links and export them

        Returns:
            Summary of the export (empty when no links were found)
        """
        ensure_dir(self.config.output_folder)

        with self.browser_factory(self.config) as browser:
            links = self._discover(browser)
            if not links:
                return RunSummary()

            pipeline = ExportPipeline(
                output_folder=self.config.output_folder,
                pdf_options=self.config.pdf_options.to_playwright(),
                delay=self.config.delay,
                settle_delay=self.config.settle_delay,
            )
            summary = pipeline.run(
                links,
                exporter=browser,
                start_from=self.config.start_from,
                max_articles=self.config.max_articles,
            )

        self._report(summary)
        return summary

    def discover(self) -> List[str]:
        """Login and return the candidate links without exporting"""
        ensure_dir(self.config.output_folder)
        with self.browser_factory(self.config) as browser:
            return self._discover(browser)

    def _discover(self, browser) -> List[str]:
        cookies = self.session_store.load()
        if cookies:
            browser.add_cookies(cookies)
            logger.info("✓ Loaded saved session")
        else:
            logger.info("No saved session found - manual login may be required")

        browser.open(self.config.start_url)

        logger.info("=" * 60)
        logger.info("AUTHENTICATION (if required):")
        logger.info("  1. Log into your account in the opened browser")
        logger.info("  2. Ensure you can see protected content")
        logger.info("  3. Press Enter in the console to continue...")
        logger.info("=" * 60)
        self.confirm()

        self.session_store.save(browser.cookies())

        logger.info("Collecting article links...")
        html, page_url = browser.snapshot()
        filter_config = LinkFilterConfig.from_page(
            page_url,
            selector=self.config.link_selector,
            exclude_prefixes=self.config.exclude_patterns,
            only_internal=self.config.only_internal_links,
            filter_substring=self.config.filter_pattern,
        )
        links = collect(extract_hrefs(html, filter_config.selector, page_url), filter_config)
        logger.info(f"✓ Found {len(links)} unique links")

        if not links:
            self._log_no_links()
            return links

        logger.info("First found links:")
        for i, link in enumerate(links[:PREVIEW_LINKS], 1):
            logger.info(f"  {i}. {link}")
        if len(links) > PREVIEW_LINKS:
            logger.info(f"  ...and {len(links) - PREVIEW_LINKS} more")

        return links

    def _log_no_links(self) -> None:
        logger.warning("No links found!")
        logger.warning("Try adjusting:")
        logger.warning(f"  - CSS selector (currently: {self.config.link_selector})")
        logger.warning(f"  - Filter pattern (currently: {self.config.filter_pattern})")
        logger.warning("  - Ensure you are logged in")

    def _report(self, summary: RunSummary) -> None:
        logger.info("=" * 60)
        logger.info("SUMMARY:")
        logger.info(f"  Successful: {summary.success_count} "
                    f"(downloaded {summary.downloaded_count}, skipped {summary.skipped_count})")
        logger.info(f"  Errors: {summary.error_count}")
        logger.info(f"  Folder: {self.config.output_folder.resolve()}")
        logger.info("=" * 60)

        if summary.failures:
            logger.error("ERRORS:")
            for outcome in summary.failures:
                logger.error(f"  [{outcome.job.number}] {outcome.job.url}")
                logger.error(f"       -> {outcome.error}")

        self.error_log.save(summary)
