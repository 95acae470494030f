"""High-level orchestration for rendering result pages and collecting records."""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List, Optional, Protocol

from playwright.async_api import (
    Browser,
    Error as PlaywrightError,
    Playwright,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright,
)

from .config import CrawlConfig, build_search_url
from .content import ARTICLE_CONTAINER_SELECTOR, extract_records
from .models import CrawlOutcome, CrawlResult, Record

logger = logging.getLogger("yle_feed")


class FetchError(Exception):
    """Raised when a page cannot be rendered within the timeout."""


class PageFetcher(Protocol):
    """Anything able to return rendered markup once ``selector`` is visible."""

    async def fetch(self, url: str, selector: str, timeout: float) -> str:
        ...


class PlaywrightFetcher:
    """Render pages in a fresh headless Chromium instance per call."""

    def __init__(self, playwright: Playwright, headless: bool = True) -> None:
        self._playwright = playwright
        self.headless = headless

    @staticmethod
    async def _launched_browser(launch: asyncio.Future) -> Optional[Browser]:
        """Let an interrupted launch finish so its browser can still be closed."""
        try:
            return await launch
        except PlaywrightError:
            return None

    async def _render(self, url: str, selector: str, timeout: float) -> str:
        launch = asyncio.ensure_future(
            self._playwright.chromium.launch(headless=self.headless)
        )
        browser: Optional[Browser] = None
        try:
            # Shielded so a deadline hit mid-launch leaves a handle to close.
            browser = await asyncio.shield(launch)
            page = await browser.new_page()
            page.set_default_timeout(timeout * 1000)
            page.set_default_navigation_timeout(timeout * 1000)
            await page.goto(url)
            await page.wait_for_selector(selector, state="visible")
            return await page.content()
        finally:
            if browser is None:
                browser = await self._launched_browser(launch)
            if browser is not None:
                await browser.close()

    async def fetch(self, url: str, selector: str, timeout: float) -> str:
        try:
            return await asyncio.wait_for(
                self._render(url, selector, timeout), timeout=timeout
            )
        except (asyncio.TimeoutError, PlaywrightTimeoutError) as exc:
            raise FetchError(f"timed out after {timeout:g}s loading {url}") from exc
        except PlaywrightError as exc:
            raise FetchError(f"navigation failed for {url}: {exc}") from exc


def sort_records(records: Iterable[Record]) -> List[Record]:
    """Order records newest first; undated records keep their order at the end."""
    return sorted(records, key=lambda record: record.published_at, reverse=True)


async def run_crawler(
    config: CrawlConfig,
    fetcher: PageFetcher,
    stop_event: Optional[asyncio.Event] = None,
) -> CrawlResult:
    """Fetch result pages 1, 2, 3, ... until the site runs out of articles.

    A fetch failure is how the site signals the end of pagination: pages past
    the last one never render the results container.
    """
    collected: List[Record] = []
    page = 1
    pages_fetched = 0
    while True:
        if stop_event is not None and stop_event.is_set():
            logger.info("Crawl cancelled before page %d", page)
            outcome = CrawlOutcome.CANCELLED
            break

        target_url = build_search_url(config, page)
        logger.info("Scraping page %d: %s", page, target_url)
        try:
            html = await fetcher.fetch(
                target_url, ARTICLE_CONTAINER_SELECTOR, config.navigation_timeout
            )
        except FetchError as exc:
            logger.info("Page %d scrape ended (likely no more results): %s", page, exc)
            outcome = CrawlOutcome.PAGE_FETCH_FAILED
            break
        pages_fetched += 1

        page_records = extract_records(html)
        if not page_records:
            if page == 1:
                logger.warning("No articles found on first page.")
                outcome = CrawlOutcome.NO_ARTICLES_FIRST_PAGE
            else:
                logger.info(
                    "Finished scraping. Page %d returned no valid articles.", page
                )
                outcome = CrawlOutcome.EXHAUSTED
            break

        logger.info("Found %d articles on page %d.", len(page_records), page)
        collected.extend(page_records)
        page += 1
        if config.page_delay:
            await asyncio.sleep(config.page_delay)

    records = sort_records(collected)
    if records:
        logger.info("Results sorted by date (newest to oldest).")
        logger.info("Total articles: %d", len(records))
    else:
        logger.info("No articles found.")

    return CrawlResult(
        records=records,
        outcome=outcome,
        pages_fetched=pages_fetched,
        last_page=page,
    )


async def crawl(
    config: CrawlConfig, stop_event: Optional[asyncio.Event] = None
) -> CrawlResult:
    """Run the pagination loop against the live site with Playwright."""
    async with async_playwright() as playwright:
        fetcher = PlaywrightFetcher(playwright, headless=config.headless)
        return await run_crawler(config, fetcher, stop_event=stop_event)
