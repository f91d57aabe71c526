"""
Playwright page driver.

Navigates to a job posting, brings the description into the DOM (scrolling,
expanding collapsed sections) and captures immutable snapshots of the
resulting document for the extraction orchestrator.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, Optional

import structlog
from playwright.async_api import Browser, Page, Playwright, async_playwright
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ..config.config import DriverSettings
from ..extractor.catalog import DESCRIPTION_WAIT_SELECTORS
from ..extractor.models import ExtractionError
from ..snapshot import HtmlSnapshot
from .links import normalize_job_link

logger = structlog.get_logger(__name__)

# Returns the first button, link or span that looks like a "show more" control.
_FIND_EXPANDER_JS = """
([labels, ariaFragment]) => {
    const candidates = Array.from(document.querySelectorAll("button, a, span"));
    for (const el of candidates) {
        const text = (el.textContent || el.innerText || "").toLowerCase();
        if (labels.some((label) => text.includes(label))) {
            return el;
        }
        const aria = el.getAttribute("aria-label");
        if (aria && aria.toLowerCase().includes(ariaFragment)) {
            return el;
        }
    }
    return null;
}
"""

_SCROLL_INTO_VIEW_JS = """
(selector) => {
    const el = document.querySelector(selector);
    if (el) {
        el.scrollIntoView({behavior: "smooth", block: "center"});
    }
}
"""


class PlaywrightPageDriver:
    """Drives one browser page for one posting and captures snapshots of it."""

    def __init__(
        self,
        page: Page,
        url: str,
        settings: Optional[DriverSettings] = None,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.page = page
        self.settings = settings or DriverSettings()
        self.url = normalize_job_link(url, self.settings.job_view_url)
        self._sleep = sleep
        self.logger = logger.bind(component="PlaywrightPageDriver", url=self.url)

    async def open(self) -> None:
        """
        Navigate and prepare the page so the description is in the DOM.

        Raises:
            ExtractionError: if navigation fails for a reason other than a timeout
        """
        s = self.settings
        try:
            await self.page.goto(self.url, wait_until=s.wait_until, timeout=s.navigation_timeout * 1000)
        except PlaywrightTimeoutError:
            self.logger.warning("Navigation timed out, using partially loaded page", timeout=s.navigation_timeout)
        except Exception as e:
            raise ExtractionError(f"Navigation failed: {e}", url=self.url) from e

        await self._sleep(s.initial_settle)
        await self._scroll()
        await self._expand()
        await self._wait_for_description()
        await self._sleep(s.content_settle)
        await self._scroll_description_into_view()

    async def capture(self) -> HtmlSnapshot:
        """Serialize the current document into a snapshot."""
        html = await self.page.content()
        return HtmlSnapshot(html, url=self.url)

    async def _scroll(self) -> None:
        for script in (
            "window.scrollTo(0, document.body.scrollHeight / 2)",
            "window.scrollTo(0, document.body.scrollHeight)",
        ):
            try:
                await self.page.evaluate(script)
            except Exception as e:
                self.logger.debug("Scroll failed", error=str(e))
            await self._sleep(self.settings.scroll_settle)

    async def _expand(self) -> None:
        s = self.settings
        labels = [label.lower() for label in s.expander_labels]
        try:
            handle = await self.page.evaluate_handle(_FIND_EXPANDER_JS, [labels, s.expander_aria_fragment.lower()])
            element = handle.as_element()
            if element is None:
                self.logger.debug("No expander found")
                return
            await element.click()
        except Exception as e:
            self.logger.debug("Could not expand description", error=str(e))
            return
        self.logger.debug("Expander clicked")
        await self._sleep(s.expand_settle)

    async def _wait_for_description(self) -> None:
        try:
            await self.page.wait_for_selector(
                ", ".join(DESCRIPTION_WAIT_SELECTORS),
                timeout=self.settings.selector_wait_timeout * 1000,
            )
        except PlaywrightTimeoutError:
            self.logger.debug("No known description container appeared", timeout=self.settings.selector_wait_timeout)
        except Exception as e:
            self.logger.debug("Waiting for description failed", error=str(e))

    async def _scroll_description_into_view(self) -> None:
        try:
            await self.page.evaluate(_SCROLL_INTO_VIEW_JS, ", ".join(DESCRIPTION_WAIT_SELECTORS[:3]))
        except Exception as e:
            self.logger.debug("Scroll into view failed", error=str(e))
            return
        await self._sleep(self.settings.scroll_into_view_settle)


class BrowserSession:
    """
    Owns the Playwright browser for a batch; hands out one fresh page per posting.

    Usage::

        async with BrowserSession(settings) as session:
            async with session.posting(url) as driver:
                result = await orchestrator.extract(driver, url=driver.url)
    """

    def __init__(self, settings: Optional[DriverSettings] = None) -> None:
        self.settings = settings or DriverSettings()
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None

    async def __aenter__(self) -> BrowserSession:
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=self.settings.headless,
                args=["--no-sandbox", "--disable-setuid-sandbox"],
            )
        except Exception as e:
            logger.error("Browser launch failed", error=str(e))
            await self._playwright.stop()
            self._playwright = None
            raise
        logger.info("Browser started", headless=self.settings.headless)
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
        logger.info("Browser closed")

    @asynccontextmanager
    async def posting(self, url: str) -> AsyncIterator[PlaywrightPageDriver]:
        """Open ``url`` in a new browser context and yield a prepared driver."""
        if self._browser is None:
            raise RuntimeError("BrowserSession is not started")
        context = await self._browser.new_context(user_agent=self.settings.user_agent)
        try:
            page = await context.new_page()
            driver = PlaywrightPageDriver(page, url, self.settings)
            await driver.open()
            yield driver
        finally:
            await context.close()
