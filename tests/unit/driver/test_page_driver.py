"""Tests for the Playwright page driver with a mocked page."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from jobquarry.config.config import DriverSettings
from jobquarry.driver import page_driver
from jobquarry.driver.page_driver import BrowserSession, PlaywrightPageDriver
from jobquarry.extractor.models import ExtractionError
from jobquarry.snapshot import HtmlSnapshot


@pytest.fixture
def mock_page():
    page = AsyncMock()
    page.content.return_value = "<html><body><div class='show-more-less-html__markup'>Text</div></body></html>"
    handle = MagicMock()
    handle.as_element.return_value = None
    page.evaluate_handle.return_value = handle
    return page


@pytest.fixture
def driver_factory(mock_page, no_sleep):
    def _make(url="https://www.linkedin.com/jobs/search/?currentJobId=123", **settings):
        return PlaywrightPageDriver(mock_page, url, DriverSettings(**settings), sleep=no_sleep)

    return _make


@pytest.mark.unit
class TestPlaywrightPageDriver:
    def test_url_is_normalized(self, driver_factory):
        assert driver_factory().url == "https://www.linkedin.com/jobs/view/123"

    @pytest.mark.asyncio
    async def test_open_navigates_with_configured_wait(self, driver_factory, mock_page):
        await driver_factory(navigation_timeout=12, wait_until="load").open()
        mock_page.goto.assert_awaited_once_with(
            "https://www.linkedin.com/jobs/view/123", wait_until="load", timeout=12000
        )

    @pytest.mark.asyncio
    async def test_navigation_timeout_is_tolerated(self, driver_factory, mock_page):
        mock_page.goto.side_effect = PlaywrightTimeoutError("Timeout 30000ms exceeded")
        await driver_factory().open()
        mock_page.wait_for_selector.assert_awaited()

    @pytest.mark.asyncio
    async def test_navigation_failure_raises_extraction_error(self, driver_factory, mock_page):
        mock_page.goto.side_effect = RuntimeError("net::ERR_NAME_NOT_RESOLVED")
        with pytest.raises(ExtractionError) as exc_info:
            await driver_factory().open()
        assert exc_info.value.url == "https://www.linkedin.com/jobs/view/123"

    @pytest.mark.asyncio
    async def test_expander_is_clicked(self, driver_factory, mock_page, no_sleep):
        button = MagicMock()
        button.click = AsyncMock()
        mock_page.evaluate_handle.return_value.as_element.return_value = button

        await driver_factory(expand_settle=2.5).open()

        button.click.assert_awaited_once()
        labels, aria = mock_page.evaluate_handle.await_args.args[1]
        assert "show more" in labels and "ver mais" in labels
        assert aria == "more"
        assert 2.5 in [c.args[0] for c in no_sleep.await_args_list]

    @pytest.mark.asyncio
    async def test_missing_description_selector_is_not_fatal(self, driver_factory, mock_page):
        mock_page.wait_for_selector.side_effect = PlaywrightTimeoutError("no selector")
        await driver_factory().open()
        selector = mock_page.wait_for_selector.await_args.args[0]
        assert ".show-more-less-html__markup" in selector

    @pytest.mark.asyncio
    async def test_settle_delays_follow_settings(self, driver_factory, no_sleep):
        await driver_factory(
            initial_settle=1.0, scroll_settle=0.5, content_settle=3.0, scroll_into_view_settle=0.25
        ).open()
        delays = [c.args[0] for c in no_sleep.await_args_list]
        assert delays == [1.0, 0.5, 0.5, 3.0, 0.25]

    @pytest.mark.asyncio
    async def test_capture_serializes_current_document(self, driver_factory, mock_page):
        snapshot = await driver_factory().capture()
        assert isinstance(snapshot, HtmlSnapshot)
        assert snapshot.url == "https://www.linkedin.com/jobs/view/123"
        assert snapshot.select_one(".show-more-less-html__markup").displayed_text() == "Text"


@pytest.fixture
def fake_playwright(monkeypatch):
    playwright = MagicMock()
    playwright.stop = AsyncMock()
    browser = MagicMock()
    browser.close = AsyncMock()
    playwright.chromium.launch = AsyncMock(return_value=browser)
    starter = MagicMock()
    starter.start = AsyncMock(return_value=playwright)
    monkeypatch.setattr(page_driver, "async_playwright", MagicMock(return_value=starter))
    return playwright


@pytest.mark.unit
class TestBrowserSession:
    @pytest.mark.asyncio
    async def test_launch_and_close(self, fake_playwright):
        async with BrowserSession(DriverSettings(headless=False)):
            pass
        kwargs = fake_playwright.chromium.launch.await_args.kwargs
        assert kwargs["headless"] is False
        fake_playwright.chromium.launch.return_value.close.assert_awaited_once()
        fake_playwright.stop.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_launch_stops_playwright(self, fake_playwright):
        fake_playwright.chromium.launch.side_effect = RuntimeError("Executable doesn't exist")
        session = BrowserSession()

        with pytest.raises(RuntimeError, match="Executable"):
            async with session:
                pass

        fake_playwright.stop.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_posting_requires_started_session(self):
        with pytest.raises(RuntimeError, match="not started"):
            async with BrowserSession().posting("https://example.com/job"):
                pass
