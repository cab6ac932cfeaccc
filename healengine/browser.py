"""Playwright browser manager for HealEngine."""

from __future__ import annotations

from typing import Any

from playwright.async_api import Browser, BrowserContext, Page, async_playwright

from healengine.config import ResolverSettings
from healengine.exceptions import BrowserError
from healengine.logger import get_logger
from healengine.probes.playwright_probe import PlaywrightProbe

log = get_logger(__name__)


class BrowserManager:
    """Owns one Chromium page and hands out document probes bound to it.

    Used as an async context manager in tests and scripts::

        async with BrowserManager() as browser:
            await browser.set_content(html)
            result = await resolver.resolve(await browser.probe(), "#go")
    """

    def __init__(self, settings: ResolverSettings | None = None) -> None:
        self.settings = settings or ResolverSettings()
        self._playwright = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self._page: Page | None = None

    async def start(self, headless: bool | None = None) -> None:
        """Launch Chromium with a single context and page."""
        if headless is None:
            headless = self.settings.headless
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(headless=headless)
            self._context = await self._browser.new_context()
            await self.get_page()
        except Exception as exc:
            await self.stop()
            raise BrowserError(f"Failed to start browser: {exc}") from exc
        log.info("browser_started", headless=headless)

    async def stop(self) -> None:
        """Release the page, context, browser and driver, innermost first."""
        closables = [self._page, self._context, self._browser]
        driver = self._playwright
        self._page = self._context = self._browser = self._playwright = None

        for resource in closables:
            if resource is None:
                continue
            try:
                await resource.close()
            except Exception as exc:
                log.warning("browser_stop_error", error=str(exc))
        if driver is not None:
            try:
                await driver.stop()
            except Exception as exc:
                log.warning("browser_stop_error", error=str(exc))
        log.info("browser_stopped")

    async def __aenter__(self) -> BrowserManager:
        await self.start()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.stop()

    async def get_page(self) -> Page:
        """Return the live page, opening a fresh one if it was closed."""
        if self._context is None:
            raise BrowserError("Browser not started, call start() first")
        if self._page is None or self._page.is_closed():
            self._page = await self._context.new_page()
        return self._page

    async def set_content(self, html: str) -> None:
        """Replace the current document with the given markup."""
        page = await self.get_page()
        await page.set_content(html)

    async def probe(
        self, require_visible: bool = False, timeout: float | None = None
    ) -> PlaywrightProbe:
        """Return a document probe bound to the current page."""
        page = await self.get_page()
        return PlaywrightProbe(
            page,
            require_visible=require_visible,
            timeout=self.settings.probe_timeout if timeout is None else timeout,
        )
