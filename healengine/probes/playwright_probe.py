"""Playwright-backed document probe."""

from __future__ import annotations

import asyncio
import re
from collections.abc import Awaitable, Sequence
from typing import TYPE_CHECKING, Any, TypeVar

from playwright.async_api import Error as PlaywrightError

from healengine.exceptions import MalformedLocatorError, ProbeError
from healengine.logger import get_logger
from healengine.probes import BaseProbe

if TYPE_CHECKING:
    from playwright.async_api import ElementHandle, Page

log = get_logger(__name__)

T = TypeVar("T")

_DEFAULT_TIMEOUT = 2.0  # seconds per probe call

TEST_ID_ATTRIBUTE = "data-testid"

# Messages Chromium and Playwright's selector engine emit for unparsable selectors
_SYNTAX_ERROR = re.compile(
    r"is not a valid selector|Unexpected token|SyntaxError|"
    r"Unknown engine|Malformed|while parsing",
    re.IGNORECASE,
)

_FIND_BY_TEXT_JS = """
([tags, text]) => {
  for (const tag of tags) {
    for (const el of document.querySelectorAll(tag)) {
      if (el.textContent && el.textContent.includes(text)) {
        return el;
      }
    }
  }
  return null;
}
"""


class PlaywrightProbe(BaseProbe):
    """Run probe queries against a Playwright page."""

    def __init__(
        self,
        page: Page,
        require_visible: bool = False,
        timeout: float = _DEFAULT_TIMEOUT,
    ) -> None:
        self._page = page
        self._require_visible = require_visible
        self._timeout = timeout

    async def query_one(self, selector: str) -> ElementHandle | None:
        try:
            element = await self._bounded(
                self._page.query_selector(selector), "query_one", selector
            )
        except PlaywrightError as exc:
            if _SYNTAX_ERROR.search(exc.message):
                raise MalformedLocatorError(selector, exc.message) from exc
            raise ProbeError(f"query_one({selector!r}) failed: {exc.message}") from exc
        return await self._accept(element)

    async def query_by_text(
        self, tags: Sequence[str], text: str
    ) -> ElementHandle | None:
        try:
            handle = await self._bounded(
                self._page.evaluate_handle(_FIND_BY_TEXT_JS, [list(tags), text]),
                "query_by_text",
                text,
            )
        except PlaywrightError as exc:
            raise ProbeError(f"query_by_text({text!r}) failed: {exc.message}") from exc
        if handle is None:
            return None

        element = handle.as_element()
        if element is None:
            await handle.dispose()
            return None
        return await self._accept(element)

    async def discover_first_test_id(self) -> str | None:
        try:
            element = await self._bounded(
                self._page.query_selector(f"[{TEST_ID_ATTRIBUTE}]"),
                "discover_first_test_id",
                TEST_ID_ATTRIBUTE,
            )
            if element is None:
                return None
            try:
                return await element.get_attribute(TEST_ID_ATTRIBUTE)
            finally:
                await element.dispose()
        except PlaywrightError as exc:
            raise ProbeError(f"test-id discovery failed: {exc.message}") from exc

    async def _bounded(
        self, call: Awaitable[T], operation: str, target: str
    ) -> T | None:
        """Await a page call, treating a timeout as a miss."""
        try:
            return await asyncio.wait_for(call, timeout=self._timeout)
        except asyncio.TimeoutError:
            log.warning("probe_timeout", operation=operation, target=target)
            return None

    async def _accept(self, element: Any) -> ElementHandle | None:
        if element is None:
            return None
        if self._require_visible and not await element.is_visible():
            await element.dispose()
            return None
        return element
