"""Document probe interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any


class BaseProbe(ABC):
    """Primitive queries the resolver runs against a live document.

    Every query fails softly: a miss is ``None``, never an exception.
    ``query_one`` may raise ``MalformedLocatorError`` for a locator the
    document cannot parse.
    """

    @abstractmethod
    async def query_one(self, selector: str) -> Any | None:
        """Return the first element matching the selector verbatim."""

    @abstractmethod
    async def query_by_text(self, tags: Sequence[str], text: str) -> Any | None:
        """Return the first element whose text contains ``text``.

        Tags are scanned in the given order, each in document order.
        """

    @abstractmethod
    async def discover_first_test_id(self) -> str | None:
        """Return the test-id value of the first element carrying one."""
