"""Shared test fixtures for HealEngine."""
import re
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from healengine.exceptions import MalformedLocatorError
from healengine.probes import BaseProbe

# Path to test fixtures
FIXTURES_DIR = Path(__file__).parent / "fixtures"
MOCK_PAGES_DIR = FIXTURES_DIR / "mock_pages"

_TAG = re.compile(r"[a-zA-Z][a-zA-Z0-9]*")
_TOKEN = re.compile(
    r'#(?P<id>[\w-]+)'
    r'|\.(?P<cls>[\w-]+)'
    r'|\[(?P<attr>[\w-]+)(?:(?P<op>\*?=)"(?P<val>(?:[^"\\]|\\.)*)")?\]'
)

_CSS_ESCAPE = re.compile(r"\\(?:(?P<hex>[0-9a-fA-F]{1,6}) ?|(?P<char>.))")


def _unescape(match: re.Match) -> str:
    if match.group("hex"):
        return chr(int(match.group("hex"), 16))
    return match.group("char")


@dataclass
class FakeElement:
    """Element in the in-memory document."""

    tag: str
    text: str = ""
    attrs: dict[str, str] = field(default_factory=dict)


def _parse(selector: str) -> list[tuple[str, str, str | None]]:
    """Parse a compound selector into (kind, name, value) conditions."""
    conditions: list[tuple[str, str, str | None]] = []
    pos = 0
    tag = _TAG.match(selector)
    if tag:
        conditions.append(("tag", tag.group(), None))
        pos = tag.end()
    while pos < len(selector):
        match = _TOKEN.match(selector, pos)
        if not match:
            raise MalformedLocatorError(selector, f"unexpected token at {pos}")
        if match.group("id"):
            conditions.append(("=", "id", match.group("id")))
        elif match.group("cls"):
            conditions.append(("class", "class", match.group("cls")))
        elif match.group("op"):
            value = _CSS_ESCAPE.sub(_unescape, match.group("val"))
            conditions.append((match.group("op"), match.group("attr"), value))
        else:
            conditions.append(("has", match.group("attr"), None))
        pos = match.end()
    if not conditions:
        raise MalformedLocatorError(selector, "empty selector")
    return conditions


def _matches(element: FakeElement, conditions) -> bool:
    for kind, name, value in conditions:
        attr = element.attrs.get(name)
        if kind == "tag" and element.tag != name:
            return False
        if kind == "has" and attr is None:
            return False
        if kind == "=" and attr != value:
            return False
        if kind == "*=" and (attr is None or value not in attr):
            return False
        if kind == "class" and value not in (attr or "").split():
            return False
    return True


class FakeProbe(BaseProbe):
    """Document probe over an in-memory element list, recording every call."""

    def __init__(self, elements: list[FakeElement] | None = None) -> None:
        self.elements = list(elements or [])
        self.calls: list[tuple[str, object]] = []

    async def query_one(self, selector: str) -> FakeElement | None:
        self.calls.append(("query_one", selector))
        conditions = _parse(selector)
        return next((el for el in self.elements if _matches(el, conditions)), None)

    async def query_by_text(self, tags, text: str) -> FakeElement | None:
        self.calls.append(("query_by_text", (tuple(tags), text)))
        for tag in tags:
            for el in self.elements:
                if el.tag == tag and text in el.text:
                    return el
        return None

    async def discover_first_test_id(self) -> str | None:
        self.calls.append(("discover_first_test_id", None))
        for el in self.elements:
            if "data-testid" in el.attrs:
                return el.attrs["data-testid"]
        return None

    @property
    def selectors_queried(self) -> list[str]:
        return [arg for name, arg in self.calls if name == "query_one"]


class ManualClock:
    """Clock the tests advance by hand."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def mock_pages_dir() -> Path:
    """Path to mock HTML pages."""
    return MOCK_PAGES_DIR


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()

