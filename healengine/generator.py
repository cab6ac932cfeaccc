"""Candidate strategy generation for broken locators."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from healengine.exceptions import ProbeError
from healengine.logger import get_logger
from healengine.models import (
    SelectorDescriptor,
    Strategy,
    StrategyKind,
    TextDescriptor,
)

if TYPE_CHECKING:
    from healengine.probes import BaseProbe

log = get_logger(__name__)

# Confidence table
TESTID_EXACT = 0.95
TESTID_ALT = 0.93
TESTID_DISCOVERY = 0.91
ARIA_LABEL = 0.90
ARIA_LABELLEDBY = 0.85
SEMANTIC = 0.85
STRUCTURE_ID = 0.75
STRUCTURE_CLASS = 0.70

SEMANTIC_TAGS: tuple[str, ...] = ("button", "a", "input", "label", "h1", "h2", "h3")

_TESTID_PATTERNS = (
    re.compile(r"""\[data-testid=["']([^"']+)["']\]"""),
    re.compile(r"""\[data-test=["']([^"']+)["']\]"""),
)
_CLASS_FRAGMENT = re.compile(r"\.([a-zA-Z0-9_-]+)")
_ID_FRAGMENT = re.compile(r"#([a-zA-Z0-9_-]+)")
_CSS_STRING_SPECIAL = re.compile(r'[\\"\x00-\x1f\x7f]')


def css_string(value: str) -> str:
    """Quote a value for use inside a CSS attribute selector.

    Control characters (newlines included) become hex escapes, since a raw
    newline ends a CSS string.
    """
    escaped = _CSS_STRING_SPECIAL.sub(_css_escape, value)
    return f'"{escaped}"'


def _css_escape(match: re.Match[str]) -> str:
    char = match.group()
    if char in ("\\", '"'):
        return "\\" + char
    return f"\\{ord(char):x} "


def referenced_test_id(locator: str) -> str | None:
    """Return the test-id value the locator targets, if any."""
    for pattern in _TESTID_PATTERNS:
        match = pattern.search(locator)
        if match:
            return match.group(1)
    return None


def _selector(name: str, selector: str, confidence: float, kind: StrategyKind) -> Strategy:
    return Strategy(
        name=name,
        descriptor=SelectorDescriptor(selector=selector),
        confidence=confidence,
        kind=kind,
    )


def testid_strategies(test_id: str) -> list[Strategy]:
    return [
        _selector(
            "Test ID",
            f"[data-testid={css_string(test_id)}]",
            TESTID_EXACT,
            StrategyKind.TESTID,
        ),
        _selector(
            "Test ID Alt",
            f"[data-test={css_string(test_id)}]",
            TESTID_ALT,
            StrategyKind.TESTID,
        ),
    ]


def hint_strategies(text_hint: str) -> list[Strategy]:
    """ARIA and semantic strategies derived from a text hint."""
    strategies = [
        _selector(
            "ARIA Label",
            f"[aria-label={css_string(text_hint)}]",
            ARIA_LABEL,
            StrategyKind.ARIA,
        ),
        _selector(
            "ARIA LabelledBy",
            f"[aria-labelledby*={css_string(text_hint.lower())}]",
            ARIA_LABELLEDBY,
            StrategyKind.ARIA,
        ),
    ]
    for tag in SEMANTIC_TAGS:
        strategies.append(
            Strategy(
                name=f"Semantic {tag.upper()}",
                descriptor=TextDescriptor(tags=(tag,), text=text_hint),
                confidence=SEMANTIC,
                kind=StrategyKind.SEMANTIC,
            )
        )
    return strategies


def structure_strategies(locator: str) -> list[Strategy]:
    """Partial class/id matches recovered from the original locator."""
    strategies: list[Strategy] = []
    class_match = _CLASS_FRAGMENT.search(locator)
    if class_match:
        strategies.append(
            _selector(
                "Class Partial",
                f"[class*={css_string(class_match.group(1))}]",
                STRUCTURE_CLASS,
                StrategyKind.STRUCTURE,
            )
        )
    id_match = _ID_FRAGMENT.search(locator)
    if id_match:
        strategies.append(
            _selector(
                "ID Partial",
                f"[id*={css_string(id_match.group(1))}]",
                STRUCTURE_ID,
                StrategyKind.STRUCTURE,
            )
        )
    return strategies


class StrategyGenerator:
    """Builds the ranked fallback strategies for a locator that missed."""

    async def generate(
        self,
        probe: BaseProbe,
        locator: str,
        text_hint: str | None = None,
    ) -> list[Strategy]:
        """Return candidate strategies, highest confidence first.

        The probe is touched at most once, for test-id discovery, and only
        when the locator does not already name a test id. Ties keep
        generation order.
        """
        strategies: list[Strategy] = []

        test_id = referenced_test_id(locator)
        if test_id:
            strategies.extend(testid_strategies(test_id))
        else:
            discovered = await self._discover_test_id(probe)
            if discovered:
                strategies.append(
                    _selector(
                        "Test ID Discovery",
                        f"[data-testid={css_string(discovered)}]",
                        TESTID_DISCOVERY,
                        StrategyKind.TESTID,
                    )
                )

        if text_hint:
            strategies.extend(hint_strategies(text_hint))

        strategies.extend(structure_strategies(locator))

        return sorted(strategies, key=lambda s: s.confidence, reverse=True)

    @staticmethod
    async def _discover_test_id(probe: BaseProbe) -> str | None:
        try:
            return await probe.discover_first_test_id()
        except ProbeError as exc:
            log.warning("testid_discovery_failed", error=str(exc))
            return None
