"""HealEngine exception hierarchy."""


class HealEngineError(Exception):
    """Base exception for all HealEngine errors."""


class ProbeError(HealEngineError):
    """Raised when the document probe cannot complete a query."""


class MalformedLocatorError(ProbeError):
    """Raised when the document rejects a locator as syntactically invalid."""

    def __init__(self, locator: str, detail: str) -> None:
        self.locator = locator
        self.detail = detail
        super().__init__(f"Malformed locator '{locator}': {detail}")


class SelectorResolutionError(HealEngineError):
    """Raised when a caller requires an element and no strategy found one."""

    def __init__(self, locator: str, strategies_tried: list[str]) -> None:
        self.locator = locator
        self.strategies_tried = strategies_tried
        super().__init__(
            f"Cannot resolve element for locator '{locator}'. "
            f"Tried: {', '.join(strategies_tried)}"
        )


class BrowserError(HealEngineError):
    """Raised on browser lifecycle errors."""


class ConfigurationError(HealEngineError):
    """Raised when resolver or cache settings are out of range."""
