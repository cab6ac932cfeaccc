"""HealEngine: self-healing locator resolution for browser automation."""

from healengine.cache import ResolutionCache
from healengine.config import ResolverSettings
from healengine.exceptions import (
    BrowserError,
    ConfigurationError,
    HealEngineError,
    MalformedLocatorError,
    ProbeError,
    SelectorResolutionError,
)
from healengine.generator import StrategyGenerator
from healengine.models import (
    CacheEntry,
    CacheStats,
    ResolutionResult,
    ResolveOptions,
    SelectorDescriptor,
    Strategy,
    StrategyKind,
    TextDescriptor,
)
from healengine.probes import BaseProbe
from healengine.resolver import SelfHealingResolver

__version__ = "0.1.0"

__all__ = [
    "BaseProbe",
    "BrowserError",
    "CacheEntry",
    "CacheStats",
    "ConfigurationError",
    "HealEngineError",
    "MalformedLocatorError",
    "ProbeError",
    "ResolutionCache",
    "ResolutionResult",
    "ResolveOptions",
    "ResolverSettings",
    "SelectorDescriptor",
    "SelectorResolutionError",
    "SelfHealingResolver",
    "Strategy",
    "StrategyGenerator",
    "StrategyKind",
    "TextDescriptor",
    "__version__",
]
