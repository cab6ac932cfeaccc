"""Self-healing locator resolution."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from healengine.cache import ResolutionCache
from healengine.config import ResolverSettings
from healengine.exceptions import MalformedLocatorError, SelectorResolutionError
from healengine.generator import StrategyGenerator
from healengine.logger import get_logger
from healengine.models import (
    CacheStats,
    ResolutionResult,
    ResolveOptions,
    SelectorDescriptor,
    Strategy,
    StrategyKind,
    TextDescriptor,
)

if TYPE_CHECKING:
    from healengine.models import LocatorDescriptor
    from healengine.probes import BaseProbe

log = get_logger(__name__)


async def execute_descriptor(probe: BaseProbe, descriptor: LocatorDescriptor) -> Any | None:
    """Run a strategy's descriptor through the matching probe query."""
    if isinstance(descriptor, TextDescriptor):
        return await probe.query_by_text(descriptor.tags, descriptor.text)
    if isinstance(descriptor, SelectorDescriptor):
        return await probe.query_one(descriptor.selector)
    raise TypeError(f"Unsupported descriptor: {type(descriptor).__name__}")


def original_strategy(locator: str) -> Strategy:
    return Strategy(
        name="Original",
        descriptor=SelectorDescriptor(selector=locator),
        confidence=1.0,
        kind=StrategyKind.ORIGINAL,
    )


class SelfHealingResolver:
    """Resolves locators, falling back to healing strategies when they miss.

    Attempt order: the locator verbatim, then the cached strategy for it,
    then freshly generated strategies by descending confidence. Not finding
    an element is a normal result, not an exception.
    """

    def __init__(
        self,
        cache: ResolutionCache | None = None,
        generator: StrategyGenerator | None = None,
        settings: ResolverSettings | None = None,
    ) -> None:
        self.settings = settings or ResolverSettings()
        self.cache = cache or ResolutionCache(
            reuse_window=self.settings.reuse_window,
            eviction_window=self.settings.eviction_window,
        )
        self.generator = generator or StrategyGenerator()

    async def resolve(
        self,
        probe: BaseProbe,
        locator: str,
        *,
        text_hint: str | None = None,
        enable_healing: bool = True,
        max_strategies: int | None = None,
        min_confidence: float | None = None,
    ) -> ResolutionResult:
        """Resolve a locator against the probe's document."""
        options = ResolveOptions(
            text_hint=text_hint,
            enable_healing=enable_healing,
            max_strategies=(
                self.settings.max_strategies
                if max_strategies is None
                else max_strategies
            ),
            min_confidence=(
                self.settings.min_confidence
                if min_confidence is None
                else min_confidence
            ),
        )
        attempted: list[StrategyKind] = [StrategyKind.ORIGINAL]

        # 1. Original locator, verbatim
        try:
            element = await probe.query_one(locator)
        except MalformedLocatorError as exc:
            log.info("original_malformed", locator=locator, error=exc.detail)
            element = None
        if element is not None:
            log.debug("original_resolved", locator=locator)
            self.cache.sweep()
            return ResolutionResult(
                element=element,
                strategy=original_strategy(locator),
                healing_applied=False,
                attempted_strategies=attempted,
            )

        # 2. Healing disabled
        if not options.enable_healing:
            return ResolutionResult(attempted_strategies=attempted)

        log.info("healing_started", locator=locator)

        # 3. Cached strategy
        cached = self.cache.lookup(locator)
        if cached is not None:
            attempted.append(StrategyKind.CACHE)
            element = await execute_descriptor(probe, cached.strategy.descriptor)
            if element is not None:
                entry = self.cache.put(locator, cached.strategy)
                log.info(
                    "cache_hit",
                    locator=locator,
                    strategy=cached.strategy.name,
                    success_count=entry.success_count,
                )
                return ResolutionResult(
                    element=element,
                    strategy=cached.strategy,
                    healing_applied=True,
                    attempted_strategies=attempted,
                )
            # Left in place; only a later success overwrites it
            log.info("cache_stale", locator=locator, strategy=cached.strategy.name)

        # 4. Generated strategies
        strategies = await self.generator.generate(probe, locator, options.text_hint)
        for strategy in strategies[: options.max_strategies]:
            if strategy.confidence < options.min_confidence:
                log.debug(
                    "strategy_below_threshold",
                    strategy=strategy.name,
                    confidence=strategy.confidence,
                    min_confidence=options.min_confidence,
                )
                break

            attempted.append(strategy.kind)
            element = await execute_descriptor(probe, strategy.descriptor)
            if element is not None:
                self.cache.put(locator, strategy)
                log.info(
                    "healing_succeeded",
                    locator=locator,
                    strategy=strategy.name,
                    confidence=strategy.confidence,
                )
                return ResolutionResult(
                    element=element,
                    strategy=strategy,
                    healing_applied=True,
                    attempted_strategies=attempted,
                )

        # 5. Exhausted
        log.warning(
            "healing_exhausted",
            locator=locator,
            attempted=[kind.value for kind in attempted],
        )
        return ResolutionResult(healing_applied=True, attempted_strategies=attempted)

    async def require(
        self, probe: BaseProbe, locator: str, **options: Any
    ) -> ResolutionResult:
        """Resolve, raising SelectorResolutionError when nothing matched."""
        result = await self.resolve(probe, locator, **options)
        if not result.found:
            raise SelectorResolutionError(
                locator, [kind.value for kind in result.attempted_strategies]
            )
        return result

    def cache_stats(self) -> CacheStats:
        return self.cache.stats()

    def clear_cache(self) -> None:
        self.cache.clear()
