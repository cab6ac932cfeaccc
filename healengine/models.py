"""All Pydantic models for HealEngine."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Strategy models ---


class StrategyKind(str, Enum):
    """Family a resolution strategy belongs to."""

    ORIGINAL = "original"
    CACHE = "cache"
    TESTID = "testid"
    ARIA = "aria"
    SEMANTIC = "semantic"
    STRUCTURE = "structure"


class SelectorDescriptor(BaseModel):
    """Structural locator executed with a single CSS query."""

    model_config = ConfigDict(frozen=True)

    type: Literal["selector"] = "selector"
    selector: str


class TextDescriptor(BaseModel):
    """Free-text scan across a prioritized list of tag names."""

    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    tags: tuple[str, ...]
    text: str


LocatorDescriptor = Annotated[
    Union[SelectorDescriptor, TextDescriptor], Field(discriminator="type")
]


class Strategy(BaseModel):
    """A scored, executable way to find an element."""

    model_config = ConfigDict(frozen=True)

    name: str
    descriptor: LocatorDescriptor
    confidence: float = Field(ge=0, le=1)
    kind: StrategyKind


# --- Cache models ---


class CacheEntry(BaseModel):
    """Last strategy that resolved a given original locator."""

    strategy: Strategy
    last_used: float
    success_count: int = Field(default=1, ge=1)

    @field_validator("strategy")
    @classmethod
    def _only_healing_strategies(cls, value: Strategy) -> Strategy:
        if value.kind in (StrategyKind.ORIGINAL, StrategyKind.CACHE):
            raise ValueError(f"'{value.kind.value}' strategies are never cached")
        return value


class CacheEntryStats(BaseModel):
    """Snapshot of one cache entry."""

    locator: str
    strategy: str
    kind: StrategyKind
    success_count: int
    age: float


class CacheStats(BaseModel):
    """Snapshot of the whole resolution cache."""

    total_entries: int = 0
    entries: list[CacheEntryStats] = Field(default_factory=list)


# --- Resolution models ---


class ResolveOptions(BaseModel):
    """Caller options for a single resolution."""

    text_hint: str | None = None
    enable_healing: bool = True
    max_strategies: int = Field(default=7, ge=0)
    min_confidence: float = Field(default=0.6, ge=0, le=1)


class ResolutionResult(BaseModel):
    """Outcome of resolving one locator.

    ``element`` is the probe's element handle; the resolver never retains
    or disposes it.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    element: Any = None
    strategy: Strategy | None = None
    healing_applied: bool = False
    attempted_strategies: list[StrategyKind] = Field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.element is not None
