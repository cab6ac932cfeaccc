"""Configuration for HealEngine via environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

from healengine.exceptions import ConfigurationError


@dataclass
class ResolverSettings:
    """Resolver defaults loaded from environment variables."""

    max_strategies: int = 7
    min_confidence: float = 0.6
    reuse_window: float = 60.0
    eviction_window: float = 300.0
    probe_timeout: float = 2.0
    headless: bool = True

    @classmethod
    def from_env(cls) -> ResolverSettings:
        """Load settings from environment variables."""
        try:
            settings = cls(
                max_strategies=int(os.environ.get("HEAL_MAX_STRATEGIES", "7")),
                min_confidence=float(os.environ.get("HEAL_MIN_CONFIDENCE", "0.6")),
                reuse_window=float(os.environ.get("HEAL_REUSE_WINDOW", "60")),
                eviction_window=float(
                    os.environ.get("HEAL_EVICTION_WINDOW", "300")
                ),
                probe_timeout=float(os.environ.get("HEAL_PROBE_TIMEOUT", "2.0")),
                headless=os.environ.get("HEAL_HEADLESS", "true").lower() == "true",
            )
        except ValueError as exc:
            raise ConfigurationError(f"Invalid environment setting: {exc}") from exc
        settings.validate()
        return settings

    def validate(self) -> None:
        """Raise ConfigurationError if any value is out of range."""
        if self.max_strategies < 0:
            raise ConfigurationError(
                f"max_strategies must be >= 0, got {self.max_strategies}"
            )
        if not 0.0 <= self.min_confidence <= 1.0:
            raise ConfigurationError(
                f"min_confidence must be within [0, 1], got {self.min_confidence}"
            )
        if self.reuse_window < 0:
            raise ConfigurationError(
                f"reuse_window must be >= 0, got {self.reuse_window}"
            )
        if self.eviction_window < self.reuse_window:
            raise ConfigurationError(
                f"eviction_window ({self.eviction_window}) must be >= "
                f"reuse_window ({self.reuse_window})"
            )
        if self.probe_timeout <= 0:
            raise ConfigurationError(
                f"probe_timeout must be > 0, got {self.probe_timeout}"
            )
