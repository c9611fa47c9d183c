"""
Game configuration and logging setup.
The configuration is built once at import and never mutated; pass an
alternate GameConfiguration explicitly where a test or variant needs one.
"""
import logging
import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from dotenv import load_dotenv

import engine

load_dotenv()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class GameConfiguration:
    """Per-tier timers, base points and time-bonus multipliers."""
    questions_per_difficulty: int = engine.QUESTIONS_PER_DIFFICULTY
    timers: Mapping[str, Optional[int]] = field(default_factory=lambda: dict(engine.TIMERS))
    points: Mapping[str, int] = field(default_factory=lambda: dict(engine.POINTS))
    bonus_multiplier: Mapping[str, float] = field(default_factory=lambda: dict(engine.BONUS_MULTIPLIER))

    def __post_init__(self):
        # Freeze the mappings too, not just the attributes
        for name in ("timers", "points", "bonus_multiplier"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    @property
    def difficulties(self):
        return engine.DIFFICULTIES

    @property
    def total_questions(self) -> int:
        return self.questions_per_difficulty * len(engine.DIFFICULTIES)


DEFAULT_CONFIG = GameConfiguration()


def setup_logging(level: Optional[str] = None):
    """Configure root logging; level defaults to $QUIZ_LOG_LEVEL or INFO."""
    level_name = (level or os.environ.get("QUIZ_LOG_LEVEL") or "INFO").upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)
    logging.getLogger(__name__).debug("Logging configured at %s", level_name)
