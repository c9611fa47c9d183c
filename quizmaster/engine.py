"""
Quiz Engine: exposure-weighted question selection, time-bonus scoring and
results analysis. Implements the 70/30 least-attempted/random split per tier.
"""
import logging
import math
import random
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional, Sequence

from engine import LEAST_ATTEMPTED_RATIO, UNDER_EXPOSED_FRACTION
from .config import DEFAULT_CONFIG, GameConfiguration
from .errors import InvalidArgument
from .models import LeaderboardEntry, Question, QuestionResult

logger = logging.getLogger(__name__)

# (minimum correct answers, title, subtitle), checked top to bottom
PERFORMANCE_TIERS = [
    (12, "EXCELLENT!", "Outstanding performance!"),
    (8, "GREAT JOB!", "Well played!"),
    (5, "GOOD TRY!", "Keep practicing!"),
    (0, "GAME OVER", "Better luck next time!"),
]


def select_questions(pool: Sequence[Question], count: int, rng: Optional[random.Random] = None) -> List[Question]:
    """
    Select `count` questions from a tier's pool, favouring rarely-seen ones.

    70% of the quota is drawn from the least-attempted half of the pool, the
    rest from whatever is left, and the result is shuffled.

    Args:
        pool: Candidate questions for one difficulty tier
        count: Number of questions wanted (>= 0)
        rng: Random source; defaults to the module-level generator

    Returns:
        min(count, len(pool)) distinct questions from the pool
    """
    if count < 0:
        raise InvalidArgument(f"count must be >= 0, got {count}")
    rng = rng or random

    if len(pool) <= count:
        return list(pool)

    # sorted() is stable, so ties keep pool order
    by_exposure = sorted(pool, key=lambda q: q.attempt_count)
    under_exposed = by_exposure[: math.ceil(len(pool) * UNDER_EXPOSED_FRACTION)]

    weighted_count = min(math.floor(count * LEAST_ATTEMPTED_RATIO), len(under_exposed))
    selected = rng.sample(under_exposed, weighted_count)
    used_ids = {q.id for q in selected}

    remaining = [q for q in pool if q.id not in used_ids]
    selected += rng.sample(remaining, min(count - len(selected), len(remaining)))

    rng.shuffle(selected)
    logger.debug(
        "Selected %d/%d questions (%d from %d least attempted)",
        len(selected), len(pool), weighted_count, len(under_exposed),
    )
    return selected


def calculate_points(difficulty: str, time_taken: float, config: GameConfiguration = DEFAULT_CONFIG) -> int:
    """
    Points for a correct answer.

    Formula: base + max(0, (timer - time_taken) * bonus), rounded half up.
    Untimed tiers and tiers with a zero multiplier score the base only.
    """
    if difficulty not in config.points:
        raise InvalidArgument(f"Unknown difficulty: {difficulty!r}")
    if time_taken < 0:
        raise InvalidArgument(f"time_taken must be >= 0, got {time_taken}")

    base_points = config.points[difficulty]
    max_time = config.timers.get(difficulty)
    multiplier = config.bonus_multiplier.get(difficulty, 0)

    if max_time is None or multiplier == 0:
        return base_points

    time_bonus = max(Decimal(0), (Decimal(max_time) - Decimal(str(time_taken))) * Decimal(str(multiplier)))
    return round_half_up(Decimal(base_points) + time_bonus)


def round_half_up(value) -> int:
    """Round to the nearest integer, halves away from zero (24.5 -> 25)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def summarize_results(results: List[QuestionResult], total_questions: int) -> Dict:
    """
    Summarize a finished game for the results screen.

    Returns:
        {correct, wrong, answered, total_points, accuracy_percent, title, subtitle, perfect}
    """
    correct = sum(1 for r in results if r.correct)
    wrong = len(results) - correct
    accuracy = round_half_up(Decimal(correct) * 100 / len(results)) if results else 0
    perfect = total_questions > 0 and correct == total_questions

    if perfect:
        title, subtitle = "PERFECT GAME!", "You are a Quiz Master!"
    else:
        title, subtitle = next((t, s) for minimum, t, s in PERFORMANCE_TIERS if correct >= minimum)

    return {
        "correct": correct,
        "wrong": wrong,
        "answered": len(results),
        "total_points": sum(r.points_earned for r in results),
        "accuracy_percent": accuracy,
        "title": title,
        "subtitle": subtitle,
        "perfect": perfect,
    }


def rank_leaderboard(entries: Iterable[LeaderboardEntry]) -> List[LeaderboardEntry]:
    """Sort by points (descending), then by total time (ascending)."""
    return sorted(entries, key=lambda e: (-e.total_points, e.total_time))


def format_duration(seconds: int) -> str:
    """Format seconds as m:ss."""
    mins, secs = divmod(max(0, int(seconds)), 60)
    return f"{mins}:{secs:02d}"
