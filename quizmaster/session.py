"""
Game Session: loads the three tiers, runs per-question timers and applies
single-strike elimination. One wrong answer or a timeout ends the run.

States: idle -> loading -> playing -> finished | gameover
"""
import logging
import math
import random
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional

from engine import NAME_MAX_LENGTH, NAME_MIN_LENGTH, TIMER_DANGER_SECONDS, TIMER_WARNING_SECONDS
from .config import DEFAULT_CONFIG, GameConfiguration
from .engine import calculate_points, round_half_up, summarize_results
from .errors import InvalidArgument
from .models import Question, QuestionResult, QuizAttempt

logger = logging.getLogger(__name__)


def validate_player_name(name: Optional[str]) -> str:
    """Trim and check a player name; raises InvalidArgument with a player-facing message."""
    trimmed = (name or "").strip()
    if not trimmed:
        raise InvalidArgument("Please enter your name to continue")
    if len(trimmed) < NAME_MIN_LENGTH:
        raise InvalidArgument(f"Name must be at least {NAME_MIN_LENGTH} characters")
    if len(trimmed) > NAME_MAX_LENGTH:
        raise InvalidArgument(f"Name must be {NAME_MAX_LENGTH} characters or less")
    return trimmed


def timer_urgency(remaining: Optional[int]) -> str:
    """normal / warning / danger, for countdown styling."""
    if remaining is None or remaining > TIMER_WARNING_SECONDS:
        return "normal"
    if remaining > TIMER_DANGER_SECONDS:
        return "warning"
    return "danger"


class QuestionTimer:
    """Deadline for a single question instance. Expiry is polled, not pushed."""

    def __init__(self, duration: Optional[int], clock: Callable[[], float] = time.monotonic):
        self.duration = duration
        self._clock = clock
        self.started_at = clock()
        self.cancelled = False

    def elapsed(self) -> float:
        return max(0.0, self._clock() - self.started_at)

    def remaining(self) -> Optional[int]:
        """Whole seconds left, None for untimed questions."""
        if self.duration is None:
            return None
        return max(0, self.duration - math.floor(self.elapsed()))

    def expired(self) -> bool:
        return not self.cancelled and self.duration is not None and self.elapsed() >= self.duration

    def cancel(self):
        self.cancelled = True


class GameSession:
    """Drives one player's run through the easy, medium and hard tiers."""

    IDLE = "idle"
    LOADING = "loading"
    PLAYING = "playing"
    FINISHED = "finished"
    GAME_OVER = "gameover"

    def __init__(
        self,
        database,
        config: GameConfiguration = DEFAULT_CONFIG,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            database: Question source and persistence collaborator
                (fetch_tier(difficulty, count, rng), save_quiz_attempt(attempt))
            config: Game configuration
            rng: Random source for selection; module-level generator when None
            clock: Monotonic clock in seconds, injectable for tests
        """
        self.database = database
        self.config = config
        self.rng = rng
        self._clock = clock
        self._lock = threading.Lock()
        self.timer: Optional[QuestionTimer] = None
        self.reset()

    def reset(self):
        """Back to idle for a replay; any pending timer is cancelled."""
        if self.timer is not None:
            self.timer.cancel()
        self.timer = None
        self.status = self.IDLE
        self.player_name = ""
        self.questions: List[Question] = []
        self.results: List[QuestionResult] = []
        self.current_question_idx = 0
        self.started_at: Optional[float] = None
        self.attempt: Optional[QuizAttempt] = None
        self._answered = False

    # ============= Loading =============

    def start(self, player_name: str) -> List[Question]:
        """
        Validate the name, load all tiers and begin the first question.

        Returns:
            The ordered question list (all easy, then medium, then hard)
        """
        if self.status != self.IDLE:
            raise InvalidArgument(f"Cannot start a session in state {self.status!r}")
        self.player_name = validate_player_name(player_name)
        self.status = self.LOADING

        self.questions = self._load_questions()
        self.started_at = self._clock()
        if not self.questions:
            logger.error("No questions available; ending session")
            self._end(self.GAME_OVER)
            return self.questions

        self.status = self.PLAYING
        self._begin_question()
        logger.info(f"Session started for {self.player_name}: {len(self.questions)} questions")
        return self.questions

    def _load_questions(self) -> List[Question]:
        difficulties = self.config.difficulties
        count = self.config.questions_per_difficulty
        # One derived generator per tier keeps seeded runs reproducible across threads
        tier_rngs = {
            d: random.Random(self.rng.random()) if self.rng is not None else None
            for d in difficulties
        }
        with ThreadPoolExecutor(max_workers=len(difficulties)) as executor:
            futures = {
                d: executor.submit(self.database.fetch_tier, d, count, tier_rngs[d])
                for d in difficulties
            }
            tiers = {d: future.result() for d, future in futures.items()}

        questions = []
        for d in difficulties:
            if len(tiers[d]) < count:
                logger.warning(f"Only {len(tiers[d])} {d} questions available, need {count}")
            questions.extend(tiers[d])
        return questions

    # ============= Playing =============

    @property
    def current_question(self) -> Optional[Question]:
        if self.status != self.PLAYING or self.current_question_idx >= len(self.questions):
            return None
        return self.questions[self.current_question_idx]

    @property
    def total_points(self) -> int:
        return sum(r.points_earned for r in self.results)

    def _begin_question(self):
        question = self.questions[self.current_question_idx]
        self._answered = False
        self.timer = QuestionTimer(self.config.timers.get(question.difficulty), self._clock)

    def _claim_current(self) -> bool:
        # Single assignment per question instance: first claimant scores it
        if self.status != self.PLAYING or self._answered:
            return False
        self._answered = True
        return True

    def submit_answer(self, option_idx: Optional[int]) -> Optional[QuestionResult]:
        """
        Score the current question with the player's choice.

        Returns:
            The recorded result, or None if the question was already
            answered or timed out
        """
        # A click after the deadline loses to the expiry
        if self.status == self.PLAYING and self.timer is not None and self.timer.expired():
            self.expire(self.current_question_idx)
            return None
        with self._lock:
            if not self._claim_current():
                return None
            question = self.questions[self.current_question_idx]
            time_taken = round_half_up(self.timer.elapsed())
            correct = question.is_correct(option_idx)
            points = calculate_points(question.difficulty, time_taken, self.config) if correct else 0
            return self._record(question, correct, time_taken, points)

    def expire(self, question_idx: Optional[int] = None) -> Optional[QuestionResult]:
        """
        Timer expiry: submit the current question as wrong with zero points.
        An expiry for a question other than the current one is stale and ignored.
        """
        with self._lock:
            if question_idx is not None and question_idx != self.current_question_idx:
                logger.debug(f"Ignoring stale expiry for question {question_idx}")
                return None
            if self.timer is None or self.timer.duration is None or self.timer.cancelled:
                return None
            if not self._claim_current():
                return None
            question = self.questions[self.current_question_idx]
            logger.info(f"Time up on question {self.current_question_idx + 1}")
            return self._record(question, False, self.timer.duration, 0)

    def tick(self) -> Optional[int]:
        """Poll the current timer, expiring the question once its deadline passes."""
        if self.status != self.PLAYING or self.timer is None:
            return None
        if self.timer.expired():
            self.expire(self.current_question_idx)
            return 0
        return self.timer.remaining()

    def remaining_time(self) -> Optional[int]:
        if self.status != self.PLAYING or self.timer is None:
            return None
        return self.timer.remaining()

    def _record(self, question: Question, correct: bool, time_taken: int, points: int) -> QuestionResult:
        result = QuestionResult(
            question_id=question.id,
            difficulty=question.difficulty,
            correct=correct,
            time_taken=time_taken,
            points_earned=points,
        )
        self.results.append(result)
        self.timer.cancel()
        logger.debug(f"Answer recorded: Q={question.id}, Correct={correct}, Points={points}")

        if not correct:
            self._end(self.GAME_OVER)
        elif self.current_question_idx < len(self.questions) - 1:
            self.current_question_idx += 1
            self._begin_question()
        else:
            self._end(self.FINISHED)
        return result

    # ============= Results =============

    def _end(self, status: str):
        self.status = status
        total_time = round_half_up(self._clock() - self.started_at) if self.started_at is not None else 0
        self.attempt = QuizAttempt.from_results(self.player_name, self.results, total_time)
        logger.info(
            f"Session for {self.player_name} ended ({status}): "
            f"Score={self.attempt.total_points}, Correct={self.attempt.correct}/{len(self.questions)}"
        )
        try:
            self.database.save_quiz_attempt(self.attempt)
        except Exception as e:
            logger.error(f"Could not save quiz attempt: {e}")

    @property
    def is_over(self) -> bool:
        return self.status in (self.FINISHED, self.GAME_OVER)

    def get_summary(self) -> dict:
        """Results-screen summary; total_time is the elapsed game time in seconds."""
        summary = summarize_results(self.results, self.config.total_questions)
        summary["total_time"] = self.attempt.total_time if self.attempt else 0
        summary["status"] = self.status
        return summary
