"""
Database operations for Quiz Master.
Handles Supabase reads and writes for question pools, quiz attempts and the
leaderboard. Every failure is logged and converted to demo data or a no-op so
the game flow is never interrupted by infrastructure.
"""
import logging
import random
from typing import Dict, List, Optional

from supabase import Client

from engine import DIFFICULTIES
from db import get_supabase_uncached, is_supabase_configured, upsert_questions_bulk
from .demo_data import all_demo_questions, demo_leaderboard, demo_questions
from .engine import rank_leaderboard, select_questions
from .errors import DataUnavailable, PersistenceFailure
from .models import LeaderboardEntry, Question, QuizAttempt

logger = logging.getLogger(__name__)


class DatabaseClient:
    """Wrapper around Supabase client with Quiz Master-specific operations."""

    QUESTIONS_TABLE = "questions"
    ATTEMPTS_TABLE = "quiz_attempts"

    def __init__(self, client: Optional[Client] = None):
        """
        Args:
            client: Supabase client; created from the environment when omitted.
                None after that means demo mode.
        """
        if client is None and is_supabase_configured():
            try:
                client = get_supabase_uncached()
            except Exception as e:
                logger.error(f"Could not create Supabase client, using demo data: {e}")
                client = None
        self.client = client

    @property
    def demo_mode(self) -> bool:
        return self.client is None

    # ============= Questions =============

    def _load_pool(self, difficulty: str) -> List[Question]:
        try:
            response = (
                self.client.table(self.QUESTIONS_TABLE)
                .select("*")
                .eq("difficulty", difficulty)
                .execute()
            )
        except Exception as e:
            raise DataUnavailable(f"Error fetching {difficulty} questions: {e}") from e

        questions = []
        for row in response.data or []:
            try:
                questions.append(Question.from_row(row, difficulty))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed question row {row.get('id')}: {e}")
        if not questions:
            raise DataUnavailable(f"No questions found for {difficulty}")
        return questions

    def fetch_questions(self, difficulty: str) -> List[Question]:
        """
        Fetch the full pool for one tier, with attempt counts.

        Falls back to the demo pool when Supabase is not configured, the
        request fails, or the tier is empty.
        """
        if self.demo_mode:
            return demo_questions(difficulty)
        try:
            return self._load_pool(difficulty)
        except DataUnavailable as e:
            logger.warning(f"{e}; using demo questions")
            return demo_questions(difficulty)

    def fetch_tier(self, difficulty: str, count: int, rng: Optional[random.Random] = None) -> List[Question]:
        """Fetch a tier's pool and run exposure-weighted selection over it."""
        questions = select_questions(self.fetch_questions(difficulty), count, rng=rng)
        logger.info(f"Selected {len(questions)} {difficulty} questions")
        return questions

    def initialize_demo_questions(self, chunk_size: int = 200) -> int:
        """Upsert the built-in demo questions (attempt counts reset to 0)."""
        if self.demo_mode:
            logger.warning("Supabase not configured. Cannot initialize questions.")
            return 0
        rows = []
        for questions in all_demo_questions().values():
            for q in questions:
                row = q.to_row()
                row["source"] = "demo"
                rows.append(row)
        total = upsert_questions_bulk(self.client, rows, chunk_size=chunk_size)
        logger.info(f"Demo questions initialized: {total}")
        return total

    # ============= Attempts =============

    def _increment_attempt_count(self, question_id: str):
        """Read-modify-write; concurrent games may lose an increment (last write wins)."""
        try:
            existing = (
                self.client.table(self.QUESTIONS_TABLE)
                .select("attempt_count")
                .eq("id", question_id)
                .execute()
            )
            current = (existing.data[0].get("attempt_count") or 0) if existing.data else 0
            (
                self.client.table(self.QUESTIONS_TABLE)
                .update({"attempt_count": current + 1})
                .eq("id", question_id)
                .execute()
            )
        except Exception as e:
            raise PersistenceFailure(f"Error updating attempt count for {question_id}: {e}") from e

    def save_quiz_attempt(self, attempt: QuizAttempt) -> bool:
        """
        Record a finished game and bump attempt counts for its questions.

        Best-effort: failures are logged and never raised or retried.

        Returns:
            True if the attempt and every increment were written
        """
        if self.demo_mode:
            logger.info(f"Demo mode: quiz attempt would be saved: {attempt.to_row()}")
            return False

        try:
            self.client.table(self.ATTEMPTS_TABLE).insert(attempt.to_row()).execute()
        except Exception as e:
            logger.error(f"Error saving quiz attempt: {e}")
            return False

        ok = True
        for result in attempt.questions:
            try:
                self._increment_attempt_count(result.question_id)
            except PersistenceFailure as e:
                logger.error(str(e))
                ok = False
        return ok

    # ============= Leaderboard =============

    def fetch_leaderboard(self, limit: Optional[int] = None) -> List[LeaderboardEntry]:
        """
        All attempts sorted by points (descending), then time (ascending).
        Demo entries when Supabase is not configured or unreachable.
        """
        if self.demo_mode:
            entries = rank_leaderboard(demo_leaderboard())
        else:
            try:
                response = self.client.table(self.ATTEMPTS_TABLE).select("*").execute()
                entries = rank_leaderboard(LeaderboardEntry.from_row(r) for r in response.data or [])
            except Exception as e:
                logger.error(f"Error fetching leaderboard: {e}")
                entries = rank_leaderboard(demo_leaderboard())
        return entries[:limit] if limit else entries

    def get_question_counts(self) -> Dict[str, int]:
        """Returns {difficulty: count} for the pool sidebar; demo sizes in demo mode."""
        counts = {}
        for difficulty in DIFFICULTIES:
            counts[difficulty] = len(self.fetch_questions(difficulty))
        counts["total"] = sum(counts.values())
        return counts
