"""
Core data records for the quiz: questions, per-question results, completed
attempts and leaderboard rows. Rows are the plain dicts Supabase returns.
"""
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Dict, List, Optional

from engine import DIFFICULTIES
from .errors import InvalidArgument

OPTIONS_PER_QUESTION = 4


def _parse_timestamp(value) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)):
        # Epoch milliseconds
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


@dataclass
class Question:
    """A multiple-choice question belonging to one difficulty tier."""
    id: str
    text: str
    options: List[str]
    correct_answer_idx: int
    difficulty: str
    attempt_count: int = 0

    def __post_init__(self):
        if self.difficulty not in DIFFICULTIES:
            raise InvalidArgument(f"Unknown difficulty: {self.difficulty!r}")
        if len(self.options) != OPTIONS_PER_QUESTION:
            raise InvalidArgument(
                f"Question {self.id} needs {OPTIONS_PER_QUESTION} options, got {len(self.options)}"
            )
        if not 0 <= self.correct_answer_idx < len(self.options):
            raise InvalidArgument(f"Question {self.id}: correct_answer_idx out of range")
        if self.attempt_count < 0:
            raise InvalidArgument(f"Question {self.id}: attempt_count must be >= 0")

    @classmethod
    def from_row(cls, row: Dict, difficulty: Optional[str] = None) -> "Question":
        return cls(
            id=str(row["id"]),
            text=row.get("text") or row.get("question") or "",
            options=list(row.get("options") or []),
            correct_answer_idx=int(row.get("correct_answer_idx", row.get("correctAnswer", 0))),
            difficulty=difficulty or row.get("difficulty"),
            attempt_count=int(row.get("attempt_count") or 0),
        )

    def to_row(self) -> Dict:
        return asdict(self)

    def is_correct(self, option_idx: Optional[int]) -> bool:
        return option_idx is not None and option_idx == self.correct_answer_idx


@dataclass(frozen=True)
class QuestionResult:
    """Outcome of one answered (or timed-out) question."""
    question_id: str
    difficulty: str
    correct: bool
    time_taken: int
    points_earned: int

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class QuizAttempt:
    """A finished game, handed to persistence once."""
    player_name: str
    total_points: int
    correct: int
    wrong: int
    total_time: int
    created_at: datetime
    questions: List[QuestionResult] = field(default_factory=list)

    @classmethod
    def from_results(cls, player_name: str, results: List[QuestionResult], total_time: int,
                     created_at: Optional[datetime] = None) -> "QuizAttempt":
        correct = sum(1 for r in results if r.correct)
        return cls(
            player_name=player_name,
            total_points=sum(r.points_earned for r in results),
            correct=correct,
            wrong=len(results) - correct,
            total_time=total_time,
            created_at=created_at or datetime.now(timezone.utc),
            questions=list(results),
        )

    def to_row(self) -> Dict:
        return {
            "player_name": self.player_name,
            "total_points": self.total_points,
            "correct": self.correct,
            "wrong": self.wrong,
            "total_time": self.total_time,
            "created_at": self.created_at.isoformat(),
            "questions": [r.to_dict() for r in self.questions],
        }


@dataclass
class LeaderboardEntry:
    id: str
    player_name: str
    total_points: int
    correct: int
    wrong: int
    total_time: int
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Dict) -> "LeaderboardEntry":
        return cls(
            id=str(row.get("id", "")),
            player_name=row.get("player_name") or "",
            total_points=int(row.get("total_points") or 0),
            correct=int(row.get("correct") or 0),
            wrong=int(row.get("wrong") or 0),
            total_time=int(row.get("total_time") or 0),
            created_at=_parse_timestamp(row.get("created_at")),
        )
