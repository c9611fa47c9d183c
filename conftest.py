import pytest

from quizmaster.demo_data import demo_questions
from quizmaster.engine import select_questions


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeDatabase:
    """In-memory stand-in for DatabaseClient."""

    def __init__(self, save_error: Exception = None, pool_for=demo_questions):
        self.pool_for = pool_for
        self.fetch_calls = []
        self.saved = []
        self.save_error = save_error

    def fetch_tier(self, difficulty, count, rng=None):
        self.fetch_calls.append((difficulty, count))
        return select_questions(self.pool_for(difficulty), count, rng=rng)

    def save_quiz_attempt(self, attempt):
        if self.save_error is not None:
            raise self.save_error
        self.saved.append(attempt)
        return True


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def fake_db():
    return FakeDatabase()


@pytest.fixture()
def fake_db_factory():
    return FakeDatabase


@pytest.fixture()
def no_supabase_env(monkeypatch):
    monkeypatch.delenv("SUPABASE_URL", raising=False)
    monkeypatch.delenv("SUPABASE_KEY", raising=False)
