"""
Selection and scoring tests: size, uniqueness, subset, exposure bias,
time-bonus scoring and results helpers.
"""
import logging
import random
from collections import Counter
from dataclasses import FrozenInstanceError

import pytest

from quizmaster.config import DEFAULT_CONFIG, GameConfiguration
from quizmaster.demo_data import demo_questions
from quizmaster.engine import (
    calculate_points,
    format_duration,
    rank_leaderboard,
    round_half_up,
    select_questions,
    summarize_results,
)
from quizmaster.errors import InvalidArgument
from quizmaster.models import LeaderboardEntry, Question, QuestionResult


def make_pool(attempt_counts, difficulty="easy", prefix="q"):
    return [
        Question(
            id=f"{prefix}{i}",
            text=f"Question {i}?",
            options=["a", "b", "c", "d"],
            correct_answer_idx=i % 4,
            difficulty=difficulty,
            attempt_count=count,
        )
        for i, count in enumerate(attempt_counts)
    ]


# ============= Selection =============

def test_selection_size_uniqueness_and_subset():
    rng = random.Random(42)
    for n in range(0, 16):
        pool = make_pool([i % 3 for i in range(n)])
        pool_ids = {q.id for q in pool}
        for count in range(0, 12):
            selected = select_questions(pool, count, rng=rng)
            ids = [q.id for q in selected]
            assert len(selected) == min(count, n)
            assert len(set(ids)) == len(ids)
            assert set(ids) <= pool_ids


def test_ten_fresh_easy_questions_pick_five_distinct():
    pool = demo_questions("easy")
    selected = select_questions(pool, 5, rng=random.Random(1))
    assert len(selected) == 5
    assert len({q.id for q in selected}) == 5
    assert {q.id for q in selected} <= {q.id for q in pool}


def test_selection_is_shuffled_across_runs():
    pool = demo_questions("medium")
    orders = {tuple(q.id for q in select_questions(pool, 5, rng=random.Random(seed))) for seed in range(20)}
    assert len(orders) > 1


def test_small_pool_returned_whole_in_pool_order():
    pool = make_pool([5, 0, 3])
    selected = select_questions(pool, 5, rng=random.Random(0))
    assert [q.id for q in selected] == ["q0", "q1", "q2"]
    assert selected is not pool


def test_pool_equal_to_count_returned_whole():
    pool = make_pool([1, 2, 3, 4, 5])
    assert [q.id for q in select_questions(pool, 5)] == [q.id for q in pool]


def test_empty_pool_yields_empty_selection():
    assert select_questions([], 5) == []


def test_zero_count_yields_empty_selection():
    assert select_questions(make_pool([0] * 6), 0, rng=random.Random(3)) == []


def test_negative_count_is_invalid():
    with pytest.raises(InvalidArgument):
        select_questions(make_pool([0] * 6), -1)
    with pytest.raises(ValueError):
        select_questions([], -3)


def test_seeded_rng_gives_reproducible_selection():
    pool = demo_questions("hard")
    first = [q.id for q in select_questions(pool, 5, rng=random.Random(99))]
    second = [q.id for q in select_questions(pool, 5, rng=random.Random(99))]
    assert first == second


def test_least_attempted_quota_always_met():
    # 10 fresh + 10 stale; the under-exposed half is exactly the fresh ten
    pool = make_pool([0] * 10, prefix="new") + make_pool([100] * 10, prefix="old")
    rng = random.Random(7)
    for _ in range(200):
        selected = select_questions(pool, 5, rng=rng)
        fresh = sum(1 for q in selected if q.attempt_count == 0)
        assert fresh >= 3


def test_fresh_questions_selected_more_often():
    pool = make_pool([100] * 10, prefix="old") + make_pool([0] * 10, prefix="new")
    rng = random.Random(2024)
    counts = Counter()
    for _ in range(500):
        for q in select_questions(pool, 5, rng=rng):
            counts["fresh" if q.attempt_count == 0 else "stale"] += 1
    assert counts["fresh"] > 2 * counts["stale"]


def test_under_exposed_set_exhausted_then_rest_drawn_from_pool():
    # count 9 of 10: quota is 6 but only 5 are under-exposed
    pool = make_pool(list(range(10)))
    selected = select_questions(pool, 9, rng=random.Random(5))
    ids = {q.id for q in selected}
    assert len(ids) == 9
    assert {"q0", "q1", "q2", "q3", "q4"} <= ids


def test_selection_log_reports_actual_under_exposed_draw(caplog):
    pool = make_pool(list(range(10)))
    with caplog.at_level(logging.DEBUG, logger="quizmaster.engine"):
        select_questions(pool, 9, rng=random.Random(5))
    assert "Selected 9/10 questions (5 from 5 least attempted)" in caplog.text


def test_ties_broken_by_pool_order():
    # All equal counts: the under-exposed set is the first half of the pool
    pool = make_pool([0] * 10)
    rng = random.Random(11)
    for _ in range(50):
        selected = select_questions(pool, 5, rng=rng)
        first_half = sum(1 for q in selected if int(q.id[1:]) < 5)
        assert first_half >= 3


# ============= Scoring =============

def test_easy_scoring_examples():
    assert calculate_points("easy", 0) == 19
    assert calculate_points("easy", 45) == 10
    assert calculate_points("easy", 60) == 10


def test_medium_half_point_rounds_up():
    # 20 + (60 - 30) * 0.15 = 24.5
    assert calculate_points("medium", 30) == 25


def test_easy_bonus_mid_range():
    assert calculate_points("easy", 5) == 18
    assert calculate_points("easy", 42) == 11


@pytest.mark.parametrize("difficulty", ["easy", "medium"])
def test_faster_answers_never_score_less(difficulty):
    scores = [calculate_points(difficulty, t) for t in range(0, 90)]
    assert all(a >= b for a, b in zip(scores, scores[1:]))


@pytest.mark.parametrize("difficulty", ["easy", "medium", "hard"])
def test_bonus_floors_at_zero(difficulty):
    max_time = DEFAULT_CONFIG.timers[difficulty] or 0
    for t in range(max_time, max_time + 30):
        assert calculate_points(difficulty, t) == DEFAULT_CONFIG.points[difficulty]
    for t in range(0, 120):
        assert calculate_points(difficulty, t) >= 0


def test_untimed_tier_always_base_points():
    for t in (0, 1, 59, 60, 600, 10_000):
        assert calculate_points("hard", t) == 40


def test_scoring_is_deterministic():
    assert {calculate_points("medium", 17) for _ in range(20)} == {calculate_points("medium", 17)}


def test_negative_time_is_invalid():
    with pytest.raises(InvalidArgument):
        calculate_points("easy", -1)


def test_unknown_difficulty_is_invalid():
    with pytest.raises(InvalidArgument):
        calculate_points("legendary", 3)


def test_scoring_with_alternate_configuration():
    config = GameConfiguration(
        timers={"easy": 10, "medium": 60, "hard": 30},
        points={"easy": 10, "medium": 20, "hard": 40},
        bonus_multiplier={"easy": 1, "medium": 0.15, "hard": 0.5},
    )
    assert calculate_points("easy", 0, config) == 20
    assert calculate_points("hard", 0, config) == 55
    assert calculate_points("hard", 31, config) == 40
    # The default configuration is untouched
    assert calculate_points("hard", 0) == 40


def test_configuration_is_immutable():
    with pytest.raises(FrozenInstanceError):
        DEFAULT_CONFIG.questions_per_difficulty = 10
    with pytest.raises(TypeError):
        DEFAULT_CONFIG.points["easy"] = 1000
    assert DEFAULT_CONFIG.total_questions == 15


def test_round_half_up():
    assert round_half_up(24.5) == 25
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2


# ============= Helpers =============


def _results(n_correct, n_wrong=0):
    results = [QuestionResult(f"q{i}", "easy", True, 3, 10) for i in range(n_correct)]
    results += [QuestionResult(f"w{i}", "easy", False, 3, 0) for i in range(n_wrong)]
    return results


def test_summary_perfect_game():
    summary = summarize_results(_results(15), 15)
    assert summary["title"] == "PERFECT GAME!"
    assert summary["perfect"] is True
    assert summary["total_points"] == 150
    assert summary["accuracy_percent"] == 100


@pytest.mark.parametrize("correct, title", [
    (12, "EXCELLENT!"),
    (8, "GREAT JOB!"),
    (7, "GOOD TRY!"),
    (4, "GAME OVER"),
])
def test_summary_performance_titles(correct, title):
    summary = summarize_results(_results(correct, 1), 15)
    assert summary["title"] == title
    assert summary["wrong"] == 1


def test_summary_accuracy_rounds_half_up():
    summary = summarize_results(_results(7, 1), 15)
    assert summary["accuracy_percent"] == 88


def test_summary_of_no_results():
    summary = summarize_results([], 15)
    assert summary["accuracy_percent"] == 0
    assert summary["title"] == "GAME OVER"


def test_leaderboard_ranked_by_points_then_time():
    entries = [
        LeaderboardEntry("a", "Slow", 100, 5, 1, 300),
        LeaderboardEntry("b", "Top", 200, 10, 1, 400),
        LeaderboardEntry("c", "Fast", 100, 5, 1, 120),
    ]
    assert [e.player_name for e in rank_leaderboard(entries)] == ["Top", "Fast", "Slow"]


def test_format_duration():
    assert format_duration(0) == "0:00"
    assert format_duration(185) == "3:05"
    assert format_duration(600) == "10:00"
