"""Pure quiz constants: tiers, timers, points, 70/30 selection split. No UI."""
# Points for a correct answer = base + max(0, (timer - seconds taken) * bonus)
# Hard questions have no timer and no bonus.

DIFFICULTIES = ("easy", "medium", "hard")
QUESTIONS_PER_DIFFICULTY = 5

TIMERS = {"easy": 45, "medium": 60, "hard": None}
POINTS = {"easy": 10, "medium": 20, "hard": 40}
BONUS_MULTIPLIER = {"easy": 0.2, "medium": 0.15, "hard": 0}

LEAST_ATTEMPTED_RATIO = 0.7
UNDER_EXPOSED_FRACTION = 0.5

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 30

TIMER_WARNING_SECONDS = 10
TIMER_DANGER_SECONDS = 5
