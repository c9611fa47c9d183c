"""Built-in questions and leaderboard used when Supabase is unconfigured or unreachable."""
from datetime import datetime, timedelta, timezone
from typing import Dict, List

from .models import LeaderboardEntry, Question

_DEMO_ROWS = {
    "easy": [
        ("e1", "What is the capital of France?", ["Berlin", "Paris", "London", "Madrid"], 1),
        ("e2", "Which planet is known as the Red Planet?", ["Venus", "Jupiter", "Mars", "Saturn"], 2),
        ("e3", "What is 2 + 2?", ["3", "4", "5", "6"], 1),
        ("e4", "What color is the sky on a clear day?", ["Green", "Red", "Blue", "Yellow"], 2),
        ("e5", "How many days are in a week?", ["5", "6", "7", "8"], 2),
        ("e6", 'What animal says "Meow"?', ["Dog", "Cat", "Cow", "Bird"], 1),
        ("e7", "What is the largest ocean on Earth?", ["Atlantic", "Indian", "Arctic", "Pacific"], 3),
        ("e8", "How many continents are there?", ["5", "6", "7", "8"], 2),
        ("e9", "What is H2O commonly known as?", ["Salt", "Water", "Sugar", "Oil"], 1),
        ("e10", "Which fruit is yellow and curved?", ["Apple", "Orange", "Banana", "Grape"], 2),
    ],
    "medium": [
        ("m1", "Who painted the Mona Lisa?", ["Van Gogh", "Picasso", "Da Vinci", "Michelangelo"], 2),
        ("m2", "What is the chemical symbol for Gold?", ["Go", "Gd", "Au", "Ag"], 2),
        ("m3", "In which year did World War II end?", ["1943", "1944", "1945", "1946"], 2),
        ("m4", "What is the square root of 144?", ["10", "11", "12", "13"], 2),
        ("m5", "Which country invented pizza?", ["France", "Italy", "Greece", "Spain"], 1),
        ("m6", "What is the hardest natural substance?", ["Gold", "Iron", "Diamond", "Platinum"], 2),
        ("m7", "How many bones are in the adult human body?", ["186", "196", "206", "216"], 2),
        ("m8", "What gas do plants absorb from the air?", ["Oxygen", "Nitrogen", "Carbon Dioxide", "Hydrogen"], 2),
        ("m9", "Which Shakespeare play features the character Hamlet?", ["Macbeth", "Hamlet", "Othello", "King Lear"], 1),
        ("m10", "What is the speed of light in km/s (approximately)?", ["100,000", "200,000", "300,000", "400,000"], 2),
    ],
    "hard": [
        ("h1", "What is the capital of Mongolia?", ["Ulaanbaatar", "Astana", "Bishkek", "Dushanbe"], 0),
        ("h2", "Who discovered Penicillin?", ["Marie Curie", "Louis Pasteur", "Alexander Fleming", "Robert Koch"], 2),
        ("h3", "What is the smallest prime number greater than 50?", ["51", "53", "57", "59"], 1),
        ("h4", "In what year was the first iPhone released?", ["2005", "2006", "2007", "2008"], 2),
        ("h5", "What is the atomic number of Carbon?", ["4", "6", "8", "12"], 1),
        ("h6", "Which planet has the most moons?", ["Jupiter", "Saturn", "Uranus", "Neptune"], 1),
        ("h7", "What is the longest river in the world?", ["Amazon", "Nile", "Yangtze", "Mississippi"], 1),
        ("h8", 'Who wrote "The Great Gatsby"?', ["Hemingway", "Fitzgerald", "Faulkner", "Steinbeck"], 1),
        ("h9", "What is the half-life of Carbon-14 in years?", ["3,730", "4,730", "5,730", "6,730"], 2),
        ("h10", "In which city was the first modern Olympic Games held?", ["Paris", "London", "Athens", "Rome"], 2),
    ],
}

# (player, points, correct, wrong, seconds, days ago)
_DEMO_LEADERBOARD = [
    ("QuizMaster Pro", 285, 15, 0, 180, 1),
    ("BrainStorm", 260, 14, 1, 195, 2),
    ("KnowledgeKing", 245, 13, 2, 210, 3),
    ("TriviaChamp", 220, 12, 3, 225, 4),
    ("QuickThinker", 195, 11, 4, 240, 5),
]


def demo_questions(difficulty: str) -> List[Question]:
    """Fresh Question objects for one tier (attempt counts start at 0)."""
    return [
        Question(id=qid, text=text, options=list(options), correct_answer_idx=idx, difficulty=difficulty)
        for qid, text, options, idx in _DEMO_ROWS[difficulty]
    ]


def all_demo_questions() -> Dict[str, List[Question]]:
    return {difficulty: demo_questions(difficulty) for difficulty in _DEMO_ROWS}


def demo_leaderboard() -> List[LeaderboardEntry]:
    now = datetime.now(timezone.utc)
    return [
        LeaderboardEntry(
            id=str(i),
            player_name=name,
            total_points=points,
            correct=correct,
            wrong=wrong,
            total_time=seconds,
            created_at=now - timedelta(days=days_ago),
        )
        for i, (name, points, correct, wrong, seconds, days_ago) in enumerate(_DEMO_LEADERBOARD, start=1)
    ]
