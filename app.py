"""Quiz Master: fifteen questions, three tiers, one strike."""
import sys
from pathlib import Path

# Ensure project root is in path
project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import streamlit as st

from db import get_supabase, is_supabase_configured
from engine import NAME_MAX_LENGTH, POINTS, TIMERS
from quizmaster.config import DEFAULT_CONFIG, setup_logging
from quizmaster.database import DatabaseClient
from quizmaster.engine import format_duration
from quizmaster.errors import InvalidArgument
from quizmaster.session import GameSession, timer_urgency

setup_logging()


@st.cache_resource
def get_database() -> DatabaseClient:
    return DatabaseClient(get_supabase() if is_supabase_configured() else None)


@st.cache_data(ttl=60)
def get_pool_counts(_database: DatabaseClient) -> dict:
    return _database.get_question_counts()


st.set_page_config(page_title="Quiz Master", layout="centered")
st.sidebar.title("Quiz Master")
default_page = st.query_params.get("page", "Play")
if default_page not in ("Play", "Leaderboard"):
    default_page = "Play"
page = st.sidebar.radio("Navigate", ["Play", "Leaderboard"], index=["Play", "Leaderboard"].index(default_page), label_visibility="collapsed")

database = get_database()
if database.demo_mode:
    st.sidebar.warning("Demo Mode: Supabase is not configured. Using demo questions.")
counts = get_pool_counts(database)
st.sidebar.caption(
    f"Question pool: {counts['easy']} easy · {counts['medium']} medium · {counts['hard']} hard"
)

if "game" not in st.session_state:
    st.session_state["game"] = GameSession(database)
game: GameSession = st.session_state["game"]

# ----- Play -----
if page == "Play":
    st.header("Quiz Master")

    if game.status == GameSession.IDLE:
        st.caption(
            f"{DEFAULT_CONFIG.total_questions} questions · easy {POINTS['easy']} pts ({TIMERS['easy']}s) · "
            f"medium {POINTS['medium']} pts ({TIMERS['medium']}s) · hard {POINTS['hard']} pts (no timer) · "
            "one wrong answer ends the game"
        )
        name = st.text_input("Your name", max_chars=NAME_MAX_LENGTH, placeholder="Enter your name...")
        if st.button("Start", type="primary"):
            try:
                with st.spinner("Preparing your quiz..."):
                    game.start(name)
                st.rerun()
            except InvalidArgument as e:
                st.error(str(e))
        st.stop()

    if game.is_over:
        summary = game.get_summary()
        st.subheader(summary["title"])
        st.caption(summary["subtitle"])
        col1, col2, col3, col4 = st.columns(4)
        col1.metric("Correct", summary["correct"])
        col2.metric("Points", summary["total_points"])
        col3.metric("Time", format_duration(summary["total_time"]))
        col4.metric("Accuracy", f"{summary['accuracy_percent']}%")
        for i, result in enumerate(game.results, start=1):
            mark = "✓" if result.correct else "✗"
            pts = f"+{result.points_earned}" if result.correct else "0"
            st.write(f"{mark} Q{i} [{result.difficulty}] · {result.time_taken}s · {pts} pts")
        if game.results and not game.results[-1].correct:
            last = game.questions[len(game.results) - 1]
            st.error(f"The correct answer was: {last.options[last.correct_answer_idx]}")
        if st.button("Play again"):
            game.reset()
            st.rerun()
        st.stop()

    # Expiry is applied before any click on this run is looked at
    remaining = game.tick()
    if game.is_over:
        st.rerun()

    q = game.current_question
    if q is None:
        # Loading was interrupted; start over
        game.reset()
        st.rerun()
    idx = game.current_question_idx
    n = len(game.questions)
    st.sidebar.metric("Points", game.total_points)
    st.sidebar.progress(idx / n if n else 0)
    st.sidebar.caption(f"Question {idx + 1}/{n}")

    st.subheader(f"Question {idx + 1} of {n} · {q.difficulty.upper()}")
    if remaining is None:
        st.caption("No timer")
    else:
        level = timer_urgency(remaining)
        label = f"Time left: {remaining}s"
        if level == "danger":
            st.error(label)
        elif level == "warning":
            st.warning(label)
        else:
            st.info(label)
    st.write(q.text)

    option_labels = "ABCD"
    for i, option in enumerate(q.options):
        if st.button(f"{option_labels[i]}. {option}", key=f"q_{idx}_{q.id}_{i}", use_container_width=True):
            game.submit_answer(i)
            st.rerun()

# ----- Leaderboard -----
elif page == "Leaderboard":
    st.header("Leaderboard")
    entries = database.fetch_leaderboard()
    if not entries:
        st.info("No games played yet.")
    rows = [
        {
            "Rank": rank,
            "Player": e.player_name,
            "Points": e.total_points,
            "Correct": f"{e.correct}/{DEFAULT_CONFIG.total_questions}",
            "Time": format_duration(e.total_time),
            "Date": e.created_at.strftime("%b %d, %Y") if e.created_at else "",
        }
        for rank, e in enumerate(entries, start=1)
    ]
    if rows:
        st.subheader("Top 10 Champions")
        st.table(rows[:10])
        if len(rows) > 10:
            st.subheader("All Players")
            st.table(rows[10:])
