"""Supabase client and bulk question writes. Client is cached via Streamlit."""
import logging
import os

import streamlit as st
from dotenv import load_dotenv
from supabase import create_client, Client

load_dotenv()

SCHEMA_SQL = """
-- Question pools, one row per question
CREATE TABLE IF NOT EXISTS questions (
    id TEXT PRIMARY KEY,
    difficulty VARCHAR(10) NOT NULL CHECK (difficulty IN ('easy', 'medium', 'hard')),
    text TEXT NOT NULL,
    options JSONB NOT NULL,
    correct_answer_idx INT NOT NULL CHECK (correct_answer_idx BETWEEN 0 AND 3),
    attempt_count INT NOT NULL DEFAULT 0,
    source VARCHAR(50),
    created_at TIMESTAMPTZ DEFAULT NOW()
);

-- Completed games (leaderboard source)
CREATE TABLE IF NOT EXISTS quiz_attempts (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    player_name VARCHAR(30) NOT NULL,
    total_points INT NOT NULL DEFAULT 0,
    correct INT NOT NULL DEFAULT 0,
    wrong INT NOT NULL DEFAULT 0,
    total_time INT NOT NULL DEFAULT 0,
    created_at TIMESTAMPTZ DEFAULT NOW(),
    questions JSONB NOT NULL DEFAULT '[]'
);

CREATE INDEX IF NOT EXISTS idx_questions_difficulty ON questions(difficulty);
CREATE INDEX IF NOT EXISTS idx_quiz_attempts_points ON quiz_attempts(total_points DESC, total_time ASC);
"""


def is_supabase_configured() -> bool:
    return bool(os.environ.get("SUPABASE_URL") and os.environ.get("SUPABASE_KEY"))


def _env_client() -> Client:
    url = os.environ.get("SUPABASE_URL")
    key = os.environ.get("SUPABASE_KEY")
    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set")
    return create_client(url, key)


@st.cache_resource
def get_supabase() -> Client:
    return _env_client()


def get_supabase_uncached() -> Client:
    """For CLI/scripts (no Streamlit context)."""
    return _env_client()


def upsert_questions_bulk(client: Client, rows: list[dict], chunk_size: int = 200) -> int:
    """Bulk upsert into questions. Dedupes by id so no chunk has duplicates (avoids Postgres ON CONFLICT error)."""
    log = logging.getLogger(__name__)
    n_before = len(rows)
    by_id = {r["id"]: r for r in rows}
    rows = list(by_id.values())
    if len(rows) < n_before:
        log.info("Deduped questions by id: %d -> %d", n_before, len(rows))
    n_chunks = (len(rows) + chunk_size - 1) // chunk_size
    for i in range(0, len(rows), chunk_size):
        chunk = rows[i : i + chunk_size]
        chunk_num = i // chunk_size + 1
        log.info("Upserting chunk %d/%d (%d rows)", chunk_num, n_chunks, len(chunk))
        client.table("questions").upsert(chunk, on_conflict="id").execute()
    return len(rows)


def delete_questions_by_source(client: Client, source: str):
    """Delete all questions with the given source (e.g. 'demo')."""
    client.table("questions").delete().eq("source", source).execute()
