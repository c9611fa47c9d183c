"""Ingest .jsonl trivia questions into Supabase, or seed the built-in demo pools."""
import json
import argparse
import logging
from pathlib import Path
from uuid import uuid5, NAMESPACE_DNS

from db import SCHEMA_SQL, get_supabase_uncached, upsert_questions_bulk, delete_questions_by_source
from engine import DIFFICULTIES
from quizmaster.config import setup_logging
from quizmaster.database import DatabaseClient
from quizmaster.errors import InvalidArgument
from quizmaster.models import Question

DIFFICULTY_ALIASES = {
    "e": "easy", "beginner": "easy", "1": "easy",
    "m": "medium", "intermediate": "medium", "2": "medium",
    "h": "hard", "expert": "hard", "3": "hard",
}


def normalize_difficulty(value) -> str | None:
    d = str(value or "").strip().lower()
    d = DIFFICULTY_ALIASES.get(d, d)
    return d if d in DIFFICULTIES else None


def parse_line(line: str, source: str = "import") -> dict | None:
    """Parse one JSONL line into a questions row. Returns None if invalid/skip."""
    line = line.strip()
    if not line:
        return None
    try:
        raw = json.loads(line)
    except json.JSONDecodeError:
        return None
    if not isinstance(raw, dict):
        return None
    text = (raw.get("question") or raw.get("text") or "").strip()
    difficulty = normalize_difficulty(raw.get("difficulty"))
    if not text or not difficulty:
        return None
    options = raw.get("options")
    if not isinstance(options, list):
        return None
    correct_option = raw.get("correct_option", raw.get("correct_answer_idx"))
    if not isinstance(correct_option, int) or isinstance(correct_option, bool):
        return None

    # Stable id from the source id, or from the text when there is none
    source_id = raw.get("id") or raw.get("question_id") or text
    try:
        question = Question(
            id=str(uuid5(NAMESPACE_DNS, f"{source}:{source_id}")),
            text=text,
            options=[str(o) for o in options],
            correct_answer_idx=correct_option,
            difficulty=difficulty,
        )
    except InvalidArgument:
        return None
    row = question.to_row()
    row["source"] = source
    return row


def load_and_transform(path: Path, source: str = "import"):
    """Read JSONL and yield transformed question rows."""
    with path.open("r", encoding="utf-8") as f:
        for line in f:
            row = parse_line(line, source=source)
            if row:
                yield row


def run_import(jsonl_path: Path, chunk_size: int = 200, dry_run: bool = False, replace: bool = False,
               source: str = "import"):
    if not jsonl_path.exists():
        raise FileNotFoundError(f"JSONL not found: {jsonl_path}")
    rows = list(load_and_transform(jsonl_path, source=source))
    if dry_run:
        print(f"Dry run: would upsert {len(rows)} questions from {jsonl_path}")
        for d in DIFFICULTIES:
            print(f"  {d}: {sum(1 for r in rows if r['difficulty'] == d)}")
        if rows:
            print("Sample row:", rows[0])
        return len(rows)
    client = get_supabase_uncached()
    if replace:
        delete_questions_by_source(client, source)
        print(f"Deleted existing '{source}' questions")
    total = upsert_questions_bulk(client, rows, chunk_size=chunk_size)
    print(f"Upserted {total} questions from {jsonl_path}")
    return total


def main(argv=None):
    parser = argparse.ArgumentParser(description="Import trivia questions into Supabase.")
    parser.add_argument("jsonl", nargs="?", default=None, help="Path to .jsonl of questions")
    parser.add_argument("--demo", action="store_true", help="Seed the built-in demo questions (10 per tier)")
    parser.add_argument("--schema", action="store_true", help="Print the SQL to run in the Supabase SQL Editor")
    parser.add_argument("--source", default="import", help="Source tag stored with imported rows (default 'import')")
    parser.add_argument("--chunk-size", type=int, default=200, help="Upsert chunk size (default 200)")
    parser.add_argument("--dry-run", action="store_true", help="Parse only, do not upsert")
    parser.add_argument("--replace", action="store_true", help="Delete existing questions with this source, then upsert")
    args = parser.parse_args(argv)

    if args.schema:
        print(SCHEMA_SQL)
        return 0
    if args.demo:
        total = DatabaseClient(get_supabase_uncached()).initialize_demo_questions(chunk_size=args.chunk_size)
        print(f"Seeded {total} demo questions")
        return 0
    if not args.jsonl:
        parser.error("a JSONL path, --demo or --schema is required")
    run_import(Path(args.jsonl), chunk_size=args.chunk_size, dry_run=args.dry_run,
               replace=args.replace, source=args.source)
    return 0


if __name__ == "__main__":
    setup_logging()
    raise SystemExit(main())
