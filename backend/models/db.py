from __future__ import annotations

import os
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional, Sequence
from contextlib import contextmanager

from utils.address import normalize_address


DATA_DIR = Path(__file__).resolve().parents[1] / "data"

DEFAULT_DB_PATH = DATA_DIR / "app.db"

_DB_PATH: Path = Path(os.getenv("HACKATHON_DB_PATH", str(DEFAULT_DB_PATH)))


def set_db_path(path: Path | str) -> None:
    global _DB_PATH
    _DB_PATH = Path(path)
    _DB_PATH.parent.mkdir(parents=True, exist_ok=True)


def get_db_path() -> Path:
    return _DB_PATH


def _connect(path: Optional[Path] = None) -> sqlite3.Connection:
    target = Path(path) if path else get_db_path()
    target.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(target, check_same_thread=False, timeout=10)
    conn.row_factory = sqlite3.Row
    # Enforce foreign keys
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


@contextmanager
def get_connection(path: Optional[Path] = None) -> Iterator[sqlite3.Connection]:
    conn = _connect(path)
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def _ensure_schema_migrations_table(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS schema_migrations (
            version TEXT PRIMARY KEY,
            applied_at TEXT NOT NULL DEFAULT (datetime('now'))
        );
        """
    )


def _get_applied_versions(conn: sqlite3.Connection) -> set[str]:
    _ensure_schema_migrations_table(conn)
    cur = conn.execute("SELECT version FROM schema_migrations")
    return {row[0] for row in cur.fetchall()}


def _record_applied(conn: sqlite3.Connection, version: str) -> None:
    conn.execute("INSERT OR IGNORE INTO schema_migrations(version) VALUES (?)", (version,))


def _migration_files() -> Sequence[Path]:
    migrations_dir = Path(__file__).resolve().parents[1] / "migrations"
    return sorted(p for p in migrations_dir.iterdir() if p.suffix == ".sql")


def run_migrations(path: Optional[Path] = None) -> None:
    """Run pending SQL migrations found in backend/migrations/*.sql in sorted order."""
    with get_connection(path) as conn:
        applied = _get_applied_versions(conn)
        for sql_file in _migration_files():
            version = sql_file.stem
            if version in applied:
                continue
            conn.executescript(sql_file.read_text(encoding="utf-8"))
            _record_applied(conn, version)


def init_db(path: Optional[Path] = None) -> None:
    """Initialize database by running migrations. Safe to call multiple times."""
    run_migrations(path)


def is_unique_violation(exc: sqlite3.IntegrityError) -> bool:
    return "unique" in str(exc).lower()


def _to_iso(value: Optional[datetime | str]) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


# --- Events / submissions (owned by the event-management side) ---

def create_event(
    name: str,
    organizer_address: str,
    current_stage: str = "registration",
    voting_start_time: Optional[datetime | str] = None,
    voting_end_time: Optional[datetime | str] = None,
    allow_sponsor_voting: bool = False,
    allow_public_voting: bool = False,
    description: Optional[str] = None,
) -> int:
    with get_connection() as conn:
        cur = conn.execute(
            """
            INSERT INTO events(name, description, current_stage, voting_start_time, voting_end_time,
                               allow_sponsor_voting, allow_public_voting, organizer_address)
            VALUES(?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                name,
                description,
                current_stage,
                _to_iso(voting_start_time),
                _to_iso(voting_end_time),
                1 if allow_sponsor_voting else 0,
                1 if allow_public_voting else 0,
                organizer_address,
            ),
        )
        return int(cur.lastrowid)


def get_event(event_id: int) -> Optional[sqlite3.Row]:
    with get_connection() as conn:
        cur = conn.execute("SELECT * FROM events WHERE id = ?", (event_id,))
        return cur.fetchone()


def update_event_stage(event_id: int, stage: str) -> bool:
    with get_connection() as conn:
        cur = conn.execute(
            "UPDATE events SET current_stage = ?, updated_at = strftime('%Y-%m-%dT%H:%M:%fZ', 'now') WHERE id = ?",
            (stage, event_id),
        )
        return cur.rowcount > 0


def create_submission(
    event_id: int,
    title: str,
    description: Optional[str] = None,
    submitted_by: Optional[str] = None,
) -> int:
    with get_connection() as conn:
        cur = conn.execute(
            "INSERT INTO submissions(event_id, title, description, submitted_by) VALUES(?, ?, ?, ?)",
            (event_id, title, description, submitted_by),
        )
        return int(cur.lastrowid)


def get_submission(submission_id: int) -> Optional[sqlite3.Row]:
    with get_connection() as conn:
        cur = conn.execute("SELECT * FROM submissions WHERE id = ?", (submission_id,))
        return cur.fetchone()


# --- Sponsors / sponsorships ---

def create_sponsor(name: str, address: str) -> int:
    with get_connection() as conn:
        cur = conn.execute(
            "INSERT INTO sponsors(name, address) VALUES(?, ?)", (name, normalize_address(address))
        )
        return int(cur.lastrowid)


def get_sponsor_by_address(address: str) -> Optional[sqlite3.Row]:
    with get_connection() as conn:
        cur = conn.execute("SELECT * FROM sponsors WHERE address = ?", (normalize_address(address),))
        return cur.fetchone()


def create_sponsorship(
    event_id: int, sponsor_id: int, status: str = "pending", voting_power: float = 0.0
) -> int:
    with get_connection() as conn:
        cur = conn.execute(
            "INSERT INTO sponsorships(event_id, sponsor_id, status, voting_power) VALUES(?, ?, ?, ?)",
            (event_id, sponsor_id, status, voting_power),
        )
        return int(cur.lastrowid)


def list_sponsorships_by_event_and_sponsor(event_id: int, sponsor_id: int) -> list[sqlite3.Row]:
    with get_connection() as conn:
        cur = conn.execute(
            "SELECT * FROM sponsorships WHERE event_id = ? AND sponsor_id = ? ORDER BY id ASC",
            (event_id, sponsor_id),
        )
        return list(cur.fetchall())


# --- Judge whitelist ---

def add_event_judge(event_id: int, address: str, weight: float, max_votes: int) -> int:
    """Insert a whitelist row. Raises sqlite3.IntegrityError if (event_id, address) exists."""
    with get_connection() as conn:
        cur = conn.execute(
            "INSERT INTO event_judges(event_id, address, weight, max_votes) VALUES(?, ?, ?, ?)",
            (event_id, address, weight, max_votes),
        )
        return int(cur.lastrowid)


def list_event_judges(event_id: int) -> list[sqlite3.Row]:
    with get_connection() as conn:
        cur = conn.execute(
            "SELECT * FROM event_judges WHERE event_id = ? ORDER BY created_at ASC, id ASC",
            (event_id,),
        )
        return list(cur.fetchall())


def get_event_judge(judge_id: int) -> Optional[sqlite3.Row]:
    with get_connection() as conn:
        cur = conn.execute("SELECT * FROM event_judges WHERE id = ?", (judge_id,))
        return cur.fetchone()


def get_event_judge_by_address(event_id: int, address: str) -> Optional[sqlite3.Row]:
    with get_connection() as conn:
        cur = conn.execute(
            "SELECT * FROM event_judges WHERE event_id = ? AND address = ?", (event_id, address)
        )
        return cur.fetchone()


def delete_event_judge(judge_id: int) -> bool:
    with get_connection() as conn:
        cur = conn.execute("DELETE FROM event_judges WHERE id = ?", (judge_id,))
        return cur.rowcount > 0


# --- Votes ---

def insert_vote(
    event_id: int,
    submission_id: int,
    voter_address: str,
    voter_type: str,
    weight: float,
    reason: Optional[str] = None,
    signature: Optional[str] = None,
    offchain_proof: Optional[str] = None,
) -> int:
    """Append a vote. Raises sqlite3.IntegrityError on a duplicate (event, submission, voter, type)."""
    with get_connection() as conn:
        cur = conn.execute(
            """
            INSERT INTO votes(event_id, submission_id, voter_address, voter_type, weight,
                              reason, signature, offchain_proof)
            VALUES(?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (event_id, submission_id, voter_address, voter_type, weight, reason, signature, offchain_proof),
        )
        return int(cur.lastrowid)


# Vote rows carry their submission so listings need no second lookup
_VOTE_SELECT = """
    SELECT votes.*,
           submissions.event_id AS submission_event_id,
           submissions.title AS submission_title,
           submissions.description AS submission_description,
           submissions.submitted_by AS submission_submitted_by,
           submissions.created_at AS submission_created_at
    FROM votes
    LEFT JOIN submissions ON submissions.id = votes.submission_id
"""


def get_vote(vote_id: int) -> Optional[sqlite3.Row]:
    with get_connection() as conn:
        cur = conn.execute(_VOTE_SELECT + " WHERE votes.id = ?", (vote_id,))
        return cur.fetchone()


def list_votes_by_event(event_id: int) -> list[sqlite3.Row]:
    with get_connection() as conn:
        cur = conn.execute(
            _VOTE_SELECT + " WHERE votes.event_id = ? ORDER BY votes.created_at DESC, votes.id DESC",
            (event_id,),
        )
        return list(cur.fetchall())


def list_votes_by_submission(submission_id: int) -> list[sqlite3.Row]:
    with get_connection() as conn:
        cur = conn.execute(
            _VOTE_SELECT + " WHERE votes.submission_id = ? ORDER BY votes.created_at DESC, votes.id DESC",
            (submission_id,),
        )
        return list(cur.fetchall())


def delete_vote(vote_id: int) -> bool:
    with get_connection() as conn:
        cur = conn.execute("DELETE FROM votes WHERE id = ?", (vote_id,))
        return cur.rowcount > 0


def count_votes_by_event_and_voter(event_id: int, address: str, voter_type: str) -> int:
    with get_connection() as conn:
        cur = conn.execute(
            "SELECT COUNT(*) FROM votes WHERE event_id = ? AND voter_address = ? AND voter_type = ?",
            (event_id, address, voter_type),
        )
        return int(cur.fetchone()[0])


def count_votes_by_submission_and_voter(submission_id: int, address: str, voter_type: str) -> int:
    with get_connection() as conn:
        cur = conn.execute(
            "SELECT COUNT(*) FROM votes WHERE submission_id = ? AND voter_address = ? AND voter_type = ?",
            (submission_id, address, voter_type),
        )
        return int(cur.fetchone()[0])


def vote_summary_by_event(event_id: int) -> list[sqlite3.Row]:
    """Aggregate vote weights per submission, highest total first."""
    with get_connection() as conn:
        cur = conn.execute(
            """
            SELECT
                votes.submission_id AS submission_id,
                submissions.title AS submission_title,
                COALESCE(SUM(votes.weight), 0) AS total_weight,
                COALESCE(SUM(CASE WHEN votes.voter_type = 'judge' THEN votes.weight ELSE 0 END), 0) AS judge_weight,
                COALESCE(SUM(CASE WHEN votes.voter_type = 'sponsor' THEN votes.weight ELSE 0 END), 0) AS sponsor_weight,
                COALESCE(SUM(CASE WHEN votes.voter_type = 'public' THEN votes.weight ELSE 0 END), 0) AS public_weight,
                COUNT(*) AS vote_count
            FROM votes
            JOIN submissions ON submissions.id = votes.submission_id
            WHERE votes.event_id = ?
            GROUP BY votes.submission_id, submissions.title
            ORDER BY total_weight DESC, votes.submission_id ASC
            """,
            (event_id,),
        )
        return list(cur.fetchall())
