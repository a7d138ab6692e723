"""SQLite-backed implementations of the voting store ports."""

from __future__ import annotations

import sqlite3
from typing import List, Optional

from models import db
from models.schemas import (
    Event,
    JudgeWhitelistEntry,
    Sponsor,
    Sponsorship,
    Submission,
    Vote,
    VoteSummary,
)
from services.errors import DuplicateRecordError


class SQLiteEventStore:
    def get_event_by_id(self, event_id: int) -> Optional[Event]:
        row = db.get_event(event_id)
        return Event.from_row(row) if row else None


class SQLiteSubmissionStore:
    def get_submission_by_id(self, submission_id: int) -> Optional[Submission]:
        row = db.get_submission(submission_id)
        return Submission.from_row(row) if row else None


class SQLiteSponsorStore:
    def get_sponsor_by_address(self, address: str) -> Optional[Sponsor]:
        row = db.get_sponsor_by_address(address)
        return Sponsor.from_row(row) if row else None


class SQLiteSponsorshipStore:
    def get_sponsorships_by_event_and_sponsor(self, event_id: int, sponsor_id: int) -> List[Sponsorship]:
        return [Sponsorship.from_row(r) for r in db.list_sponsorships_by_event_and_sponsor(event_id, sponsor_id)]


class SQLiteJudgeStore:
    def create(self, entry: JudgeWhitelistEntry) -> JudgeWhitelistEntry:
        try:
            judge_id = db.add_event_judge(entry.event_id, entry.address, entry.weight, entry.max_votes)
        except sqlite3.IntegrityError as e:
            if db.is_unique_violation(e):
                raise DuplicateRecordError(str(e)) from e
            raise
        return JudgeWhitelistEntry.from_row(db.get_event_judge(judge_id))

    def list_by_event(self, event_id: int) -> List[JudgeWhitelistEntry]:
        return [JudgeWhitelistEntry.from_row(r) for r in db.list_event_judges(event_id)]

    def get_by_event_and_address(self, event_id: int, address: str) -> Optional[JudgeWhitelistEntry]:
        row = db.get_event_judge_by_address(event_id, address)
        return JudgeWhitelistEntry.from_row(row) if row else None

    def get_by_id(self, judge_id: int) -> Optional[JudgeWhitelistEntry]:
        row = db.get_event_judge(judge_id)
        return JudgeWhitelistEntry.from_row(row) if row else None

    def delete(self, judge_id: int) -> bool:
        return db.delete_event_judge(judge_id)


class SQLiteVoteStore:
    def create(self, vote: Vote) -> Vote:
        try:
            vote_id = db.insert_vote(
                event_id=vote.event_id,
                submission_id=vote.submission_id,
                voter_address=vote.voter_address,
                voter_type=vote.voter_type.value,
                weight=vote.weight,
                reason=vote.reason,
                signature=vote.signature,
                offchain_proof=vote.offchain_proof,
            )
        except sqlite3.IntegrityError as e:
            if db.is_unique_violation(e):
                raise DuplicateRecordError(str(e)) from e
            raise
        return Vote.from_row(db.get_vote(vote_id))

    def get_by_id(self, vote_id: int) -> Optional[Vote]:
        row = db.get_vote(vote_id)
        return Vote.from_row(row) if row else None

    def list_by_event(self, event_id: int) -> List[Vote]:
        return [Vote.from_row(r) for r in db.list_votes_by_event(event_id)]

    def list_by_submission(self, submission_id: int) -> List[Vote]:
        return [Vote.from_row(r) for r in db.list_votes_by_submission(submission_id)]

    def delete(self, vote_id: int) -> bool:
        return db.delete_vote(vote_id)

    def count_by_event_and_voter(self, event_id: int, address: str, voter_type: str) -> int:
        return db.count_votes_by_event_and_voter(event_id, address, voter_type)

    def count_by_submission_and_voter(self, submission_id: int, address: str, voter_type: str) -> int:
        return db.count_votes_by_submission_and_voter(submission_id, address, voter_type)

    def summary_by_event(self, event_id: int) -> List[VoteSummary]:
        return [VoteSummary.from_row(r) for r in db.vote_summary_by_event(event_id)]
