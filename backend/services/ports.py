"""Storage interfaces the voting services depend on.

Implementations are passed in through constructors; see models/repositories.py
for the SQLite-backed ones.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from models.schemas import (
    Event,
    JudgeWhitelistEntry,
    Sponsor,
    Sponsorship,
    Submission,
    Vote,
    VoteSummary,
)


class EventStore(Protocol):
    def get_event_by_id(self, event_id: int) -> Optional[Event]: ...


class SubmissionStore(Protocol):
    def get_submission_by_id(self, submission_id: int) -> Optional[Submission]: ...


class SponsorStore(Protocol):
    def get_sponsor_by_address(self, address: str) -> Optional[Sponsor]: ...


class SponsorshipStore(Protocol):
    def get_sponsorships_by_event_and_sponsor(self, event_id: int, sponsor_id: int) -> List[Sponsorship]: ...


class JudgeStore(Protocol):
    """Judge whitelist rows; ``create`` raises DuplicateRecordError on (event, address) reuse."""

    def create(self, entry: JudgeWhitelistEntry) -> JudgeWhitelistEntry: ...

    def list_by_event(self, event_id: int) -> List[JudgeWhitelistEntry]: ...

    def get_by_event_and_address(self, event_id: int, address: str) -> Optional[JudgeWhitelistEntry]: ...

    def get_by_id(self, judge_id: int) -> Optional[JudgeWhitelistEntry]: ...

    def delete(self, judge_id: int) -> bool: ...


class VoteStore(Protocol):
    """Append-only vote ledger; ``create`` raises DuplicateRecordError on a repeated ballot."""

    def create(self, vote: Vote) -> Vote: ...

    def get_by_id(self, vote_id: int) -> Optional[Vote]: ...

    def list_by_event(self, event_id: int) -> List[Vote]: ...

    def list_by_submission(self, submission_id: int) -> List[Vote]: ...

    def delete(self, vote_id: int) -> bool: ...

    def count_by_event_and_voter(self, event_id: int, address: str, voter_type: str) -> int: ...

    def count_by_submission_and_voter(self, submission_id: int, address: str, voter_type: str) -> int: ...

    def summary_by_event(self, event_id: int) -> List[VoteSummary]: ...
