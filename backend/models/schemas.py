from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class EventStage(str, Enum):
    REGISTRATION = "registration"
    CHECKIN = "checkin"
    SUBMISSION = "submission"
    VOTING = "voting"
    AWARDS = "awards"
    ENDED = "ended"


class VoterType(str, Enum):
    JUDGE = "judge"
    SPONSOR = "sponsor"
    PUBLIC = "public"


class SponsorshipStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    DEPOSITED = "deposited"


class Event(BaseModel):
    id: int
    name: str = ""
    description: Optional[str] = None
    current_stage: EventStage = EventStage.REGISTRATION
    voting_start_time: Optional[datetime] = None
    voting_end_time: Optional[datetime] = None
    allow_sponsor_voting: bool = False
    allow_public_voting: bool = False
    organizer_address: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_row(cls, row) -> "Event":
        return cls(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            current_stage=row["current_stage"],
            voting_start_time=row["voting_start_time"],
            voting_end_time=row["voting_end_time"],
            allow_sponsor_voting=bool(row["allow_sponsor_voting"]),
            allow_public_voting=bool(row["allow_public_voting"]),
            organizer_address=row["organizer_address"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )


class Submission(BaseModel):
    id: int
    event_id: int
    title: str
    description: Optional[str] = None
    submitted_by: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row) -> "Submission":
        return cls(**dict(row))


class Sponsor(BaseModel):
    id: int
    name: str
    address: str
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row) -> "Sponsor":
        return cls(**dict(row))


class Sponsorship(BaseModel):
    id: int
    event_id: int
    sponsor_id: int
    status: SponsorshipStatus = SponsorshipStatus.PENDING
    voting_power: float = 0.0
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row) -> "Sponsorship":
        return cls(**dict(row))


class JudgeWhitelistEntry(BaseModel):
    id: int | None = Field(default=None)
    event_id: int
    address: str
    weight: float = 1.0
    max_votes: int = 100
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row) -> "JudgeWhitelistEntry":
        return cls(
            id=row["id"],
            event_id=row["event_id"],
            address=row["address"],
            weight=row["weight"],
            max_votes=row["max_votes"],
            created_at=row["created_at"],
        )


class Vote(BaseModel):
    id: int | None = Field(default=None)
    event_id: int
    submission_id: int
    voter_address: str
    voter_type: VoterType
    weight: float
    reason: Optional[str] = None
    signature: Optional[str] = None
    offchain_proof: Optional[str] = None
    created_at: Optional[str] = None
    submission: Optional[Submission] = None

    @classmethod
    def from_row(cls, row) -> "Vote":
        submission = None
        if "submission_title" in row.keys() and row["submission_title"] is not None:
            submission = Submission(
                id=row["submission_id"],
                event_id=row["submission_event_id"],
                title=row["submission_title"],
                description=row["submission_description"],
                submitted_by=row["submission_submitted_by"],
                created_at=row["submission_created_at"],
            )
        return cls(
            id=row["id"],
            event_id=row["event_id"],
            submission_id=row["submission_id"],
            voter_address=row["voter_address"],
            voter_type=row["voter_type"],
            weight=row["weight"],
            reason=row["reason"],
            signature=row["signature"],
            offchain_proof=row["offchain_proof"],
            created_at=row["created_at"],
            submission=submission,
        )


class VoteSummary(BaseModel):
    """Aggregated score of one submission; derived, never stored."""

    submission_id: int
    submission_title: str
    total_weight: float
    judge_weight: float
    sponsor_weight: float
    public_weight: float
    vote_count: int

    @classmethod
    def from_row(cls, row) -> "VoteSummary":
        return cls(**dict(row))


# --- Request payloads ---

class CastVoteRequest(BaseModel):
    event_id: int
    submission_id: int
    voter_address: str
    # Kept as a plain string so unknown classes are rejected by the vote policy, not by parsing
    voter_type: str
    reason: str = ""
    signature: str = ""
    offchain_proof: str = ""
    weight: Optional[float] = Field(default=None, allow_inf_nan=False)


class AddJudgeRequest(BaseModel):
    address: str
    weight: Optional[float] = None
    max_votes: Optional[int] = None
    organizer_address: str


class OrganizerRequest(BaseModel):
    organizer_address: str
