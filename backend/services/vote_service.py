"""Vote admission, weighting, ledger access and tallying."""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Callable, List, Optional

from config.voting_config import DEFAULT_PUBLIC_WEIGHT, MAX_PUBLIC_VOTES_PER_EVENT
from models.schemas import (
    AddJudgeRequest,
    CastVoteRequest,
    Event,
    EventStage,
    JudgeWhitelistEntry,
    Vote,
    VoteSummary,
    VoterType,
)
from services.errors import (
    ConflictError,
    DuplicateRecordError,
    ForbiddenError,
    InvalidInputError,
    InvalidStateError,
    LimitExceededError,
    NotFoundError,
)
from services.judge_whitelist import JudgeWhitelist
from services.ports import (
    EventStore,
    JudgeStore,
    SponsorshipStore,
    SponsorStore,
    SubmissionStore,
    VoteStore,
)
from services.sponsor_power import SponsorPowerResolver
from utils.address import normalize_address, same_address

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps are stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class VoteService:
    """Voting use cases for one deployment.

    Every check that reads past votes is advisory; the vote store's uniqueness
    constraint is what finally rejects a duplicate ballot under concurrency.
    """

    def __init__(
        self,
        votes: VoteStore,
        events: EventStore,
        submissions: SubmissionStore,
        judges: JudgeStore,
        sponsors: SponsorStore,
        sponsorships: SponsorshipStore,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.votes = votes
        self.events = events
        self.submissions = submissions
        self.whitelist = JudgeWhitelist(judges, events)
        self.sponsor_power = SponsorPowerResolver(sponsors, sponsorships)
        self.clock = clock

    # --- Casting ---

    def cast_vote(self, req: CastVoteRequest) -> Vote:
        address = normalize_address(req.voter_address)
        if not address:
            raise InvalidInputError("invalid voter address")

        event = self.events.get_event_by_id(req.event_id)
        if event is None:
            raise NotFoundError("event not found")

        self._check_voting_open(event)

        submission = self.submissions.get_submission_by_id(req.submission_id)
        if submission is None:
            raise NotFoundError("submission not found")
        if submission.event_id != event.id:
            raise InvalidInputError("submission does not belong to this event")

        weight = self._calculate_weight(req, event, address)

        vote = Vote(
            event_id=event.id,
            submission_id=submission.id,
            voter_address=address,
            voter_type=VoterType(req.voter_type),
            weight=weight,
            reason=req.reason,
            signature=req.signature,
            offchain_proof=req.offchain_proof,
        )
        try:
            created = self.votes.create(vote)
        except DuplicateRecordError:
            raise ConflictError("you already voted for this submission")

        logger.info(
            f"Accepted {created.voter_type.value} vote {created.id} from {address} "
            f"on submission {submission.id} (event {event.id}, weight {weight})"
        )
        return created

    def _check_voting_open(self, event: Event) -> None:
        if event.current_stage != EventStage.VOTING:
            raise InvalidStateError("event is not in voting stage")

        now = _as_utc(self.clock())
        if event.voting_start_time is not None and now < _as_utc(event.voting_start_time):
            raise InvalidStateError("voting has not started yet")
        if event.voting_end_time is not None and now > _as_utc(event.voting_end_time):
            raise InvalidStateError("voting has already ended")

    def _calculate_weight(self, req: CastVoteRequest, event: Event, address: str) -> float:
        if req.voter_type == VoterType.JUDGE.value:
            return self._judge_weight(event, address)
        if req.voter_type == VoterType.SPONSOR.value:
            if not event.allow_sponsor_voting:
                raise InvalidStateError("sponsor voting is disabled for this event")
            return self.sponsor_power.resolve(event.id, address)
        if req.voter_type == VoterType.PUBLIC.value:
            return self._public_weight(req, event, address)
        raise InvalidInputError("unsupported voter type")

    def _judge_weight(self, event: Event, address: str) -> float:
        try:
            judge = self.whitelist.lookup(event.id, address)
        except NotFoundError:
            logger.warning(f"Rejected judge vote from non-whitelisted {address} on event {event.id}")
            raise ForbiddenError("address is not on the judge whitelist")

        if judge.weight <= 0:
            raise InvalidStateError("judge weight must be greater than zero")

        # Judge quota spans every submission of the event
        used = self.votes.count_by_event_and_voter(event.id, address, VoterType.JUDGE.value)
        if judge.max_votes > 0 and used >= judge.max_votes:
            raise LimitExceededError(f"judge vote limit ({judge.max_votes}) reached")
        return judge.weight

    def _public_weight(self, req: CastVoteRequest, event: Event, address: str) -> float:
        if not event.allow_public_voting:
            raise InvalidStateError("public voting is disabled for this event")

        if self.votes.count_by_submission_and_voter(req.submission_id, address, VoterType.PUBLIC.value) > 0:
            raise ConflictError("public voters can only vote once per submission")

        used = self.votes.count_by_event_and_voter(event.id, address, VoterType.PUBLIC.value)
        if used >= MAX_PUBLIC_VOTES_PER_EVENT:
            raise LimitExceededError(f"public voters can only vote {MAX_PUBLIC_VOTES_PER_EVENT} times per event")

        if req.weight is not None and math.isfinite(req.weight) and req.weight > 0:
            return req.weight
        return DEFAULT_PUBLIC_WEIGHT

    # --- Ledger ---

    def list_votes_by_event(self, event_id: int) -> List[Vote]:
        return self.votes.list_by_event(event_id)

    def list_votes_by_submission(self, submission_id: int) -> List[Vote]:
        return self.votes.list_by_submission(submission_id)

    def get_vote(self, vote_id: int) -> Vote:
        vote = self.votes.get_by_id(vote_id)
        if vote is None:
            raise NotFoundError("vote not found")
        return vote

    def delete_vote(self, vote_id: int, organizer_address: Optional[str]) -> None:
        vote = self.get_vote(vote_id)

        event = self.events.get_event_by_id(vote.event_id)
        if event is None:
            raise NotFoundError("event not found")
        if not same_address(event.organizer_address, organizer_address):
            logger.warning(f"Rejected deletion of vote {vote_id} by non-organizer {normalize_address(organizer_address)!r}")
            raise ForbiddenError("only the organizer can delete votes")

        self.votes.delete(vote_id)
        logger.info(f"Deleted vote {vote_id} on event {event.id}")

    # --- Tally ---

    def get_event_summary(self, event_id: int) -> List[VoteSummary]:
        return self.votes.summary_by_event(event_id)

    # --- Judges ---

    def add_judge(self, event_id: int, req: AddJudgeRequest) -> JudgeWhitelistEntry:
        return self.whitelist.add_judge(event_id, req)

    def list_judges(self, event_id: int) -> List[JudgeWhitelistEntry]:
        return self.whitelist.list_judges(event_id)

    def remove_judge(self, event_id: int, judge_id: int, organizer_address: str) -> None:
        self.whitelist.remove_judge(event_id, judge_id, organizer_address)
