"""Per-event judge whitelist management."""

from __future__ import annotations

import logging
from typing import List

from config.voting_config import DEFAULT_JUDGE_MAX_VOTES, DEFAULT_JUDGE_WEIGHT
from models.schemas import AddJudgeRequest, Event, JudgeWhitelistEntry
from services.errors import (
    DuplicateRecordError,
    ConflictError,
    InvalidInputError,
    NotFoundError,
    UnauthorizedError,
)
from services.ports import EventStore, JudgeStore
from utils.address import normalize_address, same_address

logger = logging.getLogger(__name__)


class JudgeWhitelist:
    """Organizer-managed allow-list mapping a judge address to a weight and a vote quota."""

    def __init__(self, judges: JudgeStore, events: EventStore):
        self.judges = judges
        self.events = events

    def _load_event_as_organizer(self, event_id: int, organizer_address: str) -> Event:
        event = self.events.get_event_by_id(event_id)
        if event is None:
            raise NotFoundError("event not found")
        if not same_address(event.organizer_address, organizer_address):
            logger.warning(f"Rejected judge change on event {event_id} by non-organizer {normalize_address(organizer_address)!r}")
            raise UnauthorizedError("only the organizer can manage judges")
        return event

    def add_judge(self, event_id: int, req: AddJudgeRequest) -> JudgeWhitelistEntry:
        self._load_event_as_organizer(event_id, req.organizer_address)

        address = normalize_address(req.address)
        if not address:
            raise InvalidInputError("invalid address")

        weight = req.weight if req.weight is not None and req.weight > 0 else DEFAULT_JUDGE_WEIGHT
        max_votes = req.max_votes if req.max_votes is not None and req.max_votes > 0 else DEFAULT_JUDGE_MAX_VOTES

        entry = JudgeWhitelistEntry(event_id=event_id, address=address, weight=weight, max_votes=max_votes)
        try:
            created = self.judges.create(entry)
        except DuplicateRecordError:
            raise ConflictError("address already exists in judge whitelist")
        logger.info(f"Added judge {address} to event {event_id} (weight={weight}, max_votes={max_votes})")
        return created

    def list_judges(self, event_id: int) -> List[JudgeWhitelistEntry]:
        return self.judges.list_by_event(event_id)

    def remove_judge(self, event_id: int, judge_id: int, organizer_address: str) -> None:
        self._load_event_as_organizer(event_id, organizer_address)

        judge = self.judges.get_by_id(judge_id)
        if judge is None:
            raise NotFoundError("judge not found")
        if judge.event_id != event_id:
            raise NotFoundError("judge does not belong to this event")

        self.judges.delete(judge_id)
        logger.info(f"Removed judge {judge.address} from event {event_id}")

    def lookup(self, event_id: int, address: str) -> JudgeWhitelistEntry:
        entry = self.judges.get_by_event_and_address(event_id, normalize_address(address))
        if entry is None:
            raise NotFoundError("address is not on the judge whitelist")
        return entry
