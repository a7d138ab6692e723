from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import threading

import pytest

from models.db import set_db_path, init_db, create_event, create_submission, list_votes_by_submission
from models.schemas import AddJudgeRequest, CastVoteRequest
from services.errors import ConflictError
from api.common import get_vote_service


WORKERS = 8


@pytest.fixture
def voting_event(tmp_path):
    set_db_path(tmp_path / "race.db")
    init_db()
    eid = create_event("Race", "0xOrg", current_stage="voting", allow_public_voting=True)
    sid = create_submission(eid, "Contended")
    return eid, sid


def _race(fn):
    """Run fn concurrently on WORKERS threads released together; return (successes, errors)."""
    barrier = threading.Barrier(WORKERS)

    def attempt(_):
        barrier.wait()
        try:
            return fn(), None
        except ConflictError as e:
            return None, e

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        results = list(pool.map(attempt, range(WORKERS)))
    return [r for r, _ in results if r is not None], [e for _, e in results if e is not None]


@pytest.mark.parametrize("voter_type", ["judge", "public"])
def test_concurrent_duplicate_votes_single_winner(voting_event, voter_type):
    eid, sid = voting_event
    get_vote_service().add_judge(eid, AddJudgeRequest(address="0xRacer", organizer_address="0xOrg"))

    def cast():
        return get_vote_service().cast_vote(
            CastVoteRequest(event_id=eid, submission_id=sid, voter_address="0xRacer", voter_type=voter_type)
        )

    wins, conflicts = _race(cast)
    assert len(wins) == 1
    assert len(conflicts) == WORKERS - 1
    assert len(list_votes_by_submission(sid)) == 1


def test_concurrent_add_judge_single_winner(voting_event):
    eid, _ = voting_event

    def add():
        return get_vote_service().add_judge(eid, AddJudgeRequest(address="0xSameJudge", organizer_address="0xOrg"))

    wins, conflicts = _race(add)
    assert len(wins) == 1
    assert len(conflicts) == WORKERS - 1
    assert len(get_vote_service().list_judges(eid)) == 1
