from __future__ import annotations

from pathlib import Path
import tempfile

import pytest

from models.db import set_db_path, init_db, create_event, list_event_judges
from models.repositories import SQLiteEventStore, SQLiteJudgeStore
from models.schemas import AddJudgeRequest
from services.errors import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    UnauthorizedError,
)
from services.judge_whitelist import JudgeWhitelist


def with_temp_db(func):
    def wrapper():
        with tempfile.TemporaryDirectory() as td:
            set_db_path(Path(td) / "test.db")
            init_db()
            func()
    return wrapper


def _whitelist() -> JudgeWhitelist:
    return JudgeWhitelist(SQLiteJudgeStore(), SQLiteEventStore())


@with_temp_db
def test_add_judge_defaults_and_listing_order():
    eid = create_event("Hack", "0xOrg")
    wl = _whitelist()
    first = wl.add_judge(eid, AddJudgeRequest(address=" 0xJudgeA ", organizer_address="0xORG"))
    second = wl.add_judge(eid, AddJudgeRequest(address="0xJudgeB", weight=0, max_votes=-1, organizer_address="0xOrg"))
    third = wl.add_judge(eid, AddJudgeRequest(address="0xJudgeC", weight=2.5, max_votes=4, organizer_address="0xOrg"))

    assert first.address == "0xjudgea"
    assert (first.weight, first.max_votes) == (1.0, 100)
    assert (second.weight, second.max_votes) == (1.0, 100)
    assert (third.weight, third.max_votes) == (2.5, 4)
    assert [j.id for j in wl.list_judges(eid)] == [first.id, second.id, third.id]


@with_temp_db
def test_only_organizer_manages_judges():
    eid = create_event("Hack", "0xOrg")
    wl = _whitelist()
    with pytest.raises(UnauthorizedError):
        wl.add_judge(eid, AddJudgeRequest(address="0xJudge", organizer_address="0xIntruder"))
    judge = wl.add_judge(eid, AddJudgeRequest(address="0xJudge", organizer_address="0xOrg"))
    # Unauthorized is reported as a forbidden action
    with pytest.raises(ForbiddenError):
        wl.remove_judge(eid, judge.id, "")
    assert len(wl.list_judges(eid)) == 1


@with_temp_db
def test_missing_event_and_bad_address():
    wl = _whitelist()
    with pytest.raises(NotFoundError):
        wl.add_judge(42, AddJudgeRequest(address="0xJudge", organizer_address="0xOrg"))
    eid = create_event("Hack", "0xOrg")
    with pytest.raises(InvalidInputError):
        wl.add_judge(eid, AddJudgeRequest(address="  ", organizer_address="0xOrg"))


@with_temp_db
def test_duplicate_judge_conflicts_and_readd_after_removal():
    eid = create_event("Hack", "0xOrg")
    wl = _whitelist()
    judge = wl.add_judge(eid, AddJudgeRequest(address="0xJudge", organizer_address="0xOrg"))
    with pytest.raises(ConflictError, match="already exists"):
        wl.add_judge(eid, AddJudgeRequest(address="0XJUDGE", organizer_address="0xOrg"))

    wl.remove_judge(eid, judge.id, "0xOrg")
    assert list_event_judges(eid) == []
    readded = wl.add_judge(eid, AddJudgeRequest(address="0xJudge", organizer_address="0xOrg"))
    assert readded.id != judge.id


@with_temp_db
def test_remove_judge_must_belong_to_event():
    eid = create_event("Hack", "0xOrg")
    other = create_event("Other", "0xOrg")
    wl = _whitelist()
    judge = wl.add_judge(other, AddJudgeRequest(address="0xJudge", organizer_address="0xOrg"))
    with pytest.raises(NotFoundError, match="does not belong"):
        wl.remove_judge(eid, judge.id, "0xOrg")
    with pytest.raises(NotFoundError):
        wl.remove_judge(eid, 9999, "0xOrg")
    assert len(wl.list_judges(other)) == 1


@with_temp_db
def test_lookup():
    eid = create_event("Hack", "0xOrg")
    wl = _whitelist()
    wl.add_judge(eid, AddJudgeRequest(address="0xJudge", weight=3, organizer_address="0xOrg"))
    assert wl.lookup(eid, " 0xJUDGE").weight == 3.0
    with pytest.raises(NotFoundError):
        wl.lookup(eid, "0xStranger")
