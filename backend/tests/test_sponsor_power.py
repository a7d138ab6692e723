from __future__ import annotations

from typing import Dict, List

import pytest

from models.schemas import Sponsor, Sponsorship
from services.errors import NotFoundError
from services.sponsor_power import SponsorPowerResolver


class FakeSponsors:
    def __init__(self, sponsors: List[Sponsor]):
        self.by_address: Dict[str, Sponsor] = {s.address: s for s in sponsors}

    def get_sponsor_by_address(self, address):
        return self.by_address.get(address)


class FakeSponsorships:
    def __init__(self, rows: List[Sponsorship]):
        self.rows = rows

    def get_sponsorships_by_event_and_sponsor(self, event_id, sponsor_id):
        return [r for r in self.rows if r.event_id == event_id and r.sponsor_id == sponsor_id]


def _resolver(*rows: tuple) -> SponsorPowerResolver:
    sponsorships = [
        Sponsorship(id=i, event_id=event_id, sponsor_id=1, status=status, voting_power=power)
        for i, (event_id, status, power) in enumerate(rows, start=1)
    ]
    return SponsorPowerResolver(
        FakeSponsors([Sponsor(id=1, name="Acme", address="0xccc")]),
        FakeSponsorships(sponsorships),
    )


def test_sums_approved_and_deposited_only():
    resolver = _resolver(
        (1, "approved", 1.5),
        (1, "deposited", 4.0),
        (1, "pending", 10.0),
        (1, "rejected", 10.0),
        (2, "deposited", 7.0),
    )
    assert resolver.resolve(1, "0xCCC") == 5.5
    assert resolver.resolve(2, " 0xccc ") == 7.0


@pytest.mark.parametrize("rows", [
    (),
    ((1, "pending", 3.0),),
    ((1, "approved", 0.0), (1, "deposited", 0.0)),
    ((1, "approved", -2.0),),
])
def test_zero_power_falls_back_to_nominal_weight(rows):
    assert _resolver(*rows).resolve(1, "0xccc") == 1.0


def test_unknown_sponsor():
    with pytest.raises(NotFoundError):
        _resolver((1, "approved", 2.0)).resolve(1, "0xddd")
