"""Resolve a sponsor's vote weight from its sponsorships of an event."""

from __future__ import annotations

from config.voting_config import DEFAULT_SPONSOR_WEIGHT, QUALIFYING_SPONSORSHIP_STATUSES
from services.errors import NotFoundError
from services.ports import SponsorshipStore, SponsorStore
from utils.address import normalize_address


class SponsorPowerResolver:
    def __init__(self, sponsors: SponsorStore, sponsorships: SponsorshipStore):
        self.sponsors = sponsors
        self.sponsorships = sponsorships

    def resolve(self, event_id: int, address: str) -> float:
        """Sum voting power over approved or deposited sponsorships.

        A zero total falls back to DEFAULT_SPONSOR_WEIGHT so a sponsor without a
        recorded deposit still casts a nominal vote.
        """
        sponsor = self.sponsors.get_sponsor_by_address(normalize_address(address))
        if sponsor is None:
            raise NotFoundError("sponsor with this address not found")

        total = 0.0
        for sship in self.sponsorships.get_sponsorships_by_event_and_sponsor(event_id, sponsor.id):
            if sship.status.value not in QUALIFYING_SPONSORSHIP_STATUSES:
                continue
            if sship.voting_power > 0:
                total += sship.voting_power

        if total == 0:
            return DEFAULT_SPONSOR_WEIGHT
        return total
