"""Voting policy configuration."""

import os

# Public voters may back at most this many distinct submissions per event
MAX_PUBLIC_VOTES_PER_EVENT = int(os.getenv("HACKATHON_MAX_PUBLIC_VOTES", "3"))

# Sponsors whose qualifying sponsorships sum to zero still vote with this weight
DEFAULT_SPONSOR_WEIGHT = float(os.getenv("HACKATHON_DEFAULT_SPONSOR_WEIGHT", "1.0"))

# Judge whitelist defaults applied when the organizer omits a value or sends <= 0
DEFAULT_JUDGE_WEIGHT = 1.0
DEFAULT_JUDGE_MAX_VOTES = 100

DEFAULT_PUBLIC_WEIGHT = 1.0

# Sponsorship statuses that contribute voting power
QUALIFYING_SPONSORSHIP_STATUSES = ("approved", "deposited")

CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("HACKATHON_CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
    if o.strip()
]
