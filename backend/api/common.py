from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from models.repositories import (
    SQLiteEventStore,
    SQLiteJudgeStore,
    SQLiteSponsorshipStore,
    SQLiteSponsorStore,
    SQLiteSubmissionStore,
    SQLiteVoteStore,
)
from services.errors import VotingError
from services.vote_service import VoteService


logger = logging.getLogger(__name__)


def get_vote_service() -> VoteService:
    """Build a VoteService wired to the SQLite stores."""
    return VoteService(
        votes=SQLiteVoteStore(),
        events=SQLiteEventStore(),
        submissions=SQLiteSubmissionStore(),
        judges=SQLiteJudgeStore(),
        sponsors=SQLiteSponsorStore(),
        sponsorships=SQLiteSponsorshipStore(),
    )


def vote_service_dependency() -> VoteService:
    """FastAPI dependency; tests swap it through app.dependency_overrides."""
    return get_vote_service()


async def voting_error_handler(request: Request, exc: VotingError) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path} rejected ({exc.kind}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})
