from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from api.common import error_response, vote_service_dependency
from models.schemas import CastVoteRequest
from services.vote_service import VoteService


router = APIRouter()


@router.post("/votes", status_code=201)
def cast_vote(req: CastVoteRequest, service: VoteService = Depends(vote_service_dependency)):
    vote = service.cast_vote(req)
    return vote.model_dump()


@router.get("/votes/event/{event_id}")
def list_votes_by_event(event_id: int, service: VoteService = Depends(vote_service_dependency)):
    return [v.model_dump() for v in service.list_votes_by_event(event_id)]


@router.get("/votes/event/{event_id}/summary")
def get_event_summary(event_id: int, service: VoteService = Depends(vote_service_dependency)):
    return [s.model_dump() for s in service.get_event_summary(event_id)]


@router.get("/votes/submission/{submission_id}")
def list_votes_by_submission(submission_id: int, service: VoteService = Depends(vote_service_dependency)):
    return [v.model_dump() for v in service.list_votes_by_submission(submission_id)]


@router.get("/votes/{vote_id}")
def get_vote(vote_id: int, service: VoteService = Depends(vote_service_dependency)):
    return service.get_vote(vote_id).model_dump()


@router.delete("/votes/{vote_id}")
async def delete_vote(
    vote_id: int,
    request: Request,
    organizer_address: Optional[str] = Query(None),
    service: VoteService = Depends(vote_service_dependency),
):
    # Accept the organizer from the query string or a JSON body
    if not organizer_address:
        try:
            if request.headers.get("content-type", "").startswith("application/json"):
                payload = await request.json()
                if isinstance(payload, dict):
                    organizer_address = payload.get("organizer_address")
        except ValueError:
            organizer_address = None

    if not organizer_address:
        return error_response(400, "organizer_address is required")

    service.delete_vote(vote_id, organizer_address)
    return JSONResponse(status_code=200, content={"message": "vote deleted"})
