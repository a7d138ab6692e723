from fastapi import APIRouter, Depends

from api.common import vote_service_dependency
from models.schemas import AddJudgeRequest, OrganizerRequest
from services.vote_service import VoteService


router = APIRouter()


@router.post("/events/{event_id}/judges", status_code=201)
def add_judge(event_id: int, req: AddJudgeRequest, service: VoteService = Depends(vote_service_dependency)):
    return service.add_judge(event_id, req).model_dump()


@router.get("/events/{event_id}/judges")
def list_judges(event_id: int, service: VoteService = Depends(vote_service_dependency)):
    return [j.model_dump() for j in service.list_judges(event_id)]


@router.delete("/events/{event_id}/judges/{judge_id}")
def remove_judge(
    event_id: int,
    judge_id: int,
    body: OrganizerRequest,
    service: VoteService = Depends(vote_service_dependency),
):
    service.remove_judge(event_id, judge_id, body.organizer_address)
    return {"message": "judge removed"}
