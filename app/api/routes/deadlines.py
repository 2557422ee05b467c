from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.schemas.deadline import TopicDeadlinesRequest, TopicDeadlinesResponse, StaggeredDeadlineRow
from app.services.deadlines import save_topic_deadlines, staggered_deadlines

router = APIRouter()


@router.get("/assignments/{assignment_id}/topic-deadlines", response_model=list[StaggeredDeadlineRow])
def list_topic_deadlines(assignment_id: int, db: Session = Depends(get_db)):
    return staggered_deadlines(db, assignment_id)


@router.put("/assignments/{assignment_id}/topic-deadlines", response_model=TopicDeadlinesResponse)
def update_topic_deadlines(
    assignment_id: int,
    request: TopicDeadlinesRequest,
    db: Session = Depends(get_db),
) -> TopicDeadlinesResponse:
    result = save_topic_deadlines(db, assignment_id, request.due_dates)
    return TopicDeadlinesResponse(ok=not result.messages, updated=result.updated, messages=result.messages)
