from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.models import Signup
from app.schemas.signup import SignupRequest, PriorityRequest, SignupOut, SignupResponse
from app.services import signups as signup_service

router = APIRouter()


def signup_out(signup: Signup) -> SignupOut:
    return SignupOut(
        id=signup.id,
        topic_id=signup.topic_id,
        team_id=signup.team_id,
        status=signup.status.value,
        preference_priority=signup.preference_priority,
    )


def to_response(result: signup_service.SignupResult, ok: bool) -> SignupResponse:
    return SignupResponse(
        ok=ok,
        signup=signup_out(result.signup) if result.signup else None,
        promoted=result.promoted,
        messages=result.messages,
    )


@router.get("/assignments/{assignment_id}/signups", response_model=list[SignupOut])
def list_signups(
    assignment_id: int,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
):
    return [signup_out(signup) for signup in signup_service.user_signups(db, assignment_id, user_id)]


@router.post("/assignments/{assignment_id}/topics/{topic_id}/signup", response_model=SignupResponse)
def create_signup(
    assignment_id: int,
    topic_id: int,
    request: SignupRequest,
    db: Session = Depends(get_db),
) -> SignupResponse:
    result = signup_service.signup_team(db, assignment_id, request.user_id, topic_id)
    return to_response(result, ok=result.signup is not None)


@router.delete("/assignments/{assignment_id}/topics/{topic_id}/signup", response_model=SignupResponse)
def destroy_signup(
    assignment_id: int,
    topic_id: int,
    user_id: int = Query(...),
    db: Session = Depends(get_db),
) -> SignupResponse:
    result = signup_service.drop_signup(db, assignment_id, user_id, topic_id)
    return to_response(result, ok=True)


@router.patch("/assignments/{assignment_id}/topics/{topic_id}/priority", response_model=SignupResponse)
def set_priority(
    assignment_id: int,
    topic_id: int,
    request: PriorityRequest,
    db: Session = Depends(get_db),
) -> SignupResponse:
    result = signup_service.set_priority(db, assignment_id, request.user_id, topic_id, request.priority)
    return to_response(result, ok=not result.messages)
