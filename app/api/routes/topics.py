from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.schemas.topic import (
    TopicCreate,
    TopicUpdate,
    TopicOut,
    TopicListItem,
    TopicResponse,
    TeamAdvertisementOut,
)
from app.services import topics as topic_service

router = APIRouter()


def to_response(result: topic_service.TopicResult) -> TopicResponse:
    return TopicResponse(
        topic=TopicOut.model_validate(result.topic),
        promoted=result.promoted,
        messages=result.messages,
    )


@router.get("/assignments/{assignment_id}/topics", response_model=list[TopicListItem])
def list_topics(assignment_id: int, db: Session = Depends(get_db)):
    return [
        TopicListItem(
            topic=TopicOut.model_validate(row["topic"]),
            slots_filled=row["slots_filled"],
            slots_waitlisted=row["slots_waitlisted"],
        )
        for row in topic_service.list_topics(db, assignment_id)
    ]


@router.post("/assignments/{assignment_id}/topics", response_model=TopicResponse)
def create_topic(assignment_id: int, payload: TopicCreate, db: Session = Depends(get_db)) -> TopicResponse:
    return to_response(topic_service.create_topic(db, assignment_id, payload))


@router.post("/assignments/{assignment_id}/topics/default-microtask", response_model=TopicResponse)
def add_default_microtask(assignment_id: int, db: Session = Depends(get_db)) -> TopicResponse:
    return to_response(topic_service.add_default_microtask(db, assignment_id))


@router.patch("/topics/{topic_id}", response_model=TopicResponse)
def update_topic(topic_id: int, payload: TopicUpdate, db: Session = Depends(get_db)) -> TopicResponse:
    return to_response(topic_service.update_topic(db, topic_id, payload))


@router.delete("/topics/{topic_id}")
def delete_topic(topic_id: int, db: Session = Depends(get_db)):
    topic_service.delete_topic(db, topic_id)
    return {"ok": True}


@router.get("/topics/{topic_id}/advertisements", response_model=list[TeamAdvertisementOut])
def topic_advertisements(topic_id: int, db: Session = Depends(get_db)):
    return topic_service.topic_advertisements(db, topic_id)
