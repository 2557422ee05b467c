from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.schemas.dependency import TopicDependenciesRequest, DependencyResolutionOut
from app.services.dependencies import (
    DependencyResolution,
    resolve_topic_dependencies,
    save_topic_dependencies,
)

router = APIRouter()


def to_response(resolution: DependencyResolution) -> DependencyResolutionOut:
    return DependencyResolutionOut(
        ok=resolution.acyclic,
        acyclic=resolution.acyclic,
        layers=resolution.layers,
        topological_order=resolution.topological_order,
        cycle=resolution.cycle,
        messages=resolution.messages,
        graph_path=resolution.graph_path,
    )


@router.put("/assignments/{assignment_id}/topic-dependencies", response_model=DependencyResolutionOut)
def save_dependencies(
    assignment_id: int,
    payload: TopicDependenciesRequest,
    db: Session = Depends(get_db),
) -> DependencyResolutionOut:
    return to_response(save_topic_dependencies(db, assignment_id, payload.dependencies))


@router.get("/assignments/{assignment_id}/topic-dependencies", response_model=DependencyResolutionOut)
def resolve_dependencies(assignment_id: int, db: Session = Depends(get_db)) -> DependencyResolutionOut:
    return to_response(resolve_topic_dependencies(db, assignment_id))
