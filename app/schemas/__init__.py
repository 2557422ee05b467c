from app.schemas.topic import (
    TopicCreate,
    TopicUpdate,
    TopicOut,
    TopicListItem,
    TopicResponse,
    TeamAdvertisementOut,
)
from app.schemas.signup import SignupRequest, PriorityRequest, SignupOut, SignupResponse
from app.schemas.dependency import TopicDependenciesRequest, DependencyResolutionOut
from app.schemas.deadline import (
    RoundDueDates,
    TopicDeadlineEdit,
    TopicDeadlinesRequest,
    TopicDeadlinesResponse,
    StaggeredDeadlineRow,
)

__all__ = [
    "TopicCreate",
    "TopicUpdate",
    "TopicOut",
    "TopicListItem",
    "TopicResponse",
    "TeamAdvertisementOut",
    "SignupRequest",
    "PriorityRequest",
    "SignupOut",
    "SignupResponse",
    "TopicDependenciesRequest",
    "DependencyResolutionOut",
    "RoundDueDates",
    "TopicDeadlineEdit",
    "TopicDeadlinesRequest",
    "TopicDeadlinesResponse",
    "StaggeredDeadlineRow",
]
