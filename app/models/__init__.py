from app.models.assignment import Assignment, AssignmentDueDate, DeadlineType
from app.models.user import User
from app.models.team import Team, TeamUser
from app.models.topic import Topic
from app.models.signup import Signup, SignupStatus
from app.models.topic_dependency import TopicDependency
from app.models.topic_deadline import TopicDeadline

__all__ = [
    "Assignment",
    "AssignmentDueDate",
    "DeadlineType",
    "User",
    "Team",
    "TeamUser",
    "Topic",
    "Signup",
    "SignupStatus",
    "TopicDependency",
    "TopicDeadline",
]
