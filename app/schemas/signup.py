from typing import List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict


SignupStatus = Literal["confirmed", "waitlisted"]


class SignupRequest(BaseModel):
    user_id: int


class PriorityRequest(BaseModel):
    user_id: int
    priority: Union[int, str]


class SignupOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    topic_id: int
    team_id: int
    status: SignupStatus
    preference_priority: Optional[int] = None


class SignupResponse(BaseModel):
    ok: bool
    signup: Optional[SignupOut] = None
    promoted: List[int] = []
    messages: List[str] = []
