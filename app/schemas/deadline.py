from typing import List, Optional
from pydantic import BaseModel


class RoundDueDates(BaseModel):
    round: int
    submission: Optional[str] = None
    review: Optional[str] = None


class TopicDeadlineEdit(BaseModel):
    topic_id: int
    rounds: List[RoundDueDates] = []
    metareview: Optional[str] = None


class TopicDeadlinesRequest(BaseModel):
    due_dates: List[TopicDeadlineEdit]


class TopicDeadlinesResponse(BaseModel):
    ok: bool
    updated: int
    messages: List[str] = []


class StaggeredDeadlineRow(BaseModel):
    topic_id: int
    topic_identifier: Optional[str] = None
    topic_name: str
    rounds: List[RoundDueDates]
    metareview: Optional[str] = None
