from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class TopicCreate(BaseModel):
    topic_name: str
    topic_identifier: Optional[str] = None
    category: Optional[str] = None
    max_choosers: int = Field(0, ge=0)
    micropayment: Optional[Decimal] = None


class TopicUpdate(BaseModel):
    topic_name: Optional[str] = None
    topic_identifier: Optional[str] = None
    category: Optional[str] = None
    max_choosers: Optional[int] = Field(None, ge=0)
    micropayment: Optional[Decimal] = None


class TopicOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    assignment_id: int
    topic_name: str
    topic_identifier: Optional[str] = None
    category: Optional[str] = None
    max_choosers: int
    micropayment: Optional[Decimal] = None


class TopicListItem(BaseModel):
    topic: TopicOut
    slots_filled: int
    slots_waitlisted: int


class TopicResponse(BaseModel):
    topic: TopicOut
    promoted: List[int] = []
    messages: List[str] = []


class TeamAdvertisementOut(BaseModel):
    team_id: int
    team_name: str
    comments_for_advertisement: Optional[str] = None
    status: str
    members: List[str]
