from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel

from app.schemas.common import StepStatus


class ApprovalStep(BaseModel):
    level_no: int
    level_name: Optional[str] = None
    approver_no: Optional[int] = None
    approver_name: Optional[str] = None
    status: StepStatus = StepStatus.future


class TimelineStep(BaseModel):
    key: str
    label: str
    description: Optional[str] = None
    status: StepStatus
    date: Optional[datetime] = None
    error: bool = False
    level_no: Optional[int] = None
    approver_no: Optional[int] = None
    approver_name: Optional[str] = None


class TimelineView(BaseModel):
    steps: list[TimelineStep]
    active_step_index: int
    mode: Literal["detailed", "summary"]
    advisory: Optional[str] = None
