from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field

from app.schemas.common import CanonicalStatus, RequestDomain


UNKNOWN_SPECIALIZATION = "unknown"


class NextApproval(BaseModel):
    approver_no: Optional[int] = None
    approver_name: Optional[str] = None
    level_no: Optional[int] = None
    level_name: Optional[str] = None


class DetailLine(BaseModel):
    sequence_no: Optional[int] = None
    specialization: str = UNKNOWN_SPECIALIZATION
    quantity: int = 0
    daily_rate: float = 0
    assigned_count: Optional[int] = None
    remaining_count: Optional[int] = None
    notes: Optional[str] = None


# Normalized shape produced by the domain adapters
class RequestSnapshot(BaseModel):
    domain: RequestDomain
    request_id: int
    requester_no: Optional[int] = None
    requester_name: Optional[str] = None
    request_date: Optional[datetime] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    lifecycle: Optional[str] = None
    approved_by: Optional[int] = None
    approved_by_name: Optional[str] = None
    approval_date: Optional[datetime] = None
    next_approval: Optional[NextApproval] = None
    details: list[DetailLine] = Field(default_factory=list)
    rejection_reason: Optional[str] = None
    # domain extras
    leave_days: Optional[float] = None
    reason: Optional[str] = None
    loan_amount: Optional[float] = None
    installments: Optional[int] = None
    remaining_balance: Optional[float] = None
    project_code: Optional[int] = None
    project_name: Optional[str] = None
    notes: Optional[str] = None

    @property
    def next_level(self) -> Optional[int]:
        return self.next_approval.level_no if self.next_approval else None


class FlattenedRequestRow(BaseModel):
    domain: RequestDomain
    request_id: int
    status: CanonicalStatus
    backend_status: Optional[str] = None
    requester_no: Optional[int] = None
    requester_name: Optional[str] = None
    request_date: Optional[datetime] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    approved_by: Optional[int] = None
    approved_by_name: Optional[str] = None
    approval_date: Optional[datetime] = None
    next_approver_no: Optional[int] = None
    next_approver_name: Optional[str] = None
    next_level: Optional[int] = None
    next_level_name: Optional[str] = None
    rejection_reason: Optional[str] = None
    # line level
    detail_sequence_no: Optional[int] = None
    specialization: str = UNKNOWN_SPECIALIZATION
    quantity: int = 0
    daily_rate: float = 0
    # domain extras
    leave_days: Optional[float] = None
    reason: Optional[str] = None
    loan_amount: Optional[float] = None
    installments: Optional[int] = None
    remaining_balance: Optional[float] = None
    project_code: Optional[int] = None
    project_name: Optional[str] = None
    notes: Optional[str] = None


class RequestListOut(BaseModel):
    items: list[FlattenedRequestRow]
    # backend requests across all pages, before flattening and status filtering
    total: int
    # rows in this response
    row_count: int
    page: int
    size: int


class StatusMapOut(BaseModel):
    domain: RequestDomain
    mapping: dict[CanonicalStatus, str]
