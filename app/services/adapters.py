"""Normalize domain-specific ERP payloads into one ``RequestSnapshot`` shape.

Each domain names its fields differently (``leaveId`` / ``loanId`` /
``requestNo``, ``transStatus`` vs ``requestStatus``); the adapters below are
the only place that knows about those differences.
"""
from typing import Any, Callable, Iterable

from pydantic import ValidationError

from app.schemas.backend_schema import (
    ApprovalStepResponse,
    LaborRequestDetailResponse,
    LaborRequestResponse,
    LeaveDetailsResponse,
    LoanDetailsResponse,
)
from app.schemas.common import RequestDomain, StepStatus
from app.schemas.request_schema import UNKNOWN_SPECIALIZATION, DetailLine, NextApproval, RequestSnapshot
from app.schemas.timeline_schema import ApprovalStep


class MalformedPayloadError(ValueError):
    def __init__(self, domain: RequestDomain, detail: str) -> None:
        super().__init__(f"Malformed {domain.value} payload: {detail}")
        self.domain = domain


def _next_approval(approver_no, approver_name, level_no, level_name=None) -> NextApproval | None:
    if approver_no is None and level_no is None:
        return None
    return NextApproval(
        approver_no=approver_no,
        approver_name=approver_name,
        level_no=level_no,
        level_name=level_name,
    )


def _leave(payload: dict) -> RequestSnapshot:
    r = LeaveDetailsResponse.model_validate(payload)
    return RequestSnapshot(
        domain=RequestDomain.leave,
        request_id=r.leave_id,
        requester_no=r.employee_no,
        requester_name=r.employee_name,
        request_date=r.request_date,
        start_date=r.leave_from_date,
        end_date=r.leave_to_date,
        lifecycle=r.trans_status,
        approved_by=r.approved_by,
        approved_by_name=r.approved_by_name,
        approval_date=r.approved_date,
        next_approval=_next_approval(r.next_approval, r.next_approver_name, r.next_app_level, r.next_app_level_name),
        rejection_reason=r.rejection_reason,
        leave_days=r.leave_days,
        reason=r.leave_reason,
    )


def _loan(payload: dict) -> RequestSnapshot:
    r = LoanDetailsResponse.model_validate(payload)
    return RequestSnapshot(
        domain=RequestDomain.loan,
        request_id=r.loan_id,
        requester_no=r.employee_no,
        requester_name=r.employee_name,
        request_date=r.request_date,
        start_date=r.first_installment_date,
        lifecycle=r.trans_status,
        approved_by=r.approved_by,
        approved_by_name=r.approved_by_name,
        approval_date=r.approved_date,
        next_approval=_next_approval(r.next_approval, r.next_approver_name, r.next_app_level, r.next_app_level_name),
        rejection_reason=r.rejection_reason,
        loan_amount=r.loan_amount,
        installments=r.no_of_installments,
        remaining_balance=r.remaining_balance,
    )


def _detail_line(d: LaborRequestDetailResponse) -> DetailLine:
    specialization = (d.job_title_en or "").strip() or (d.job_title_ar or "").strip() or UNKNOWN_SPECIALIZATION
    return DetailLine(
        sequence_no=d.sequence_no,
        specialization=specialization,
        quantity=d.quantity or 0,
        daily_rate=d.daily_rate or 0,
        assigned_count=d.assigned_count,
        remaining_count=d.remaining_count,
        notes=d.notes,
    )


def _labor(payload: dict) -> RequestSnapshot:
    r = LaborRequestResponse.model_validate(payload)
    return RequestSnapshot(
        domain=RequestDomain.labor,
        request_id=r.request_no,
        requester_no=r.requested_by,
        requester_name=r.requested_by_name,
        request_date=r.request_date,
        start_date=r.start_date,
        end_date=r.end_date,
        lifecycle=r.request_status,
        approved_by=r.approved_by,
        approved_by_name=r.approved_by_name,
        approval_date=r.approval_date,
        next_approval=_next_approval(r.next_approval, r.next_approver_name, r.next_app_level),
        details=[_detail_line(d) for d in (r.details or [])],
        project_code=r.project_code,
        project_name=r.project_name,
        notes=r.notes,
    )


_ADAPTERS: dict[RequestDomain, Callable[[dict], RequestSnapshot]] = {
    RequestDomain.leave: _leave,
    RequestDomain.loan: _loan,
    RequestDomain.labor: _labor,
}


def to_snapshot(domain: RequestDomain, payload: dict[str, Any]) -> RequestSnapshot:
    """Only the request identifier is required; optional fields that arrive
    with an unusable type are read as missing."""
    if not isinstance(payload, dict):
        raise MalformedPayloadError(domain, f"expected an object, got {type(payload).__name__}")
    try:
        return _ADAPTERS[domain](payload)
    except ValidationError as exc:
        raise MalformedPayloadError(domain, str(exc)) from exc


def to_snapshots(domain: RequestDomain, payloads: Iterable[dict[str, Any]]) -> list[RequestSnapshot]:
    return [to_snapshot(domain, p) for p in payloads]


def to_approval_steps(payloads: Iterable[dict[str, Any]]) -> list[ApprovalStep]:
    """Parse the per-level timeline payload.

    Entries that are not objects are skipped, unknown statuses become FUTURE
    and a missing level number falls back to the entry's position.
    """
    steps: list[ApprovalStep] = []
    for position, payload in enumerate(payloads, start=1):
        if not isinstance(payload, dict):
            continue
        raw = ApprovalStepResponse.model_validate(payload)
        try:
            status = StepStatus((raw.status or "").strip().upper())
        except ValueError:
            status = StepStatus.future
        steps.append(
            ApprovalStep(
                level_no=raw.level_no if raw.level_no is not None else position,
                level_name=raw.level_name,
                approver_no=raw.approver_no,
                approver_name=raw.approver_name,
                status=status,
            )
        )
    return steps
