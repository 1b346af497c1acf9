"""Canonical status derivation and row flattening for request snapshots."""
from typing import Iterable, NamedTuple

from app.schemas.common import CanonicalStatus, RequestDomain
from app.schemas.request_schema import DetailLine, FlattenedRequestRow, RequestSnapshot


class Lifecycle(NamedTuple):
    open: str
    cancelled: str
    closed: str


LIFECYCLES: dict[RequestDomain, Lifecycle] = {
    RequestDomain.labor: Lifecycle(open="OPEN", cancelled="CANCELLED", closed="CLOSED"),
    RequestDomain.leave: Lifecycle(open="N", cancelled="R", closed="A"),
    RequestDomain.loan: Lifecycle(open="N", cancelled="R", closed="A"),
}

LABOR_PARTIAL = "PARTIAL"
LEAVE_CANCELLED_BY_EMPLOYEE = "C"


def _normalized(value: str | None) -> str:
    return (value or "").strip().upper()


def _reconcile_labor(snapshot: RequestSnapshot) -> CanonicalStatus:
    lifecycle = _normalized(snapshot.lifecycle)
    if lifecycle == LIFECYCLES[RequestDomain.labor].cancelled:
        return CanonicalStatus.rejected
    if snapshot.approved_by and snapshot.approval_date:
        return CanonicalStatus.approved
    # PARTIAL/CLOSED arrive without approver fields but are past approval.
    # Backend team to confirm whether approver data is expected here.
    if lifecycle in {LABOR_PARTIAL, LIFECYCLES[RequestDomain.labor].closed}:
        return CanonicalStatus.approved
    return CanonicalStatus.new


def _reconcile_transaction(snapshot: RequestSnapshot) -> CanonicalStatus:
    flag = _normalized(snapshot.lifecycle)
    if flag == "R":
        return CanonicalStatus.rejected
    if flag == "A":
        return CanonicalStatus.approved
    if snapshot.domain == RequestDomain.leave and flag == LEAVE_CANCELLED_BY_EMPLOYEE:
        return CanonicalStatus.rejected
    if (snapshot.next_level or 0) > 0:
        return CanonicalStatus.inprocess
    return CanonicalStatus.new


def reconcile_status(snapshot: RequestSnapshot) -> CanonicalStatus:
    if snapshot.domain == RequestDomain.labor:
        return _reconcile_labor(snapshot)
    return _reconcile_transaction(snapshot)


def reverse_map_status(canonical: CanonicalStatus, domain: RequestDomain) -> str:
    """Backend lifecycle value for a canonical status.

    Lossy on purpose: NEW, INPROCESS and APPROVED all map to the open value,
    approval metadata carries the difference.
    """
    lifecycle = LIFECYCLES[domain]
    if canonical == CanonicalStatus.rejected:
        return lifecycle.cancelled
    if canonical == CanonicalStatus.completed:
        return lifecycle.closed
    return lifecycle.open


def status_map(domain: RequestDomain) -> dict[CanonicalStatus, str]:
    return {s: reverse_map_status(s, domain) for s in CanonicalStatus}


def _sorted_lines(details: list[DetailLine]) -> list[DetailLine]:
    return sorted(details, key=lambda d: (d.sequence_no is None, d.sequence_no or 0))


def _row(snapshot: RequestSnapshot, status: CanonicalStatus, line: DetailLine | None) -> FlattenedRequestRow:
    nxt = snapshot.next_approval
    row = FlattenedRequestRow(
        domain=snapshot.domain,
        request_id=snapshot.request_id,
        status=status,
        backend_status=snapshot.lifecycle,
        requester_no=snapshot.requester_no,
        requester_name=snapshot.requester_name,
        request_date=snapshot.request_date,
        start_date=snapshot.start_date,
        end_date=snapshot.end_date,
        approved_by=snapshot.approved_by,
        approved_by_name=snapshot.approved_by_name,
        approval_date=snapshot.approval_date,
        next_approver_no=nxt.approver_no if nxt else None,
        next_approver_name=nxt.approver_name if nxt else None,
        next_level=nxt.level_no if nxt else None,
        next_level_name=nxt.level_name if nxt else None,
        rejection_reason=snapshot.rejection_reason,
        leave_days=snapshot.leave_days,
        reason=snapshot.reason,
        loan_amount=snapshot.loan_amount,
        installments=snapshot.installments,
        remaining_balance=snapshot.remaining_balance,
        project_code=snapshot.project_code,
        project_name=snapshot.project_name,
        notes=snapshot.notes,
    )
    if line is not None:
        row.detail_sequence_no = line.sequence_no
        row.specialization = line.specialization
        row.quantity = line.quantity
        row.daily_rate = line.daily_rate
    return row


def flatten_requests(snapshots: Iterable[RequestSnapshot]) -> list[FlattenedRequestRow]:
    """One row per detail line, or one defaulted row for a request without lines."""
    rows: list[FlattenedRequestRow] = []
    for snapshot in snapshots:
        status = reconcile_status(snapshot)
        lines = _sorted_lines(snapshot.details or [])
        if not lines:
            rows.append(_row(snapshot, status, None))
            continue
        for line in lines:
            rows.append(_row(snapshot, status, line))
    return rows
