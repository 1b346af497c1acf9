"""Timeline synthesis for request approval progress.

Two modes:

* detailed: the backend returned per-level approval steps; the timeline is
  ``[submitted] + levels + [final decision]`` and the active step is the
  first level that has not been resolved.
* summary (degraded): no per-level data; a fixed three step timeline whose
  active step is derived from the canonical status alone.

Nothing here performs I/O or raises on incomplete input.
"""
from datetime import datetime
from typing import Optional, Sequence

from app.schemas.common import CanonicalStatus, StepStatus
from app.schemas.timeline_schema import ApprovalStep, TimelineStep, TimelineView
from app.utils.labels import label


# Steps that stop the active pointer
_UNRESOLVED = {StepStatus.pending, StepStatus.future, StepStatus.rejected}
_DECIDED = {CanonicalStatus.approved, CanonicalStatus.rejected}


def approver_display(approver_name: Optional[str], approver_no: Optional[int], locale: str) -> Optional[str]:
    if approver_name and approver_name.strip():
        return approver_name.strip()
    if approver_no is not None:
        return label("user", locale, number=approver_no)
    return None


def level_display(level_name: Optional[str], level_no: Optional[int], locale: str) -> str:
    if level_name and level_name.strip():
        return level_name.strip()
    return label("level", locale, number=level_no or 1)


def _submitted_step(request_date: Optional[datetime], locale: str) -> TimelineStep:
    return TimelineStep(
        key="submitted",
        label=label("submitted", locale),
        description=label("submitted_desc", locale),
        status=StepStatus.completed,
        date=request_date,
    )


def _level_step(step: ApprovalStep, locale: str) -> TimelineStep:
    approver = approver_display(step.approver_name, step.approver_no, locale)
    description = None
    if approver:
        key = "step_approved_by" if step.status == StepStatus.completed else "step_approver"
        description = label(key, locale, approver=approver)
    return TimelineStep(
        key=f"level-{step.level_no}",
        label=level_display(step.level_name, step.level_no, locale),
        description=description,
        status=step.status,
        error=step.status == StepStatus.rejected,
        level_no=step.level_no,
        approver_no=step.approver_no,
        approver_name=approver,
    )


def _final_description(status: CanonicalStatus, rejection_reason: Optional[str], locale: str) -> str:
    if status == CanonicalStatus.approved:
        return label("final_approved_desc", locale)
    if status == CanonicalStatus.rejected:
        if rejection_reason:
            return label("final_rejected_reason", locale, reason=rejection_reason)
        return label("final_rejected_desc", locale)
    return label("final_waiting_desc", locale)


def first_unresolved_index(steps: Sequence[TimelineStep]) -> int:
    for index, step in enumerate(steps):
        if step.status in _UNRESOLVED:
            return index
    return len(steps)


def summary_active_index(status: CanonicalStatus, next_level: Optional[int] = None) -> int:
    if status == CanonicalStatus.inprocess or (status == CanonicalStatus.new and (next_level or 0) > 0):
        return 1
    if status in _DECIDED:
        return 2
    return 0


def _detailed(
    status: CanonicalStatus,
    request_date: Optional[datetime],
    approved_date: Optional[datetime],
    detailed_steps: Sequence[ApprovalStep],
    rejection_reason: Optional[str],
    locale: str,
) -> TimelineView:
    ordered = sorted(detailed_steps, key=lambda s: s.level_no)
    steps = [_submitted_step(request_date, locale)]
    steps.extend(_level_step(s, locale) for s in ordered)
    steps.append(
        TimelineStep(
            key="final",
            label=label("final", locale),
            description=_final_description(status, rejection_reason, locale),
            status=StepStatus.completed if status in _DECIDED else StepStatus.future,
            date=approved_date,
            error=status == CanonicalStatus.rejected,
        )
    )
    return TimelineView(steps=steps, active_step_index=first_unresolved_index(steps), mode="detailed")


def _summary(
    status: CanonicalStatus,
    request_date: Optional[datetime],
    approved_date: Optional[datetime],
    next_level: Optional[int],
    next_level_name: Optional[str],
    next_approver_no: Optional[int],
    next_approver_name: Optional[str],
    rejection_reason: Optional[str],
    locale: str,
) -> TimelineView:
    active = summary_active_index(status, next_level)

    def status_at(index: int) -> StepStatus:
        if index < active:
            return StepStatus.completed
        if index == active:
            return StepStatus.pending
        return StepStatus.future

    if active == 1:
        lines = [label("approval_current_level", locale, level=level_display(next_level_name, next_level, locale))]
        waiting_for = approver_display(next_approver_name, next_approver_no, locale)
        if waiting_for:
            lines.append(label("approval_waiting_for", locale, approver=waiting_for))
        approval_desc = "\n".join(lines)
    elif status in _DECIDED:
        approval_desc = label("approval_reviewed", locale)
    else:
        approval_desc = label("approval_under_review", locale)

    if status == CanonicalStatus.approved:
        final_status = StepStatus.completed
    elif status == CanonicalStatus.rejected:
        final_status = StepStatus.rejected
    else:
        final_status = status_at(2)

    steps = [
        _submitted_step(request_date, locale),
        TimelineStep(
            key="approval",
            label=label("approval", locale),
            description=approval_desc,
            status=status_at(1),
            level_no=next_level if active == 1 else None,
            approver_no=next_approver_no if active == 1 else None,
            approver_name=next_approver_name if active == 1 else None,
        ),
        TimelineStep(
            key="final",
            label=label("final_rejected" if status == CanonicalStatus.rejected else "final", locale),
            description=_final_description(status, rejection_reason, locale),
            status=final_status,
            date=approved_date,
            error=status == CanonicalStatus.rejected,
        ),
    ]
    return TimelineView(steps=steps, active_step_index=active, mode="summary")


def synthesize(
    status: CanonicalStatus,
    request_date: Optional[datetime],
    approved_date: Optional[datetime] = None,
    detailed_steps: Optional[Sequence[ApprovalStep]] = None,
    *,
    next_level: Optional[int] = None,
    next_level_name: Optional[str] = None,
    next_approver_no: Optional[int] = None,
    next_approver_name: Optional[str] = None,
    rejection_reason: Optional[str] = None,
    locale: str = "en",
) -> TimelineView:
    if detailed_steps:
        return _detailed(status, request_date, approved_date, detailed_steps, rejection_reason, locale)
    return _summary(
        status,
        request_date,
        approved_date,
        next_level,
        next_level_name,
        next_approver_no,
        next_approver_name,
        rejection_reason,
        locale,
    )
