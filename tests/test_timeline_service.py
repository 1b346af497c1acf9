from datetime import datetime

from app.schemas.common import CanonicalStatus, StepStatus
from app.schemas.timeline_schema import ApprovalStep
from app.services.timeline_service import synthesize


REQUESTED = datetime(2025, 2, 1, 8, 0)
APPROVED = datetime(2025, 2, 3, 12, 0)


def step(level, status, name=None, approver_no=None, approver_name=None):
    return ApprovalStep(level_no=level, level_name=name, approver_no=approver_no, approver_name=approver_name, status=status)


def test_detailed_wraps_levels_with_submitted_and_final():
    steps = [step(2, StepStatus.future, "HR"), step(1, StepStatus.pending, "Manager")]
    view = synthesize(CanonicalStatus.inprocess, REQUESTED, None, steps)
    assert view.mode == "detailed"
    assert len(view.steps) == len(steps) + 2
    assert [s.key for s in view.steps] == ["submitted", "level-1", "level-2", "final"]
    assert view.steps[0].status == StepStatus.completed
    assert view.steps[0].date == REQUESTED
    assert view.steps[-1].status == StepStatus.future
    assert view.active_step_index == 1


def test_detailed_all_completed_points_past_the_end():
    steps = [step(1, StepStatus.completed), step(2, StepStatus.skipped)]
    view = synthesize(CanonicalStatus.approved, REQUESTED, APPROVED, steps)
    assert view.active_step_index == len(view.steps)
    assert view.steps[2].status == StepStatus.skipped
    assert view.steps[-1].status == StepStatus.completed
    assert view.steps[-1].date == APPROVED
    assert view.steps[-1].error is False


def test_detailed_rejected_mid_level():
    steps = [step(1, StepStatus.completed), step(2, StepStatus.rejected), step(3, StepStatus.future)]
    view = synthesize(CanonicalStatus.rejected, REQUESTED, APPROVED, steps)
    assert view.steps[2].status == StepStatus.rejected
    assert view.steps[2].error is True
    assert view.active_step_index == 2
    assert view.steps[-1].error is True


def test_final_error_only_when_request_rejected():
    steps = [step(1, StepStatus.completed), step(2, StepStatus.rejected)]
    view = synthesize(CanonicalStatus.inprocess, REQUESTED, None, steps)
    assert view.steps[2].status == StepStatus.rejected
    assert view.steps[-1].error is False


def test_unnamed_approver_and_level():
    view = synthesize(CanonicalStatus.inprocess, REQUESTED, None, [step(2, StepStatus.pending, approver_no=42)])
    level = view.steps[1]
    assert level.label == "Level 2"
    assert level.approver_name == "user #42"
    assert level.description == "Approver: user #42"


def test_completed_level_names_approver():
    view = synthesize(CanonicalStatus.approved, REQUESTED, None, [step(1, StepStatus.completed, "Manager", 5, "Ali")])
    assert view.steps[1].description == "Approved by: Ali"


def test_summary_new_without_level():
    view = synthesize(CanonicalStatus.new, REQUESTED)
    assert view.mode == "summary"
    assert len(view.steps) == 3
    assert view.active_step_index == 0
    assert [s.status for s in view.steps] == [StepStatus.completed, StepStatus.future, StepStatus.future]


def test_summary_in_progress():
    view = synthesize(CanonicalStatus.inprocess, REQUESTED, next_level=2, next_level_name="HR", next_approver_no=9)
    assert view.active_step_index == 1
    assert view.steps[1].status == StepStatus.pending
    assert "Current level: HR" in view.steps[1].description
    assert "Waiting for: user #9" in view.steps[1].description


def test_summary_new_with_next_level_counts_as_in_progress():
    assert synthesize(CanonicalStatus.new, REQUESTED, next_level=1).active_step_index == 1
    assert synthesize(CanonicalStatus.new, REQUESTED, next_level=0).active_step_index == 0


def test_summary_decided():
    approved = synthesize(CanonicalStatus.approved, REQUESTED, APPROVED)
    assert approved.active_step_index == 2
    assert approved.steps[-1].status == StepStatus.completed
    assert approved.steps[-1].date == APPROVED

    rejected = synthesize(CanonicalStatus.rejected, REQUESTED, rejection_reason="Budget")
    assert rejected.active_step_index == 2
    assert rejected.steps[-1].status == StepStatus.rejected
    assert rejected.steps[-1].error is True
    assert rejected.steps[-1].label == "Request rejected"
    assert rejected.steps[-1].description == "Rejected: Budget"


def test_empty_steps_fall_back_to_summary():
    assert synthesize(CanonicalStatus.inprocess, REQUESTED, None, []).mode == "summary"


def test_locale_is_explicit():
    view = synthesize(CanonicalStatus.new, REQUESTED, locale="ar")
    assert view.steps[0].label == "تم إرسال الطلب"
    assert synthesize(CanonicalStatus.new, REQUESTED, locale="fr").steps[0].label == "Request submitted"


def test_active_index_bounds():
    statuses = list(StepStatus)
    for canonical in CanonicalStatus:
        assert 0 <= synthesize(canonical, None).active_step_index <= 3
        for first in statuses:
            for second in statuses:
                view = synthesize(canonical, None, None, [step(1, first), step(2, second)])
                assert 0 <= view.active_step_index <= len(view.steps)
