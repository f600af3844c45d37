import pytest
from datetime import datetime, timezone

from appraisal_api.core.exceptions import AccessDeniedError, InvalidTransitionError, NotFoundError
from appraisal_api.models.submission import SubmissionStatus
from appraisal_api.models.user import UserRole
from appraisal_api.schemas.appraisal import StaffAppraisalInput
from appraisal_api.schemas.submission import CEOEvaluation, ManagerEvaluation, WorkflowAction
from appraisal_api.schemas.user import Actor, DirectoryUser
from appraisal_api.services.repositories import InMemoryRepository
from appraisal_api.services.workflow import (
    WorkflowService,
    allowed_actions,
    ensure_actor_allowed,
    new_submission,
    transition_submission,
)

FIXED_NOW = datetime(2025, 1, 15, 9, 30, tzinfo=timezone.utc)

EMPLOYEE = DirectoryUser(
    id="emp1", email="john.smith@company.com", name="John Smith",
    role=UserRole.EMPLOYEE, department="Engineering", line_manager="mgr1",
)
ADMIN = Actor(id="admin1", role=UserRole.ADMIN)
MANAGER = Actor(id="mgr1", role=UserRole.MANAGER)
CEO = Actor(id="ceo1", role=UserRole.CEO)


def make_submission(submission_id="sub1", status=SubmissionStatus.SUBMITTED):
    appraisal = StaffAppraisalInput(
        review_period="Q4 2024",
        productivity=4, quality=4, communication=5, teamwork=4, initiative=3, reliability=4,
    )
    submission = new_submission(EMPLOYEE, appraisal, submission_id=submission_id, submitted_at=FIXED_NOW)
    return submission.model_copy(update={"status": status})


@pytest.fixture
def service():
    return WorkflowService(InMemoryRepository(), clock=lambda: FIXED_NOW)


# --- Pure state machine ---

def test_new_submission_starts_submitted_with_self_rating():
    submission = make_submission()
    assert submission.status == SubmissionStatus.SUBMITTED
    assert submission.scores.self_rating == pytest.approx(4.0)
    assert submission.scores.manager_rating is None
    assert submission.appraisal_period == "Q4 2024"
    assert submission.line_manager == "mgr1"

def test_submitted_only_allows_release_to_manager():
    assert allowed_actions(SubmissionStatus.SUBMITTED) == [WorkflowAction.RELEASE_TO_MANAGER]

def test_submitted_rejects_ceo_evaluation():
    submission = make_submission()
    with pytest.raises(InvalidTransitionError):
        transition_submission(submission, WorkflowAction.COMPLETE_CEO_EVALUATION, CEOEvaluation())

def test_allowed_actions_per_status():
    assert allowed_actions(SubmissionStatus.AVAILABLE_FOR_MANAGER) == [WorkflowAction.COMPLETE_MANAGER_EVALUATION]
    assert allowed_actions(SubmissionStatus.MANAGER_COMPLETED) == [
        WorkflowAction.RELEASE_TO_CEO,
        WorkflowAction.MARK_COMPLETED,
    ]
    assert allowed_actions(SubmissionStatus.AVAILABLE_FOR_CEO) == [
        WorkflowAction.COMPLETE_CEO_EVALUATION,
        WorkflowAction.MARK_COMPLETED,
    ]
    assert allowed_actions(SubmissionStatus.COMPLETED) == []

def test_transition_returns_new_record():
    submission = make_submission()
    released = transition_submission(submission, WorkflowAction.RELEASE_TO_MANAGER)
    assert released.status == SubmissionStatus.AVAILABLE_FOR_MANAGER
    assert submission.status == SubmissionStatus.SUBMITTED

def test_manager_evaluation_sets_manager_rating():
    submission = make_submission(status=SubmissionStatus.AVAILABLE_FOR_MANAGER)
    evaluation = ManagerEvaluation(
        productivity=5, quality=4, communication=4, teamwork=3, initiative=4, reliability=4,
        feedback="Solid quarter",
    )
    updated = transition_submission(submission, WorkflowAction.COMPLETE_MANAGER_EVALUATION, evaluation)
    assert updated.status == SubmissionStatus.MANAGER_COMPLETED
    assert updated.manager_evaluation == evaluation
    assert updated.scores.manager_rating == pytest.approx(4.0)
    assert updated.scores.self_rating == submission.scores.self_rating

def test_evaluation_action_requires_matching_payload():
    submission = make_submission(status=SubmissionStatus.AVAILABLE_FOR_MANAGER)
    with pytest.raises(InvalidTransitionError):
        transition_submission(submission, WorkflowAction.COMPLETE_MANAGER_EVALUATION)
    with pytest.raises(InvalidTransitionError):
        transition_submission(submission, WorkflowAction.COMPLETE_MANAGER_EVALUATION, CEOEvaluation())

def test_ceo_evaluation_completes_submission():
    submission = make_submission(status=SubmissionStatus.AVAILABLE_FOR_CEO)
    evaluation = CEOEvaluation(
        strategic_leadership=5, team_management=5, financial_performance=4,
        operational_excellence=4, stakeholder_relations=3, innovation_growth=3,
    )
    updated = transition_submission(submission, WorkflowAction.COMPLETE_CEO_EVALUATION, evaluation)
    assert updated.status == SubmissionStatus.COMPLETED
    assert updated.scores.ceo_rating == pytest.approx(4.0)

def test_mark_completed_skips_ceo_step():
    submission = make_submission(status=SubmissionStatus.MANAGER_COMPLETED)
    updated = transition_submission(submission, WorkflowAction.MARK_COMPLETED)
    assert updated.status == SubmissionStatus.COMPLETED
    assert updated.ceo_evaluation is None

def test_completed_is_terminal():
    submission = make_submission(status=SubmissionStatus.COMPLETED)
    for action in WorkflowAction:
        with pytest.raises(InvalidTransitionError):
            transition_submission(submission, action, ManagerEvaluation())

def test_role_gating():
    ensure_actor_allowed(WorkflowAction.RELEASE_TO_MANAGER, UserRole.ADMIN)
    ensure_actor_allowed(WorkflowAction.RELEASE_TO_CEO, UserRole.MANAGER)
    with pytest.raises(AccessDeniedError):
        ensure_actor_allowed(WorkflowAction.RELEASE_TO_MANAGER, UserRole.MANAGER)
    with pytest.raises(AccessDeniedError):
        ensure_actor_allowed(WorkflowAction.COMPLETE_CEO_EVALUATION, UserRole.ADMIN)
    with pytest.raises(AccessDeniedError):
        ensure_actor_allowed(WorkflowAction.COMPLETE_MANAGER_EVALUATION, UserRole.EMPLOYEE)


# --- Service over a repository ---

def test_full_review_cycle(service):
    appraisal = StaffAppraisalInput(review_period="Q1 2025")
    submission = service.submit_self_appraisal(EMPLOYEE, appraisal)
    assert submission.submission_date == FIXED_NOW

    service.apply(submission.id, WorkflowAction.RELEASE_TO_MANAGER, ADMIN)
    evaluated = service.apply(
        submission.id, WorkflowAction.COMPLETE_MANAGER_EVALUATION, MANAGER, ManagerEvaluation(),
    )
    assert evaluated.manager_evaluation.evaluated_at == FIXED_NOW
    assert evaluated.scores.manager_rating == pytest.approx(3.0)

    service.apply(submission.id, WorkflowAction.RELEASE_TO_CEO, MANAGER)
    done = service.apply(submission.id, WorkflowAction.COMPLETE_CEO_EVALUATION, CEO, CEOEvaluation())
    assert done.status == SubmissionStatus.COMPLETED
    assert service.get_submission(submission.id).status == SubmissionStatus.COMPLETED

def test_apply_rejects_wrong_role_before_touching_storage(service):
    submission = service.submit_self_appraisal(EMPLOYEE, StaffAppraisalInput())
    with pytest.raises(AccessDeniedError):
        service.apply(submission.id, WorkflowAction.RELEASE_TO_MANAGER, MANAGER)
    assert service.get_submission(submission.id).status == SubmissionStatus.SUBMITTED

def test_apply_unknown_submission(service):
    with pytest.raises(NotFoundError):
        service.apply("missing", WorkflowAction.RELEASE_TO_MANAGER, ADMIN)

def test_bulk_release_to_manager_skips_ineligible():
    repository = InMemoryRepository([
        make_submission("sub1"),
        make_submission("sub2", SubmissionStatus.AVAILABLE_FOR_MANAGER),
        make_submission("sub3", SubmissionStatus.MANAGER_COMPLETED),
        make_submission("sub4"),
    ])
    service = WorkflowService(repository)

    result = service.bulk_release_to_manager(["sub1", "sub2", "sub3", "nope"], ADMIN)

    assert result.updated == ["sub1"]
    assert result.skipped == ["sub2", "sub3", "nope"]
    statuses = {s.id: s.status for s in repository.get_all()}
    assert statuses["sub1"] == SubmissionStatus.AVAILABLE_FOR_MANAGER
    assert statuses["sub4"] == SubmissionStatus.SUBMITTED

def test_bulk_release_to_ceo_only_touches_manager_completed():
    repository = InMemoryRepository([
        make_submission("sub1", SubmissionStatus.MANAGER_COMPLETED),
        make_submission("sub2", SubmissionStatus.SUBMITTED),
    ])
    service = WorkflowService(repository)

    result = service.bulk_release_to_ceo(["sub1", "sub2"], MANAGER)

    assert result.updated == ["sub1"]
    assert result.skipped == ["sub2"]
    assert repository.get_all()[0].status == SubmissionStatus.AVAILABLE_FOR_CEO

def test_manager_cannot_evaluate_another_teams_submission():
    repository = InMemoryRepository([make_submission("sub1", SubmissionStatus.AVAILABLE_FOR_MANAGER)])
    service = WorkflowService(repository, clock=lambda: FIXED_NOW)
    other_manager = Actor(id="mgr2", role=UserRole.MANAGER)

    with pytest.raises(AccessDeniedError):
        service.apply("sub1", WorkflowAction.COMPLETE_MANAGER_EVALUATION, other_manager, ManagerEvaluation())

    stored = service.get_submission("sub1")
    assert stored.status == SubmissionStatus.AVAILABLE_FOR_MANAGER
    assert stored.manager_evaluation is None

def test_manager_cannot_evaluate_own_self_appraisal(service):
    manager = DirectoryUser(
        id="mgr2", email="mike.wilson@company.com", name="Mike Wilson",
        role=UserRole.MANAGER, department="Marketing", line_manager="ceo1",
    )
    submission = service.submit_self_appraisal(manager, StaffAppraisalInput())
    service.apply(submission.id, WorkflowAction.RELEASE_TO_MANAGER, ADMIN)

    with pytest.raises(AccessDeniedError):
        service.apply(
            submission.id, WorkflowAction.COMPLETE_MANAGER_EVALUATION,
            Actor(id="mgr2", role=UserRole.MANAGER), ManagerEvaluation(),
        )
    assert service.get_submission(submission.id).status == SubmissionStatus.AVAILABLE_FOR_MANAGER

def test_manager_cannot_release_another_teams_submission_to_ceo():
    repository = InMemoryRepository([make_submission("sub1", SubmissionStatus.MANAGER_COMPLETED)])
    service = WorkflowService(repository)

    with pytest.raises(AccessDeniedError):
        service.apply("sub1", WorkflowAction.RELEASE_TO_CEO, Actor(id="mgr2", role=UserRole.MANAGER))

    # Admins are not bound to a team
    released = service.apply("sub1", WorkflowAction.RELEASE_TO_CEO, ADMIN)
    assert released.status == SubmissionStatus.AVAILABLE_FOR_CEO

def test_bulk_release_to_ceo_skips_other_teams():
    repository = InMemoryRepository([
        make_submission("sub1", SubmissionStatus.MANAGER_COMPLETED),
        make_submission("sub2", SubmissionStatus.MANAGER_COMPLETED),
    ])
    service = WorkflowService(repository)

    result = service.bulk_release_to_ceo(["sub1", "sub2"], Actor(id="mgr2", role=UserRole.MANAGER))

    assert result.updated == []
    assert result.skipped == ["sub1", "sub2"]
    assert all(s.status == SubmissionStatus.MANAGER_COMPLETED for s in repository.get_all())
