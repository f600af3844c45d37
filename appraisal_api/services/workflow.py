"""
Appraisal submission workflow.

A submission moves forward through five states:

    submitted -> available_for_manager -> manager_completed -> available_for_ceo -> completed

Admins release work to the next reviewer, managers and the CEO attach their
evaluations. The transition functions are pure and return new records;
`WorkflowService` persists the outcome through a `SubmissionRepository`.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Dict, FrozenSet, List, NamedTuple, Optional, Sequence

from appraisal_api.core.exceptions import AccessDeniedError, InvalidTransitionError, NotFoundError
from appraisal_api.models.submission import SubmissionStatus
from appraisal_api.models.user import UserRole
from appraisal_api.schemas.appraisal import StaffAppraisalInput
from appraisal_api.schemas.submission import (
    AppraisalSubmission,
    BulkActionResult,
    CEOEvaluation,
    ManagerEvaluation,
    SubmissionScores,
    WorkflowAction,
)
from appraisal_api.schemas.user import Actor, DirectoryUser
from appraisal_api.services.utils import mean

logger = logging.getLogger(__name__)


class Transition(NamedTuple):
    sources: FrozenSet[SubmissionStatus]
    target: SubmissionStatus
    roles: FrozenSet[UserRole]


TRANSITIONS: Dict[WorkflowAction, Transition] = {
    WorkflowAction.RELEASE_TO_MANAGER: Transition(
        frozenset({SubmissionStatus.SUBMITTED}),
        SubmissionStatus.AVAILABLE_FOR_MANAGER,
        frozenset({UserRole.ADMIN}),
    ),
    WorkflowAction.COMPLETE_MANAGER_EVALUATION: Transition(
        frozenset({SubmissionStatus.AVAILABLE_FOR_MANAGER}),
        SubmissionStatus.MANAGER_COMPLETED,
        frozenset({UserRole.MANAGER}),
    ),
    WorkflowAction.RELEASE_TO_CEO: Transition(
        frozenset({SubmissionStatus.MANAGER_COMPLETED}),
        SubmissionStatus.AVAILABLE_FOR_CEO,
        frozenset({UserRole.ADMIN, UserRole.MANAGER}),
    ),
    WorkflowAction.COMPLETE_CEO_EVALUATION: Transition(
        frozenset({SubmissionStatus.AVAILABLE_FOR_CEO}),
        SubmissionStatus.COMPLETED,
        frozenset({UserRole.CEO}),
    ),
    # Admin shortcut that closes a submission without the CEO step
    WorkflowAction.MARK_COMPLETED: Transition(
        frozenset({SubmissionStatus.MANAGER_COMPLETED, SubmissionStatus.AVAILABLE_FOR_CEO}),
        SubmissionStatus.COMPLETED,
        frozenset({UserRole.ADMIN}),
    ),
}

# Actions that must carry an evaluation of the given kind
EVALUATION_PAYLOADS = {
    WorkflowAction.COMPLETE_MANAGER_EVALUATION: ManagerEvaluation,
    WorkflowAction.COMPLETE_CEO_EVALUATION: CEOEvaluation,
}


def allowed_actions(status: SubmissionStatus) -> List[WorkflowAction]:
    """Actions that are legal from `status`, in workflow order."""
    return [action for action, rule in TRANSITIONS.items() if status in rule.sources]


def ensure_actor_allowed(action: WorkflowAction, role: UserRole) -> None:
    rule = TRANSITIONS[action]
    if role not in rule.roles:
        logger.warning(f"Role {role.value} attempted {action.value}")
        raise AccessDeniedError(
            f"Access denied. Required roles: {sorted(r.value for r in rule.roles)}"
        )


def is_within_reach(submission: AppraisalSubmission, actor: Actor) -> bool:
    """Managers may only act on submissions of their own direct reports, never their own."""
    if actor.role != UserRole.MANAGER:
        return True
    return submission.line_manager == actor.id and submission.employee_id != actor.id


def ensure_actor_owns(submission: AppraisalSubmission, actor: Actor) -> None:
    if not is_within_reach(submission, actor):
        logger.warning(f"Manager {actor.id} attempted to act on submission {submission.id} outside their team")
        raise AccessDeniedError("Access denied. Managers can only act on their own team's submissions.")


def new_submission(
    employee: DirectoryUser,
    self_appraisal: StaffAppraisalInput,
    submission_id: Optional[str] = None,
    submitted_at: Optional[datetime] = None,
) -> AppraisalSubmission:
    """
    Build a fresh submission from an employee's self appraisal.

    The self rating is the plain mean of the six self-rated KPIs on the 1-5
    scale. Department and reporting line come from the directory, falling
    back to what the employee typed on the form.
    """
    return AppraisalSubmission(
        id=submission_id or str(uuid.uuid4()),
        employee_id=employee.id,
        employee_name=employee.name,
        department=employee.department or self_appraisal.department,
        submission_date=submitted_at or datetime.now(timezone.utc),
        appraisal_period=self_appraisal.review_period,
        line_manager=employee.line_manager or "",
        status=SubmissionStatus.SUBMITTED,
        self_appraisal=self_appraisal,
        scores=SubmissionScores(self_rating=mean(self_appraisal.kpi_ratings())),
    )


def transition_submission(
    submission: AppraisalSubmission,
    action: WorkflowAction,
    payload=None,
) -> AppraisalSubmission:
    """
    Apply `action` to `submission` and return the updated copy.

    Raises InvalidTransitionError when the action is not legal from the
    current status, or when an evaluation action is missing its payload.
    The input record is never modified.
    """
    rule = TRANSITIONS[action]
    if submission.status not in rule.sources:
        raise InvalidTransitionError(
            f"Cannot {action.value} a submission in status {submission.status.value}",
            details={
                "submission_id": submission.id,
                "status": submission.status.value,
                "action": action.value,
            },
        )

    update = {"status": rule.target}

    expected = EVALUATION_PAYLOADS.get(action)
    if expected is not None:
        if not isinstance(payload, expected):
            raise InvalidTransitionError(
                f"{action.value} requires a {expected.__name__}",
                details={"submission_id": submission.id, "action": action.value},
            )
        rating = mean(payload.kpi_ratings())
        if expected is ManagerEvaluation:
            update["manager_evaluation"] = payload
            update["scores"] = submission.scores.model_copy(update={"manager_rating": rating})
        else:
            update["ceo_evaluation"] = payload
            update["scores"] = submission.scores.model_copy(update={"ceo_rating": rating})

    return submission.model_copy(update=update)


class WorkflowService:
    """
    Runs workflow actions against stored submissions.

    Every operation reads the whole collection, changes it in memory and
    writes it back with `replace_all`. Concurrent writers are not
    coordinated: the last write wins.
    """

    def __init__(self, repository, clock: Optional[Callable[[], datetime]] = None):
        self.repository = repository
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def list_submissions(self) -> List[AppraisalSubmission]:
        return self.repository.get_all()

    def get_submission(self, submission_id: str) -> AppraisalSubmission:
        for submission in self.repository.get_all():
            if submission.id == submission_id:
                return submission
        raise NotFoundError("Submission", submission_id)

    def submit_self_appraisal(
        self, employee: DirectoryUser, appraisal: StaffAppraisalInput
    ) -> AppraisalSubmission:
        submission = new_submission(employee, appraisal, submitted_at=self.clock())
        submissions = self.repository.get_all()
        submissions.append(submission)
        self.repository.replace_all(submissions)
        logger.info(
            f"Self appraisal {submission.id} submitted by {employee.id} "
            f"for period '{submission.appraisal_period}'"
        )
        return submission

    def apply(
        self,
        submission_id: str,
        action: WorkflowAction,
        actor: Actor,
        evaluation=None,
    ) -> AppraisalSubmission:
        ensure_actor_allowed(action, actor.role)

        submissions = self.repository.get_all()
        index = next((i for i, s in enumerate(submissions) if s.id == submission_id), None)
        if index is None:
            raise NotFoundError("Submission", submission_id)

        if evaluation is not None and evaluation.evaluated_at is None:
            evaluation = evaluation.model_copy(update={"evaluated_at": self.clock()})

        current = submissions[index]
        ensure_actor_owns(current, actor)

        try:
            updated = transition_submission(current, action, evaluation)
        except InvalidTransitionError as e:
            logger.warning(f"Rejected {action.value} on {submission_id} by {actor.id}: {e.message}")
            raise

        submissions[index] = updated
        self.repository.replace_all(submissions)
        logger.info(
            f"Submission {submission_id}: {current.status.value} -> {updated.status.value} "
            f"({action.value} by {actor.id})"
        )
        return updated

    def bulk_release_to_manager(self, submission_ids: Sequence[str], actor: Actor) -> BulkActionResult:
        return self._bulk(submission_ids, WorkflowAction.RELEASE_TO_MANAGER, actor)

    def bulk_release_to_ceo(self, submission_ids: Sequence[str], actor: Actor) -> BulkActionResult:
        return self._bulk(submission_ids, WorkflowAction.RELEASE_TO_CEO, actor)

    def _bulk(self, submission_ids: Sequence[str], action: WorkflowAction, actor: Actor) -> BulkActionResult:
        ensure_actor_allowed(action, actor.role)

        rule = TRANSITIONS[action]
        selected = set(submission_ids)
        updated, skipped = [], []

        submissions = self.repository.get_all()
        for i, submission in enumerate(submissions):
            if submission.id not in selected:
                continue
            if submission.status in rule.sources and is_within_reach(submission, actor):
                submissions[i] = transition_submission(submission, action)
                updated.append(submission.id)
            else:
                skipped.append(submission.id)

        # Ids that matched nothing are reported alongside ineligible ones
        known = {s.id for s in submissions}
        skipped.extend(sid for sid in submission_ids if sid not in known)

        if updated:
            self.repository.replace_all(submissions)
        logger.info(
            f"Bulk {action.value} by {actor.id}: {len(updated)} updated, {len(skipped)} skipped"
        )
        return BulkActionResult(updated=updated, skipped=skipped)
