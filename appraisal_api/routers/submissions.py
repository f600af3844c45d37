from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from appraisal_api.core.exceptions import AccessDeniedError
from appraisal_api.dependencies import get_directory_service, get_workflow_service
from appraisal_api.models.user import UserRole
from appraisal_api.routers.auth_deps import get_actor, require_role
from appraisal_api.schemas.appraisal import StaffAppraisalInput
from appraisal_api.schemas.submission import (
    AppraisalSubmission,
    BulkActionRequest,
    BulkActionResult,
    SubmissionReport,
    SubmissionSummary,
    TransitionRequest,
    WorkflowAction,
)
from appraisal_api.schemas.user import Actor
from appraisal_api.services.directory import (
    DirectoryService,
    filter_submissions,
    submission_report,
    summarize,
)
from appraisal_api.services.workflow import WorkflowService

router = APIRouter(prefix="/submissions", tags=["Submissions"])

REVIEWER_ROLES = {UserRole.ADMIN, UserRole.CEO}


def _ensure_can_view(submission: AppraisalSubmission, actor: Actor) -> None:
    """Employees and managers see their own submissions; managers also those of their reports."""
    if actor.role in REVIEWER_ROLES or submission.employee_id == actor.id:
        return
    if actor.role == UserRole.MANAGER and submission.line_manager == actor.id:
        return
    raise AccessDeniedError("Access denied. You can only view your own appraisals.")


@router.get("", response_model=List[AppraisalSubmission])
def list_submissions(
    period: Optional[str] = Query(None, description='Appraisal period, or "all"'),
    department: Optional[str] = Query(None, description='Department, or "all"'),
    status: Optional[str] = Query(None, description='Workflow status, or "all"'),
    service: WorkflowService = Depends(get_workflow_service),
    actor: Actor = Depends(require_role([UserRole.ADMIN, UserRole.CEO])),
):
    return filter_submissions(service.list_submissions(), period, department, status)


@router.get("/summary", response_model=SubmissionSummary)
def submissions_summary(
    service: WorkflowService = Depends(get_workflow_service),
    actor: Actor = Depends(require_role([UserRole.ADMIN])),
):
    """Counters for the admin dashboard and the available filter values."""
    return summarize(service.list_submissions())


@router.get("/ceo", response_model=List[AppraisalSubmission])
def submissions_for_ceo(
    service: WorkflowService = Depends(get_workflow_service),
    directory: DirectoryService = Depends(get_directory_service),
    actor: Actor = Depends(require_role([UserRole.ADMIN, UserRole.CEO])),
):
    """Self appraisals of line managers, reviewed by the CEO."""
    return directory.submissions_for_ceo(service.list_submissions())


@router.get("/manager/{manager_id}", response_model=List[AppraisalSubmission])
def submissions_for_manager(
    manager_id: str,
    service: WorkflowService = Depends(get_workflow_service),
    directory: DirectoryService = Depends(get_directory_service),
    actor: Actor = Depends(require_role([UserRole.ADMIN, UserRole.MANAGER])),
):
    if actor.role == UserRole.MANAGER and actor.id != manager_id:
        raise AccessDeniedError("Access denied. Managers can only view their own team.")
    return directory.submissions_for_manager(manager_id, service.list_submissions())


@router.post("", response_model=AppraisalSubmission, status_code=201)
def submit_self_appraisal(
    appraisal: StaffAppraisalInput,
    service: WorkflowService = Depends(get_workflow_service),
    directory: DirectoryService = Depends(get_directory_service),
    actor: Actor = Depends(require_role([UserRole.EMPLOYEE, UserRole.MANAGER])),
):
    """
    Submit the acting user's self appraisal.
    The submission enters the workflow in status `submitted`.
    """
    employee = directory.get_user(actor.id)
    return service.submit_self_appraisal(employee, appraisal)


@router.post("/bulk/release-to-manager", response_model=BulkActionResult)
def bulk_release_to_manager(
    request: BulkActionRequest,
    service: WorkflowService = Depends(get_workflow_service),
    actor: Actor = Depends(require_role([UserRole.ADMIN])),
):
    return service.bulk_release_to_manager(request.submission_ids, actor)


@router.post("/bulk/release-to-ceo", response_model=BulkActionResult)
def bulk_release_to_ceo(
    request: BulkActionRequest,
    service: WorkflowService = Depends(get_workflow_service),
    actor: Actor = Depends(require_role([UserRole.ADMIN, UserRole.MANAGER])),
):
    return service.bulk_release_to_ceo(request.submission_ids, actor)


@router.get("/{submission_id}", response_model=AppraisalSubmission)
def get_submission(
    submission_id: str,
    service: WorkflowService = Depends(get_workflow_service),
    actor: Actor = Depends(get_actor),
):
    submission = service.get_submission(submission_id)
    _ensure_can_view(submission, actor)
    return submission


@router.get("/{submission_id}/report", response_model=SubmissionReport)
def get_submission_report(
    submission_id: str,
    service: WorkflowService = Depends(get_workflow_service),
    actor: Actor = Depends(get_actor),
):
    """Recomputed staff appraisal result plus the combined self/manager score."""
    submission = service.get_submission(submission_id)
    _ensure_can_view(submission, actor)
    return submission_report(submission)


@router.post("/{submission_id}/actions/{action}", response_model=AppraisalSubmission)
def apply_action(
    submission_id: str,
    action: WorkflowAction,
    request: Optional[TransitionRequest] = None,
    service: WorkflowService = Depends(get_workflow_service),
    actor: Actor = Depends(get_actor),
):
    """
    Run one workflow action on a submission.
    Evaluation actions expect the evaluation in the request body.
    """
    evaluation = request.evaluation if request else None
    return service.apply(submission_id, action, actor, evaluation)
