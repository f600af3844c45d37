"""
Directory of appraisal participants and the submission queries built on it.
"""
import logging
from typing import Dict, List, Optional

from appraisal_api.core.exceptions import NotFoundError
from appraisal_api.models.submission import SubmissionStatus
from appraisal_api.models.user import UserRole
from appraisal_api.schemas.submission import AppraisalSubmission, SubmissionReport, SubmissionSummary
from appraisal_api.schemas.user import DirectoryUser
from appraisal_api.services.staff_appraisal import calculate_staff_appraisal
from appraisal_api.services.utils import mean

logger = logging.getLogger(__name__)

MATCH_ALL = "all"

DEFAULT_ROSTER = [
    DirectoryUser(id="admin1", email="admin@company.com", name="Admin User", role=UserRole.ADMIN,
                  department="Administration", position="System Administrator"),
    DirectoryUser(id="ceo1", email="ceo@company.com", name="John CEO", role=UserRole.CEO,
                  department="Executive", position="Chief Executive Officer"),
    DirectoryUser(id="mgr1", email="sarah.johnson@company.com", name="Sarah Johnson", role=UserRole.MANAGER,
                  department="Engineering", line_manager="ceo1", position="Engineering Manager"),
    DirectoryUser(id="mgr2", email="mike.wilson@company.com", name="Mike Wilson", role=UserRole.MANAGER,
                  department="Marketing", line_manager="ceo1", position="Marketing Manager"),
    DirectoryUser(id="mgr3", email="david.chen@company.com", name="David Chen", role=UserRole.MANAGER,
                  department="HR", line_manager="ceo1", position="HR Manager"),
    DirectoryUser(id="emp1", email="john.smith@company.com", name="John Smith", role=UserRole.EMPLOYEE,
                  department="Engineering", line_manager="mgr1", position="Software Engineer"),
    DirectoryUser(id="emp2", email="mary.davis@company.com", name="Mary Davis", role=UserRole.EMPLOYEE,
                  department="Marketing", line_manager="mgr2", position="Marketing Specialist"),
    DirectoryUser(id="emp3", email="robert.brown@company.com", name="Robert Brown", role=UserRole.EMPLOYEE,
                  department="Engineering", line_manager="mgr1", position="Senior Developer"),
    DirectoryUser(id="emp4", email="lisa.wilson@company.com", name="Lisa Wilson", role=UserRole.EMPLOYEE,
                  department="HR", line_manager="mgr3", position="HR Specialist"),
]


def _matches(value: str, wanted: Optional[str]) -> bool:
    return wanted is None or wanted == MATCH_ALL or value == wanted


def filter_submissions(
    submissions: List[AppraisalSubmission],
    period: Optional[str] = None,
    department: Optional[str] = None,
    status: Optional[str] = None,
) -> List[AppraisalSubmission]:
    """Keep submissions matching every given filter. None or "all" matches anything."""
    return [
        s for s in submissions
        if _matches(s.appraisal_period, period)
        and _matches(s.department, department)
        and _matches(s.status.value, status)
    ]


def filter_options(submissions: List[AppraisalSubmission]) -> Dict[str, List[str]]:
    return {
        "periods": sorted({s.appraisal_period for s in submissions if s.appraisal_period}),
        "departments": sorted({s.department for s in submissions if s.department}),
    }


def summarize(submissions: List[AppraisalSubmission]) -> SubmissionSummary:
    by_status = {status.value: 0 for status in SubmissionStatus}
    for s in submissions:
        by_status[s.status.value] += 1

    options = filter_options(submissions)
    return SubmissionSummary(
        total=len(submissions),
        pending_for_manager=by_status[SubmissionStatus.SUBMITTED.value],
        awaiting_manager_review=by_status[SubmissionStatus.AVAILABLE_FOR_MANAGER.value],
        by_status=by_status,
        periods=options["periods"],
        departments=options["departments"],
    )


def combined_score(submission: AppraisalSubmission) -> float:
    """Mean of self and manager rating once the manager has rated, else the self rating."""
    scores = submission.scores
    if scores.manager_rating is not None:
        return mean([scores.self_rating, scores.manager_rating])
    return scores.self_rating


def submission_report(submission: AppraisalSubmission) -> SubmissionReport:
    return SubmissionReport(
        submission_id=submission.id,
        employee_name=submission.employee_name,
        appraisal_period=submission.appraisal_period,
        status=submission.status,
        combined_score=combined_score(submission),
        result=calculate_staff_appraisal(submission.self_appraisal),
    )


class DirectoryService:
    def __init__(self, repository):
        self.repository = repository

    def list_users(self, role: Optional[UserRole] = None) -> List[DirectoryUser]:
        users = self.repository.get_all()
        if role is not None:
            users = [u for u in users if u.role == role]
        return users

    def get_user(self, user_id: str) -> DirectoryUser:
        for user in self.repository.get_all():
            if user.id == user_id:
                return user
        raise NotFoundError("User", user_id)

    def direct_reports(self, manager_id: str) -> List[DirectoryUser]:
        return [u for u in self.repository.get_all() if u.line_manager == manager_id]

    def submissions_for_manager(
        self, manager_id: str, submissions: List[AppraisalSubmission]
    ) -> List[AppraisalSubmission]:
        report_ids = {u.id for u in self.direct_reports(manager_id)}
        return [s for s in submissions if s.employee_id in report_ids]

    def submissions_for_ceo(self, submissions: List[AppraisalSubmission]) -> List[AppraisalSubmission]:
        manager_ids = {u.id for u in self.repository.get_all() if u.role == UserRole.MANAGER}
        return [s for s in submissions if s.employee_id in manager_ids]

    def ensure_roster(self) -> bool:
        """Seed the default roster into an empty directory. Returns True if seeded."""
        if self.repository.get_all():
            return False
        self.repository.replace_all(DEFAULT_ROSTER)
        logger.info(f"Seeded {len(DEFAULT_ROSTER)} directory users")
        return True
