from pydantic import BaseModel, ConfigDict, Field
from typing import Annotated, Dict, List, Literal, Optional, Union
from datetime import datetime
import enum

from appraisal_api.models.submission import SubmissionStatus
from appraisal_api.schemas.appraisal import StaffAppraisalInput, StaffAppraisalResult, STAFF_KPI_FIELDS

CEO_KPI_FIELDS = (
    "strategic_leadership",
    "team_management",
    "financial_performance",
    "operational_excellence",
    "stakeholder_relations",
    "innovation_growth",
)

class WorkflowAction(str, enum.Enum):
    RELEASE_TO_MANAGER = "release_to_manager"
    COMPLETE_MANAGER_EVALUATION = "complete_manager_evaluation"
    RELEASE_TO_CEO = "release_to_ceo"
    COMPLETE_CEO_EVALUATION = "complete_ceo_evaluation"
    MARK_COMPLETED = "mark_completed"

# --- Evaluations ---
class ManagerEvaluation(BaseModel):
    model_config = ConfigDict(frozen=True)

    evaluator_role: Literal["manager"] = "manager"
    productivity: int = Field(3, ge=1, le=5)
    quality: int = Field(3, ge=1, le=5)
    communication: int = Field(3, ge=1, le=5)
    teamwork: int = Field(3, ge=1, le=5)
    initiative: int = Field(3, ge=1, le=5)
    reliability: int = Field(3, ge=1, le=5)
    feedback: str = ""
    goals: str = ""  # goals for next period
    evaluated_at: Optional[datetime] = None

    def kpi_ratings(self) -> List[int]:
        return [getattr(self, field) for field in STAFF_KPI_FIELDS]

class CEOEvaluation(BaseModel):
    model_config = ConfigDict(frozen=True)

    evaluator_role: Literal["ceo"] = "ceo"
    strategic_leadership: int = Field(3, ge=1, le=5)
    team_management: int = Field(3, ge=1, le=5)
    financial_performance: int = Field(3, ge=1, le=5)
    operational_excellence: int = Field(3, ge=1, le=5)
    stakeholder_relations: int = Field(3, ge=1, le=5)
    innovation_growth: int = Field(3, ge=1, le=5)
    feedback: str = ""
    strategic_goals: str = ""
    evaluated_at: Optional[datetime] = None

    def kpi_ratings(self) -> List[int]:
        return [getattr(self, field) for field in CEO_KPI_FIELDS]

Evaluation = Annotated[Union[ManagerEvaluation, CEOEvaluation], Field(discriminator="evaluator_role")]

# --- Submissions ---
class SubmissionScores(BaseModel):
    model_config = ConfigDict(frozen=True)

    self_rating: float
    manager_rating: Optional[float] = None
    ceo_rating: Optional[float] = None

class AppraisalSubmission(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    employee_id: str
    employee_name: str
    department: str = ""
    submission_date: datetime
    appraisal_period: str = ""
    line_manager: str = ""
    status: SubmissionStatus = SubmissionStatus.SUBMITTED
    self_appraisal: StaffAppraisalInput
    manager_evaluation: Optional[ManagerEvaluation] = None
    ceo_evaluation: Optional[CEOEvaluation] = None
    scores: SubmissionScores

class TransitionRequest(BaseModel):
    evaluation: Optional[Evaluation] = None

class BulkActionRequest(BaseModel):
    submission_ids: List[str] = Field(..., min_length=1)

class BulkActionResult(BaseModel):
    updated: List[str]
    skipped: List[str]  # selected but not eligible in their current status

class SubmissionSummary(BaseModel):
    total: int
    pending_for_manager: int
    awaiting_manager_review: int
    by_status: Dict[str, int]
    periods: List[str]
    departments: List[str]

class SubmissionReport(BaseModel):
    submission_id: str
    employee_name: str
    appraisal_period: str
    status: SubmissionStatus
    combined_score: float
    result: StaffAppraisalResult
