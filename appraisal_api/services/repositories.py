"""
Storage for submissions, templates and directory users.

Each repository works on the whole collection: `get_all()` returns every
record and `replace_all(records)` makes the stored collection equal to
`records` inside a single transaction. There is no partial update.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional, Protocol, Sequence

from sqlalchemy.orm import Session

from appraisal_api.models.submission import Submission, SubmissionStatus
from appraisal_api.models.template import Template, TemplateType
from appraisal_api.models.user import User
from appraisal_api.schemas.appraisal import StaffAppraisalInput
from appraisal_api.schemas.submission import (
    AppraisalSubmission,
    CEOEvaluation,
    ManagerEvaluation,
    SubmissionScores,
)
from appraisal_api.schemas.template import AppraisalTemplate, KPIDefinition
from appraisal_api.schemas.user import DirectoryUser

logger = logging.getLogger(__name__)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite drops the offset on timezone-aware columns; stored values are UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SubmissionRepository(Protocol):
    def get_all(self) -> List[AppraisalSubmission]: ...

    def replace_all(self, records: Sequence[AppraisalSubmission]) -> None: ...


class TemplateRepository(Protocol):
    def get_all(self) -> List[AppraisalTemplate]: ...

    def replace_all(self, records: Sequence[AppraisalTemplate]) -> None: ...


class UserRepository(Protocol):
    def get_all(self) -> List[DirectoryUser]: ...

    def replace_all(self, records: Sequence[DirectoryUser]) -> None: ...


class _SqlRepository:
    """
    Shared replace-all logic for the SQLAlchemy repositories.

    Rows missing from the new collection are deleted, the rest are merged by
    primary key, and the whole change is committed once.
    """
    model = None

    def __init__(self, db: Session):
        self.db = db

    def _rows(self):
        return self.db.query(self.model).all()

    def _replace(self, rows) -> None:
        keep = {row.id for row in rows}
        try:
            for existing in self._rows():
                if existing.id not in keep:
                    self.db.delete(existing)
            for row in rows:
                self.db.merge(row)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception(f"Failed to replace {self.model.__tablename__}")
            raise


class SqlSubmissionRepository(_SqlRepository):
    model = Submission

    def get_all(self) -> List[AppraisalSubmission]:
        rows = self.db.query(Submission).order_by(Submission.submission_date, Submission.id).all()
        return [self._to_record(row) for row in rows]

    def replace_all(self, records: Sequence[AppraisalSubmission]) -> None:
        self._replace([self._to_row(record) for record in records])

    @staticmethod
    def _to_record(row: Submission) -> AppraisalSubmission:
        return AppraisalSubmission(
            id=row.id,
            employee_id=row.employee_id,
            employee_name=row.employee_name,
            department=row.department or "",
            submission_date=as_utc(row.submission_date),
            appraisal_period=row.appraisal_period or "",
            line_manager=row.line_manager or "",
            status=SubmissionStatus(row.status),
            self_appraisal=StaffAppraisalInput.model_validate(row.self_appraisal),
            manager_evaluation=(
                ManagerEvaluation.model_validate(row.manager_evaluation)
                if row.manager_evaluation else None
            ),
            ceo_evaluation=(
                CEOEvaluation.model_validate(row.ceo_evaluation)
                if row.ceo_evaluation else None
            ),
            scores=SubmissionScores(
                self_rating=row.self_rating,
                manager_rating=row.manager_rating,
                ceo_rating=row.ceo_rating,
            ),
        )

    @staticmethod
    def _to_row(record: AppraisalSubmission) -> Submission:
        return Submission(
            id=record.id,
            employee_id=record.employee_id,
            employee_name=record.employee_name,
            department=record.department,
            submission_date=record.submission_date,
            appraisal_period=record.appraisal_period,
            line_manager=record.line_manager,
            status=record.status.value,
            self_appraisal=record.self_appraisal.model_dump(mode="json"),
            manager_evaluation=(
                record.manager_evaluation.model_dump(mode="json")
                if record.manager_evaluation else None
            ),
            ceo_evaluation=(
                record.ceo_evaluation.model_dump(mode="json")
                if record.ceo_evaluation else None
            ),
            self_rating=record.scores.self_rating,
            manager_rating=record.scores.manager_rating,
            ceo_rating=record.scores.ceo_rating,
        )


class SqlTemplateRepository(_SqlRepository):
    model = Template

    def get_all(self) -> List[AppraisalTemplate]:
        rows = self.db.query(Template).order_by(Template.created_at, Template.id).all()
        return [
            AppraisalTemplate(
                id=row.id,
                name=row.name,
                description=row.description or "",
                type=TemplateType(row.type),
                department=row.department,
                kpis=[KPIDefinition.model_validate(kpi) for kpi in row.kpis or []],
                created_at=as_utc(row.created_at),
                updated_at=as_utc(row.updated_at),
            )
            for row in rows
        ]

    def replace_all(self, records: Sequence[AppraisalTemplate]) -> None:
        self._replace([
            Template(
                id=record.id,
                name=record.name,
                description=record.description,
                type=record.type.value,
                department=record.department,
                kpis=[kpi.model_dump() for kpi in record.kpis],
                created_at=record.created_at,
                updated_at=record.updated_at,
            )
            for record in records
        ])


class SqlUserRepository(_SqlRepository):
    model = User

    def get_all(self) -> List[DirectoryUser]:
        rows = self.db.query(User).order_by(User.id).all()
        return [DirectoryUser.model_validate(row) for row in rows]

    def replace_all(self, records: Sequence[DirectoryUser]) -> None:
        self._replace([
            User(
                id=record.id,
                email=record.email,
                name=record.name,
                role=record.role.value,
                department=record.department,
                line_manager=record.line_manager,
                position=record.position,
            )
            for record in records
        ])


class InMemoryRepository:
    """List-backed repository for unit tests."""

    def __init__(self, records=None):
        self._records = list(records or [])

    def get_all(self) -> list:
        return list(self._records)

    def replace_all(self, records) -> None:
        self._records = list(records)
