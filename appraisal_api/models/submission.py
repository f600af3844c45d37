from sqlalchemy import Column, String, Float, DateTime, JSON
from appraisal_api.database import Base
import enum

class SubmissionStatus(str, enum.Enum):
    SUBMITTED = "submitted"
    AVAILABLE_FOR_MANAGER = "available_for_manager"
    MANAGER_COMPLETED = "manager_completed"
    AVAILABLE_FOR_CEO = "available_for_ceo"
    COMPLETED = "completed"

class Submission(Base):
    __tablename__ = "appraisal_submissions"

    id = Column(String, primary_key=True, index=True)
    employee_id = Column(String, index=True, nullable=False)
    employee_name = Column(String, nullable=False)
    department = Column(String, index=True)
    submission_date = Column(DateTime(timezone=True), nullable=False)
    appraisal_period = Column(String, index=True)
    line_manager = Column(String, index=True)
    status = Column(String, default=SubmissionStatus.SUBMITTED.value, nullable=False) # enum value stored as text

    # Nested form payloads are kept whole
    self_appraisal = Column(JSON, nullable=False)
    manager_evaluation = Column(JSON, nullable=True)
    ceo_evaluation = Column(JSON, nullable=True)

    self_rating = Column(Float, nullable=False)
    manager_rating = Column(Float, nullable=True)
    ceo_rating = Column(Float, nullable=True)

    def __repr__(self):
        return f"<Submission {self.id} ({self.status})>"
