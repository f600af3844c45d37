from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime

from appraisal_api.models.template import TemplateType


class KPIDefinition(BaseModel):
    """A single weighted indicator inside a template."""
    id: str
    name: str = ""
    description: str = ""
    weight: float = Field(0, ge=0, le=100)  # percentage of the overall score


class AppraisalTemplate(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str = ""
    type: TemplateType = TemplateType.STAFF
    department: Optional[str] = None
    kpis: List[KPIDefinition] = []
    created_at: datetime
    updated_at: datetime

    @property
    def total_weight(self) -> float:
        return sum(kpi.weight for kpi in self.kpis)


class TemplateCreate(BaseModel):
    """Schema for creating or replacing a template. Validation of weights happens in the service."""
    name: str
    description: str = ""
    type: TemplateType = TemplateType.STAFF
    department: Optional[str] = None
    kpis: List[KPIDefinition] = []


class DepartmentInfo(BaseModel):
    id: str
    name: str
    icon: str


class DepartmentStat(DepartmentInfo):
    template_count: int
    has_default: bool


class RatingScaleEntry(BaseModel):
    value: int
    label: str
    description: str
