from pydantic import BaseModel, ConfigDict, Field, computed_field
from typing import List, Literal
import enum

# --- Item appraisal ---
class ItemCategory(str, enum.Enum):
    ELECTRONICS = "electronics"
    FURNITURE = "furniture"
    VEHICLES = "vehicles"
    JEWELRY = "jewelry"
    EQUIPMENT = "equipment"
    ART = "art"
    OTHER = "other"

class ItemCondition(str, enum.Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"

Confidence = Literal["Low", "Medium", "High"]

class ItemAppraisalInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    category: ItemCategory
    condition: ItemCondition
    age: int = Field(0, ge=0)
    original_value: float = Field(0, ge=0)
    market_comparables: float = Field(0, ge=0)
    description: str = ""

class ItemAppraisalResult(BaseModel):
    estimated_value: int
    depreciation_factor: float  # fraction of value lost to age, negative when the item appreciates
    condition_adjustment: float
    market_adjustment: float
    confidence: Confidence

    @computed_field
    @property
    def depreciation_percent(self) -> str:
        return f"{self.depreciation_factor * 100:.1f}%"

    @computed_field
    @property
    def condition_percent(self) -> str:
        return _signed_percent(self.condition_adjustment)

    @computed_field
    @property
    def market_percent(self) -> str:
        return _signed_percent(self.market_adjustment)

def _signed_percent(value: float) -> str:
    sign = "+" if value > 0 else ""
    return f"{sign}{value * 100:.1f}%"

# --- Staff appraisal ---
STAFF_KPI_FIELDS = ("productivity", "quality", "communication", "teamwork", "initiative", "reliability")

class PerformanceLevel(str, enum.Enum):
    OUTSTANDING = "Outstanding"
    EXCEEDS = "Exceeds Expectations"
    MEETS = "Meets Expectations"
    BELOW = "Below Expectations"
    UNSATISFACTORY = "Unsatisfactory"

Grade = Literal["A+", "A", "B+", "B", "C+", "C", "D+", "D", "F"]

class StaffAppraisalInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    employee_name: str = ""
    position: str = ""
    department: str = ""
    review_period: str = ""
    supervisor: str = ""

    productivity: int = Field(3, ge=1, le=5)
    quality: int = Field(3, ge=1, le=5)
    communication: int = Field(3, ge=1, le=5)
    teamwork: int = Field(3, ge=1, le=5)
    initiative: int = Field(3, ge=1, le=5)
    reliability: int = Field(3, ge=1, le=5)

    goals_achieved: int = Field(0, ge=0)
    total_goals: int = Field(0, ge=0)

    strengths: str = ""
    improvements: str = ""
    comments: str = ""

    def kpi_ratings(self) -> List[int]:
        return [getattr(self, field) for field in STAFF_KPI_FIELDS]

class StaffAppraisalResult(BaseModel):
    overall_score: int
    overall_grade: Grade
    kpi_average: float
    goal_completion_rate: float
    performance_level: PerformanceLevel
    recommendations: List[str]
