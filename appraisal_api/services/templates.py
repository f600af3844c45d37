"""
Appraisal template management.

Templates are named, ordered sets of weighted KPIs. Weights are percentages
and must add up to 100 (within a small tolerance) before a template can be
saved. Departments with a known KPI profile can get a ready-made template.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, List, Optional

from appraisal_api.core.config import settings
from appraisal_api.core.exceptions import NotFoundError, TemplateValidationError
from appraisal_api.models.template import TemplateType
from appraisal_api.schemas.template import (
    AppraisalTemplate,
    DepartmentInfo,
    DepartmentStat,
    KPIDefinition,
    RatingScaleEntry,
    TemplateCreate,
)

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_ID = "default-staff"

DEFAULT_STAFF_KPIS = [
    KPIDefinition(id="prod", name="Productivity & Output", description="Ability to complete tasks efficiently", weight=20),
    KPIDefinition(id="qual", name="Quality of Work", description="Accuracy and standard of work delivered", weight=20),
    KPIDefinition(id="comm", name="Communication Skills", description="Verbal and written communication effectiveness", weight=15),
    KPIDefinition(id="team", name="Teamwork & Collaboration", description="Ability to work effectively with others", weight=15),
    KPIDefinition(id="init", name="Initiative & Innovation", description="Proactive approach and creative thinking", weight=15),
    KPIDefinition(id="reli", name="Reliability & Attendance", description="Punctuality and dependability", weight=15),
]

DEPARTMENTS = [
    DepartmentInfo(id="it", name="Information Technology", icon="💻"),
    DepartmentInfo(id="finance", name="Finance", icon="💰"),
    DepartmentInfo(id="procurement", name="Procurement", icon="🛒"),
    DepartmentInfo(id="hr", name="Human Resources", icon="👥"),
    DepartmentInfo(id="sales", name="Sales", icon="📈"),
    DepartmentInfo(id="marketing", name="Marketing", icon="📊"),
    DepartmentInfo(id="operations", name="Operations", icon="⚙️"),
    DepartmentInfo(id="customer-service", name="Customer Service", icon="🎧"),
]

# (name, description, weight) per department with a default profile
DEPARTMENT_KPIS = {
    "it": [
        ("Technical Expertise", "Knowledge of programming languages, tools, and technologies", 25),
        ("Problem Solving", "Ability to debug and resolve technical issues", 20),
        ("Code Quality", "Writing clean, maintainable, and efficient code", 20),
        ("Project Delivery", "Meeting deadlines and delivering projects on time", 15),
        ("Innovation", "Implementing new technologies and best practices", 10),
        ("Documentation", "Creating and maintaining technical documentation", 10),
    ],
    "finance": [
        ("Financial Analysis", "Ability to analyze financial data and trends", 25),
        ("Accuracy", "Precision in financial calculations and reporting", 25),
        ("Compliance", "Adherence to financial regulations and standards", 20),
        ("Risk Management", "Identifying and mitigating financial risks", 15),
        ("Process Improvement", "Streamlining financial processes", 10),
        ("Stakeholder Communication", "Clear reporting to management and stakeholders", 5),
    ],
    "procurement": [
        ("Vendor Management", "Building and maintaining supplier relationships", 25),
        ("Cost Optimization", "Achieving cost savings and value for money", 25),
        ("Contract Negotiation", "Effective negotiation of terms and conditions", 20),
        ("Quality Assurance", "Ensuring supplier quality standards", 15),
        ("Market Research", "Staying informed about market trends and prices", 10),
        ("Risk Mitigation", "Managing supplier and procurement risks", 5),
    ],
}

RATING_SCALE = [
    RatingScaleEntry(value=1, label="Poor", description="Performance significantly below expectations"),
    RatingScaleEntry(value=2, label="Below Average", description="Performance somewhat below expectations"),
    RatingScaleEntry(value=3, label="Average", description="Performance meets basic expectations"),
    RatingScaleEntry(value=4, label="Good", description="Performance exceeds expectations"),
    RatingScaleEntry(value=5, label="Excellent", description="Performance significantly exceeds expectations"),
]


def validate_template(template) -> None:
    """
    Check a template before it is stored.

    Accepts anything with `name` and `kpis` (a create payload or a full
    template). Raises TemplateValidationError on the first problem found.
    """
    if not template.name or not template.name.strip():
        raise TemplateValidationError("Template name is required")

    total = sum(kpi.weight for kpi in template.kpis)
    if abs(total - 100) > settings.scoring.template_weight_tolerance:
        raise TemplateValidationError(
            "KPI weights must total 100%",
            details={"total_weight": total},
        )


def default_staff_template(now: datetime) -> AppraisalTemplate:
    return AppraisalTemplate(
        id=DEFAULT_TEMPLATE_ID,
        name="Standard Staff Appraisal",
        description="General purpose staff performance evaluation",
        type=TemplateType.STAFF,
        kpis=DEFAULT_STAFF_KPIS,
        created_at=now,
        updated_at=now,
    )


def find_department(department: str) -> DepartmentInfo:
    for info in DEPARTMENTS:
        if info.id == department:
            return info
    raise NotFoundError("Department", department)


class TemplateService:
    def __init__(self, repository, clock: Optional[Callable[[], datetime]] = None):
        self.repository = repository
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def list(
        self,
        type: Optional[TemplateType] = None,
        department: Optional[str] = None,
    ) -> List[AppraisalTemplate]:
        templates = self.repository.get_all()
        if type is not None:
            templates = [t for t in templates if t.type == type]
        if department is not None:
            templates = [t for t in templates if t.department == department]
        return templates

    def get(self, template_id: str) -> AppraisalTemplate:
        for template in self.repository.get_all():
            if template.id == template_id:
                return template
        raise NotFoundError("Template", template_id)

    def save(self, template: AppraisalTemplate) -> AppraisalTemplate:
        """Validate and store `template`, replacing any template with the same id."""
        try:
            validate_template(template)
        except TemplateValidationError as e:
            logger.warning(f"Rejected template '{template.name}': {e.message}")
            raise

        stamped = template.model_copy(update={"updated_at": self.clock()})
        templates = self.repository.get_all()
        for i, existing in enumerate(templates):
            if existing.id == stamped.id:
                templates[i] = stamped
                action = "updated"
                break
        else:
            templates.append(stamped)
            action = "created"

        self.repository.replace_all(templates)
        logger.info(f"Template {stamped.id} {action}: '{stamped.name}' ({len(stamped.kpis)} KPIs)")
        return stamped

    def create(self, data: TemplateCreate) -> AppraisalTemplate:
        now = self.clock()
        template = AppraisalTemplate(
            id=f"template-{uuid.uuid4().hex[:12]}",
            created_at=now,
            updated_at=now,
            **data.model_dump(),
        )
        return self.save(template)

    def update(self, template_id: str, data: TemplateCreate) -> AppraisalTemplate:
        existing = self.get(template_id)
        template = AppraisalTemplate(
            id=existing.id,
            created_at=existing.created_at,
            updated_at=existing.updated_at,
            **data.model_dump(),
        )
        return self.save(template)

    def delete(self, template_id: str) -> None:
        templates = self.repository.get_all()
        remaining = [t for t in templates if t.id != template_id]
        if len(remaining) == len(templates):
            raise NotFoundError("Template", template_id)
        self.repository.replace_all(remaining)
        logger.info(f"Template {template_id} deleted")

    def duplicate(self, template_id: str) -> AppraisalTemplate:
        source = self.get(template_id)
        now = self.clock()
        copy = source.model_copy(update={
            "id": f"template-{uuid.uuid4().hex[:12]}",
            "name": f"{source.name} (Copy)",
            "created_at": now,
            "updated_at": now,
        })
        return self.save(copy)

    def create_department_template(self, department: str) -> AppraisalTemplate:
        info = find_department(department)
        defaults = DEPARTMENT_KPIS.get(department)
        if not defaults:
            raise TemplateValidationError(
                f"No default KPIs are defined for {info.name}",
                details={"department": department},
            )

        now = self.clock()
        template = AppraisalTemplate(
            id=f"dept-{department}-{uuid.uuid4().hex[:12]}",
            name=f"{info.name} Staff Appraisal",
            description=f"Performance evaluation template specifically designed for {info.name} department",
            type=TemplateType.STAFF,
            department=department,
            kpis=[
                KPIDefinition(id=f"kpi-{index}", name=name, description=description, weight=weight)
                for index, (name, description, weight) in enumerate(defaults)
            ],
            created_at=now,
            updated_at=now,
        )
        return self.save(template)

    def department_stats(self) -> List[DepartmentStat]:
        templates = self.repository.get_all()
        return [
            DepartmentStat(
                **info.model_dump(),
                template_count=sum(1 for t in templates if t.department == info.id),
                has_default=info.id in DEPARTMENT_KPIS,
            )
            for info in DEPARTMENTS
        ]

    def ensure_default(self) -> bool:
        """Seed the standard staff template into an empty collection. Returns True if seeded."""
        if self.repository.get_all():
            return False
        self.repository.replace_all([default_staff_template(self.clock())])
        logger.info("Seeded default staff appraisal template")
        return True
