from sqlalchemy import Column, String, Text, DateTime, JSON
from appraisal_api.database import Base
import enum

class TemplateType(str, enum.Enum):
    STAFF = "staff"
    MANAGER = "manager"

class Template(Base):
    __tablename__ = "appraisal_templates"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, default="")
    type = Column(String, default=TemplateType.STAFF.value, nullable=False)
    department = Column(String, nullable=True, index=True)
    kpis = Column(JSON, nullable=False, default=list)  # ordered [{id, name, description, weight}]
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<Template {self.id}: {self.name}>"
