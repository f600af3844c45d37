"""
Directory user model.
Holds the people who take part in an appraisal cycle and their reporting lines.
"""
from sqlalchemy import Column, String
import enum
from appraisal_api.database import Base


class UserRole(str, enum.Enum):
    """
    Roles taking part in the appraisal workflow.

    - ADMIN: Releases submissions and can close them out
    - CEO: Evaluates line managers on strategic KPIs
    - MANAGER: Evaluates direct reports
    - EMPLOYEE: Submits a self appraisal
    """
    ADMIN = "admin"
    CEO = "ceo"
    MANAGER = "manager"
    EMPLOYEE = "employee"


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    role = Column(String, default=UserRole.EMPLOYEE.value, nullable=False)
    department = Column(String, nullable=True)
    line_manager = Column(String, nullable=True, index=True)  # id of the reporting manager
    position = Column(String, nullable=True)

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"
