from pydantic import BaseModel, ConfigDict
from typing import Optional

from appraisal_api.models.user import UserRole


class DirectoryUser(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    name: str
    role: UserRole
    department: Optional[str] = None
    line_manager: Optional[str] = None
    position: Optional[str] = None


class Actor(BaseModel):
    """The user performing a request, as identified by request headers."""
    id: str
    role: UserRole
