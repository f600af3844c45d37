# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import submission, template, user

# Explicit class exports for cleaner imports
from .submission import Submission, SubmissionStatus
from .template import Template, TemplateType
from .user import User, UserRole

__all__ = [
    "Submission",
    "SubmissionStatus",
    "Template",
    "TemplateType",
    "User",
    "UserRole",
]
