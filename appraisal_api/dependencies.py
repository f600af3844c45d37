"""
Service providers for the routers.

Each provider wires a service to the SQLAlchemy repository bound to the
request's database session.
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from appraisal_api.database import get_db
from appraisal_api.services.directory import DirectoryService
from appraisal_api.services.repositories import (
    SqlSubmissionRepository,
    SqlTemplateRepository,
    SqlUserRepository,
)
from appraisal_api.services.templates import TemplateService
from appraisal_api.services.workflow import WorkflowService


def get_workflow_service(db: Session = Depends(get_db)) -> WorkflowService:
    return WorkflowService(SqlSubmissionRepository(db))


def get_template_service(db: Session = Depends(get_db)) -> TemplateService:
    return TemplateService(SqlTemplateRepository(db))


def get_directory_service(db: Session = Depends(get_db)) -> DirectoryService:
    return DirectoryService(SqlUserRepository(db))


__all__ = [
    "get_workflow_service",
    "get_template_service",
    "get_directory_service",
]
