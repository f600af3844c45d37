from fastapi import APIRouter, Depends, Response
from typing import List, Optional

from appraisal_api.dependencies import get_template_service
from appraisal_api.models.template import TemplateType
from appraisal_api.routers.auth_deps import get_actor, require_admin
from appraisal_api.schemas.template import (
    AppraisalTemplate,
    DepartmentStat,
    RatingScaleEntry,
    TemplateCreate,
)
from appraisal_api.services.templates import RATING_SCALE, TemplateService

router = APIRouter(prefix="/templates", tags=["Templates"])


@router.get("", response_model=List[AppraisalTemplate], dependencies=[Depends(get_actor)])
def list_templates(
    type: Optional[TemplateType] = None,
    department: Optional[str] = None,
    service: TemplateService = Depends(get_template_service),
):
    return service.list(type=type, department=department)


@router.post("", response_model=AppraisalTemplate, status_code=201, dependencies=[Depends(require_admin())])
def create_template(data: TemplateCreate, service: TemplateService = Depends(get_template_service)):
    return service.create(data)


@router.get("/departments", response_model=List[DepartmentStat], dependencies=[Depends(get_actor)])
def department_overview(service: TemplateService = Depends(get_template_service)):
    """Department catalogue with template counts and whether default KPIs exist."""
    return service.department_stats()


@router.post(
    "/departments/{department}",
    response_model=AppraisalTemplate,
    status_code=201,
    dependencies=[Depends(require_admin())],
)
def create_department_template(department: str, service: TemplateService = Depends(get_template_service)):
    return service.create_department_template(department)


@router.get("/rating-scale", response_model=List[RatingScaleEntry])
def rating_scale():
    return RATING_SCALE


@router.get("/{template_id}", response_model=AppraisalTemplate, dependencies=[Depends(get_actor)])
def get_template(template_id: str, service: TemplateService = Depends(get_template_service)):
    return service.get(template_id)


@router.put("/{template_id}", response_model=AppraisalTemplate, dependencies=[Depends(require_admin())])
def update_template(
    template_id: str,
    data: TemplateCreate,
    service: TemplateService = Depends(get_template_service),
):
    return service.update(template_id, data)


@router.delete("/{template_id}", status_code=204, dependencies=[Depends(require_admin())])
def delete_template(template_id: str, service: TemplateService = Depends(get_template_service)):
    service.delete(template_id)
    return Response(status_code=204)


@router.post(
    "/{template_id}/duplicate",
    response_model=AppraisalTemplate,
    status_code=201,
    dependencies=[Depends(require_admin())],
)
def duplicate_template(template_id: str, service: TemplateService = Depends(get_template_service)):
    return service.duplicate(template_id)
