from fastapi import APIRouter

from appraisal_api.schemas.appraisal import (
    ItemAppraisalInput,
    ItemAppraisalResult,
    StaffAppraisalInput,
    StaffAppraisalResult,
)
from appraisal_api.services.item_appraisal import calculate_appraisal
from appraisal_api.services.staff_appraisal import calculate_staff_appraisal

router = APIRouter(prefix="/appraisals", tags=["Appraisals"])


@router.post("/item", response_model=ItemAppraisalResult)
def appraise_item(data: ItemAppraisalInput):
    """Estimate the current value of a physical asset."""
    return calculate_appraisal(data)


@router.post("/staff", response_model=StaffAppraisalResult)
def appraise_staff(data: StaffAppraisalInput):
    """Score a staff appraisal form without storing it."""
    return calculate_staff_appraisal(data)
