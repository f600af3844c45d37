from fastapi import APIRouter
from appraisal_api.routers import appraisals, submissions, templates, users

# Centralized API router hub
# Routers are aggregated here and main.py only imports this single hub.
api_router = APIRouter()

api_router.include_router(appraisals.router)
api_router.include_router(submissions.router)
api_router.include_router(templates.router)
api_router.include_router(users.router)
