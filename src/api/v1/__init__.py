"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.credits import router as credits_router
from api.v1.routes.profiles import router as profiles_router
from api.v1.routes.skills import router as skills_router
from api.v1.routes.tasks import router as tasks_router

router = APIRouter()
router.include_router(tasks_router)
router.include_router(skills_router)
router.include_router(credits_router)
router.include_router(profiles_router)
