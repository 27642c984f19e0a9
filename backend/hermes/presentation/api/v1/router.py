"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from hermes.presentation.api.v1.endpoints.health import router as health_router
from hermes.presentation.api.v1.endpoints.personnel import router as personnel_router
from hermes.presentation.api.v1.endpoints.users import router as users_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(personnel_router)
router.include_router(users_router)
