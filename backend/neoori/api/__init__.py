"""API router aggregation."""

from fastapi import APIRouter

from neoori.api.auth import router as auth_router
from neoori.api.users import router as users_router
from neoori.api.files import router as files_router

router = APIRouter(prefix="/api")

router.include_router(auth_router)
router.include_router(users_router)
router.include_router(files_router)
