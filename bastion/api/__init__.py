"""API routes."""

from fastapi import APIRouter

from bastion.api import auth, content, health

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(content.router, prefix="/test", tags=["content"])
