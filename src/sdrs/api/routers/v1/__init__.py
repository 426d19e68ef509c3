"""API v1 routers."""

from fastapi import APIRouter

from .retention_rules import router as retention_rules_router

router = APIRouter(prefix="/v1")

router.include_router(retention_rules_router)

__all__ = ["router", "retention_rules_router"]
