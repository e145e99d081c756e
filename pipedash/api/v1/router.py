"""Root API router for v1 endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from pipedash.api.v1 import accounts, analytics, deals, exports, health, imports, jobs, leaders, roles
from pipedash.core.config import get_config

api_router = APIRouter(prefix=get_config().API_PREFIX)
api_router.include_router(health.router)
api_router.include_router(deals.router)
api_router.include_router(jobs.router)
api_router.include_router(accounts.router)
api_router.include_router(leaders.router)
api_router.include_router(analytics.router)
api_router.include_router(imports.router)
api_router.include_router(exports.router)
api_router.include_router(roles.router)


def get_api_router() -> APIRouter:
    return api_router
