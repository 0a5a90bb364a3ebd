"""Health check endpoint."""

import logging
from datetime import UTC, datetime

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Request
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from hookforge.application.api.v1.deps import get_config
from hookforge.application.api.v1.response import ApiResponse
from hookforge.domain.hook.service.hook import HookService
from hookforge.domain.shared.error import HookforgeError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"], route_class=DishkaRoute)


class HealthStatus(BaseModel):
    status: str
    version: str
    timestamp: datetime


@router.get("/health", response_model=ApiResponse[HealthStatus])
async def health(request: Request, service: FromDishka[HookService]) -> ApiResponse[HealthStatus]:
    """Report whether the hook store is readable."""
    status = "up"
    try:
        await run_in_threadpool(service.get_all_hooks)
    except HookforgeError as e:
        logger.error("Health check failed: %s", e.message)
        status = "down"

    return ApiResponse(
        data=HealthStatus(
            status=status,
            version=get_config(request).server.version,
            timestamp=datetime.now(UTC),
        )
    )
