"""Public trigger endpoint. Authenticated by each hook's own token."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from hookforge.application.api.v1.deps import ClientIP
from hookforge.application.api.v1.errors import error_body
from hookforge.application.api.v1.response import ApiResponse
from hookforge.domain.hook.service.hook import HookService

router = APIRouter(prefix="/webhook", tags=["Webhooks"], route_class=DishkaRoute)


class TriggerResult(BaseModel):
    status: str = "success"


@router.post("/{hook_id}", response_model=ApiResponse[TriggerResult])
async def trigger_hook(
    hook_id: str,
    client_ip: ClientIP,
    service: FromDishka[HookService],
    token: str = "",
) -> ApiResponse[TriggerResult]:
    """Trigger a hook: `POST /webhook/{hook_id}?token=...`.

    The request body is ignored.
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=error_body("missing_token", "Missing token parameter"),
        )

    await run_in_threadpool(service.trigger_hook, hook_id, token, client_ip)
    return ApiResponse(data=TriggerResult())
