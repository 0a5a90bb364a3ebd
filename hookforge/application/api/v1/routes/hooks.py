"""Admin routes for managing hooks."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Response
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

from hookforge.application.api.v1.deps import AdminAuth
from hookforge.application.api.v1.response import ApiResponse
from hookforge.domain.hook.model.hook import Hook
from hookforge.domain.hook.service.hook import HookService

router = APIRouter(
    prefix="/hooks",
    tags=["Hooks"],
    route_class=DishkaRoute,
    dependencies=[AdminAuth],
)


class CreateHookRequest(BaseModel):
    """Request body for creating a hook. An empty token is generated server-side."""

    id: str
    name: str
    description: str = ""
    token: str = ""
    flag_file: str
    enabled: bool = True


class UpdateHookRequest(BaseModel):
    """Request body for replacing a hook. The id in the path wins over the body."""

    id: str | None = None
    name: str
    description: str = ""
    token: str = ""  # Empty keeps the stored token
    flag_file: str
    enabled: bool = True


@router.get("", response_model=ApiResponse[list[Hook]])
async def list_hooks(service: FromDishka[HookService]) -> ApiResponse[list[Hook]]:
    hooks = await run_in_threadpool(service.get_all_hooks)
    return ApiResponse(data=hooks)


@router.get("/{hook_id}", response_model=ApiResponse[Hook])
async def get_hook(hook_id: str, service: FromDishka[HookService]) -> ApiResponse[Hook]:
    hook = await run_in_threadpool(service.get_hook, hook_id)
    return ApiResponse(data=hook)


@router.post("", response_model=ApiResponse[Hook], status_code=201)
async def create_hook(
    body: CreateHookRequest,
    service: FromDishka[HookService],
) -> ApiResponse[Hook]:
    """Create a hook. The response includes the token, generated if none was given."""
    hook = Hook(
        id=body.id,
        name=body.name,
        description=body.description,
        token=body.token or service.generate_token(),
        flag_file=body.flag_file,
        enabled=body.enabled,
    )
    created = await run_in_threadpool(service.create_hook, hook)
    return ApiResponse(data=created)


@router.put("/{hook_id}", response_model=ApiResponse[Hook])
async def update_hook(
    hook_id: str,
    body: UpdateHookRequest,
    service: FromDishka[HookService],
) -> ApiResponse[Hook]:
    token = body.token
    if not token:
        current = await run_in_threadpool(service.get_hook, hook_id)
        token = current.token

    hook = Hook(
        id=hook_id,
        name=body.name,
        description=body.description,
        token=token,
        flag_file=body.flag_file,
        enabled=body.enabled,
    )
    updated = await run_in_threadpool(service.update_hook, hook)
    return ApiResponse(data=updated)


@router.delete("/{hook_id}", status_code=204)
async def delete_hook(hook_id: str, service: FromDishka[HookService]) -> Response:
    await run_in_threadpool(service.delete_hook, hook_id)
    return Response(status_code=204)
