from fastapi import APIRouter, Depends

from src.config.context import AppContext, get_context
from src.modules.actions.schemas import ActionRequest, ActionResponse

router = APIRouter()


@router.post("/archive", response_model=ActionResponse)
async def archive(body: ActionRequest, context: AppContext = Depends(get_context)):
    await context.actions.archive(body.id)
    return ActionResponse()


@router.post("/delete", response_model=ActionResponse)
async def delete(body: ActionRequest, context: AppContext = Depends(get_context)):
    await context.actions.delete(body.id)
    return ActionResponse()


@router.post("/later", response_model=ActionResponse)
async def later(body: ActionRequest, context: AppContext = Depends(get_context)):
    await context.actions.defer(body.id)
    return ActionResponse()
