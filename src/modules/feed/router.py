from fastapi import APIRouter, Depends

from src.config.context import AppContext, get_context
from src.modules.feed.schemas import FeedResponse
from src.modules.readwise.schemas import FeedScope

router = APIRouter()


@router.get("/feed", response_model=FeedResponse)
async def get_feed(
    location: FeedScope = FeedScope.ALL,
    context: AppContext = Depends(get_context),
):
    result = await context.feed.assemble(location)
    return FeedResponse(
        articles=result.items,
        total_available=result.total_available,
        location=location,
    )
