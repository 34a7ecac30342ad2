import logging

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from src.config.context import AppContext, get_context
from src.modules.common.errors import TTSError
from src.modules.tts.schemas import BrowserTTSFallback, TTSRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/tts", response_model=None)
async def tts(
    body: TTSRequest, context: AppContext = Depends(get_context)
) -> StreamingResponse | BrowserTTSFallback:
    try:
        stream = await context.tts.synthesize(body.text, body.voice)
    except TTSError as exc:
        logger.info("Using browser TTS: %s", exc)
        return BrowserTTSFallback(text=body.text)

    return StreamingResponse(
        stream.iter_bytes(),
        media_type="audio/mpeg",
        headers={"Cache-Control": "no-cache"},
    )
