from pydantic import BaseModel


class TTSRequest(BaseModel):
    text: str
    voice: str | None = None


class BrowserTTSFallback(BaseModel):
    use_browser_tts: bool = True
    text: str
