class ReadwiseAudioError(Exception):
    """Base class for errors raised by the service layer."""


class ConfigurationError(ReadwiseAudioError):
    """A required credential or setting is missing."""


class UpstreamError(ReadwiseAudioError):
    """The article store answered with a non-success status or was unreachable."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class NotFoundError(UpstreamError):
    """The article store does not know the requested document."""


class SummarizerError(ReadwiseAudioError):
    """The language model call failed."""

    def __init__(
        self, message: str, status: int | None = None, body: str = ""
    ) -> None:
        super().__init__(message)
        self.status = status
        self.body = body


class TTSError(ReadwiseAudioError):
    """Speech synthesis is unavailable; callers fall back to browser TTS."""
