"""Error taxonomy shared by services and the request-handler boundary."""

from typing import Optional


class CagoError(Exception):
    """Base error carrying an HTTP status and a message safe to show users."""

    status_code = 500
    message = "Something went wrong. Please try again."

    def __init__(self, message: Optional[str] = None):
        if message:
            self.message = message
        super().__init__(self.message)


class UpstreamGenerationError(CagoError):
    """The completion call itself failed (network, auth, rate limit)."""

    message = "Generation service unavailable"


class GenerationParseError(CagoError):
    """Model output could not be turned into structured data."""

    message = "Failed to parse generated response"

    def __init__(self, message: Optional[str] = None, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text


class ValidationError(CagoError):
    status_code = 400
    message = "Invalid request"


class UnsupportedMediaError(ValidationError):
    message = "Unsupported file type"


class NotFoundError(CagoError):
    status_code = 404
    message = "Not found"


class InvalidTransitionError(CagoError):
    status_code = 409
    message = "Invalid step transition"
