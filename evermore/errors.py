"""
Error taxonomy shared by services and routers.

Every error carries the HTTP status it maps to and a message that is safe to
show to the client. Handlers in ``main.py`` turn them into ``{"message": ...}``.
"""


class EvermoreError(Exception):
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(EvermoreError):
    """Bad upload (type, size, missing file) or schema mismatch."""

    status_code = 400
    default_message = "Invalid request"


class NotFoundError(EvermoreError):
    """Entity is missing or belongs to another user; the two are never distinguished."""

    status_code = 404
    default_message = "Not found"


class VoiceModelNotReadyError(EvermoreError):
    status_code = 409
    default_message = "Voice model is still training"


class UpstreamServiceError(EvermoreError):
    """Text generation or speech synthesis failed."""

    status_code = 500
    default_message = "Failed to generate a response"


class PersistenceError(EvermoreError):
    status_code = 500
    default_message = "Storage is unavailable"
