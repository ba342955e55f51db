
class GatewayError(Exception):
    """Base error; carries the HTTP status and the message put in ``{"error": ...}``."""

    status_code: int = 500
    default_detail: str = "An unexpected error occurred while processing your request."

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(GatewayError):
    status_code = 400
    default_detail = "Invalid message format. Message must be a non-empty string."


class ConfigurationError(GatewayError):
    default_detail = "Gemini API key is not configured."


class ExternalServiceError(GatewayError):
    pass


class EmptyCompletionError(ExternalServiceError):
    default_detail = "No response generated from AI."
