"""Error taxonomy shared by the edge gateway and the query interpreter.

The gateway raises these while talking to the language-model backend and
renders them as JSON responses; the interpreter rebuilds them from those
responses so both sides reason about the same four kinds of failure.
"""

from typing import Any

DEFAULT_INVALID_MESSAGE = "Lo siento, soy un buscador especializado en propiedades inmobiliarias."
DEFAULT_INVALID_SUGGESTION = "Ejemplo: Apartamento de 2 habitaciones cerca del metro, máximo 2.5 millones"


class InterpretError(Exception):
    """Generic interpretation failure (network, upstream, malformed data)."""

    status_code = 500
    error_code = "unknown_error"
    default_message = "Error desconocido"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_payload(self) -> dict[str, Any]:
        """Response body the gateway sends for this error."""
        return {"error": self.message}


class InvalidQueryError(InterpretError):
    """The model could not map the text to any property filter."""

    status_code = 422
    error_code = "invalid_query"
    default_message = DEFAULT_INVALID_MESSAGE

    def __init__(
        self,
        message: str | None = None,
        suggestion: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message, status_code)
        self.suggestion = suggestion or DEFAULT_INVALID_SUGGESTION

    def to_payload(self) -> dict[str, Any]:
        return {
            "error": self.error_code,
            "message": self.message,
            "suggestion": self.suggestion,
        }


class RateLimitError(InterpretError):
    """Backend rejected the request because of request-rate limits."""

    status_code = 429
    error_code = "rate_limited"
    default_message = "Límite de solicitudes excedido. Intenta más tarde."


class PaymentRequiredError(InterpretError):
    """Backend quota or credits are exhausted."""

    status_code = 402
    error_code = "payment_required"
    default_message = "Fondos insuficientes. Por favor añade créditos."


class ServiceNotConfiguredError(InterpretError):
    """Backend credential missing from configuration. Needs an operator."""

    error_code = "not_configured"
    default_message = "service not configured"
