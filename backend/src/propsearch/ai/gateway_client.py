"""HTTP client for the interpret-search edge gateway."""

import asyncio
from typing import Any

import httpx

from propsearch.ai.errors import (
    InterpretError,
    InvalidQueryError,
    PaymentRequiredError,
    RateLimitError,
)
from propsearch.ai.filters import Filters
from propsearch.logging_config import get_logger
from propsearch.settings import settings

logger = get_logger(__name__)

# Shown when the gateway reports invalid_query without its own text
INVALID_QUERY_MESSAGE = "Por favor describe mejor qué buscas"
INVALID_QUERY_SUGGESTION = "💡 Ejemplo: 'Apartamento de 2 habitaciones cerca del metro'"


class EmptyResponseError(InterpretError):
    """Gateway answered without a body."""

    default_message = "Sin respuesta del servidor. Intenta de nuevo."


class GatewayTimeoutError(InterpretError):
    """Gateway did not answer within the client timeout."""

    status_code = 504
    error_code = "timeout"
    default_message = "La búsqueda tardó demasiado (timeout)"


def error_from_response(status_code: int, body: Any) -> InterpretError | None:
    """Map a gateway response onto the shared error taxonomy.

    ``invalid_query`` is recognised by its body whatever the status, so
    gateways that send it with 200 and those that send it as an HTTP error
    end up as the same ``InvalidQueryError``.

    Returns:
        The error the response carries, or None for a successful response
    """
    error = body.get("error") if isinstance(body, dict) else None

    if error == InvalidQueryError.error_code:
        return InvalidQueryError(
            message=body.get("message") or INVALID_QUERY_MESSAGE,
            suggestion=body.get("suggestion") or INVALID_QUERY_SUGGESTION,
            status_code=status_code,
        )

    message = error if isinstance(error, str) and error else None
    if status_code == 429:
        return RateLimitError(message)
    if status_code == 402:
        return PaymentRequiredError(message)
    if not 200 <= status_code < 300:
        return InterpretError(message, status_code=status_code)
    if error:
        return InterpretError(message)
    return None


class GatewayClient:
    """Posts queries to the edge gateway and returns parsed filters."""

    def __init__(
        self,
        url: str | None = None,
        anon_key: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize gateway client.

        Args:
            url: Gateway endpoint. Defaults to settings
            anon_key: Public key sent as ``apikey`` and bearer token, if the gateway needs one
            timeout: Deadline in seconds for the whole call, response body included.
                Defaults to settings
            client: HTTP client to reuse; otherwise one is created and owned here
        """
        self.url = url if url is not None else settings.interpret_gateway_url
        self.anon_key = anon_key if anon_key is not None else settings.gateway_anon_key
        self.timeout = timeout if timeout is not None else settings.interpret_timeout_seconds
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=self.timeout)

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.anon_key:
            headers["apikey"] = self.anon_key
            headers["Authorization"] = f"Bearer {self.anon_key}"
        return headers

    async def fetch_filters(self, query: str) -> Filters:
        """Ask the gateway to interpret an already-normalized query.

        Raises:
            InvalidQueryError: Gateway says the query is un-interpretable
            RateLimitError: Gateway answered 429
            PaymentRequiredError: Gateway answered 402
            GatewayTimeoutError: No answer within ``timeout``
            EmptyResponseError: 2xx without a body
            InterpretError: Network failure or any other gateway error
        """
        try:
            response = await asyncio.wait_for(
                self._client.post(
                    self.url,
                    json={"query": query},
                    headers=self._headers(),
                    timeout=self.timeout,
                ),
                timeout=self.timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise GatewayTimeoutError() from e
        except httpx.RequestError as e:
            raise InterpretError(f"Request failed: {e}") from e

        body = None
        if response.content:
            try:
                body = response.json()
            except ValueError as e:
                if response.is_success:
                    raise InterpretError("Respuesta no válida del servidor") from e

        error = error_from_response(response.status_code, body)
        if error is not None:
            raise error

        if body is None:
            raise EmptyResponseError()

        try:
            return Filters.from_dict(body.get("filters"))
        except (AttributeError, ValueError) as e:
            logger.error("gateway_filters_invalid", body=str(body)[:500])
            raise InterpretError("Filtros inválidos en la respuesta") from e

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()
