"""Filter extraction through a chat-completion backend with a forced tool call."""

import json
from typing import Any

import httpx
from pydantic import ValidationError

from propsearch.ai.errors import (
    InterpretError,
    InvalidQueryError,
    PaymentRequiredError,
    RateLimitError,
    ServiceNotConfiguredError,
)
from propsearch.ai.filters import (
    EXTRACT_FILTERS_FUNCTION,
    EXTRACT_FILTERS_TOOL,
    SYSTEM_INSTRUCTION,
    Filters,
)
from propsearch.logging_config import get_logger
from propsearch.settings import settings

logger = get_logger(__name__)


def build_completion_request(query: str, model: str) -> dict[str, Any]:
    """Chat-completion body that forces the backend to call ``extract_filters``.

    Args:
        query: Normalized user query, sent as the only user message
        model: Backend model identifier

    Returns:
        JSON-serializable request body
    """
    return {
        "model": model,
        "messages": [
            {"role": "system", "content": SYSTEM_INSTRUCTION},
            {"role": "user", "content": query},
        ],
        "tools": [EXTRACT_FILTERS_TOOL],
        "tool_choice": {"type": "function", "function": {"name": EXTRACT_FILTERS_FUNCTION}},
    }


def extract_tool_arguments(data: dict[str, Any]) -> dict[str, Any]:
    """Pull the first tool call's arguments out of a completion response.

    Raises:
        InvalidQueryError: The model answered without calling the function
        InterpretError: The response or the arguments are malformed
    """
    try:
        choices = data.get("choices") or [{}]
        message = choices[0].get("message") or {}
        tool_calls = message.get("tool_calls") or []
    except (AttributeError, IndexError, KeyError, TypeError) as e:
        raise InterpretError("Respuesta inesperada del servicio de IA") from e

    if not tool_calls:
        # No declared signal separates "nothing to extract" from a backend
        # hiccup here; treat it as un-interpretable input.
        logger.warning("tool_call_missing", response=json.dumps(data)[:500])
        raise InvalidQueryError()

    try:
        arguments = (tool_calls[0].get("function") or {}).get("arguments")
    except (AttributeError, IndexError, KeyError, TypeError) as e:
        raise InterpretError("Respuesta inesperada del servicio de IA") from e

    if isinstance(arguments, str):
        try:
            arguments = json.loads(arguments)
        except json.JSONDecodeError as e:
            logger.error("tool_arguments_unparsable", raw=arguments[:500])
            raise InterpretError("Error al procesar la respuesta de IA") from e

    if not isinstance(arguments, dict):
        logger.error("tool_arguments_invalid", raw=repr(arguments)[:500])
        raise InterpretError("Error al procesar la respuesta de IA")

    return arguments


class FilterExtractor:
    """Turns one query into ``Filters`` with a single backend call.

    Stateless apart from configuration; one instance can serve every request.
    """

    def __init__(
        self,
        api_key: str | None = None,
        url: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize extractor.

        Args:
            api_key: Bearer credential for the backend. Defaults to settings
            url: Chat-completions endpoint. Defaults to settings
            model: Model identifier. Defaults to settings
            timeout: Request timeout in seconds. Defaults to settings
            client: Shared HTTP client; a short-lived one is opened per call if omitted
        """
        self.api_key = api_key if api_key is not None else settings.ai_gateway_api_key
        self.url = url or settings.ai_gateway_url
        self.model = model or settings.ai_model
        self.timeout = timeout or settings.ai_request_timeout_seconds
        self._client = client

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def extract(self, query: str) -> Filters:
        """Interpret ``query`` into filters.

        Raises:
            ServiceNotConfiguredError: No backend credential
            RateLimitError: Backend answered 429
            PaymentRequiredError: Backend answered 402
            InvalidQueryError: The query carries no property-search intent
            InterpretError: Any other backend or parsing failure
        """
        if not self.is_configured:
            logger.error("backend_not_configured")
            raise ServiceNotConfiguredError()

        response = await self._post(build_completion_request(query, self.model))

        if response.status_code == 429:
            logger.warning("backend_rate_limited")
            raise RateLimitError()
        if response.status_code == 402:
            logger.warning("backend_payment_required")
            raise PaymentRequiredError()
        if not response.is_success:
            logger.error("backend_error", status=response.status_code, body=response.text[:500])
            raise InterpretError("Error en AI gateway")

        try:
            data = response.json()
        except ValueError as e:
            raise InterpretError("Respuesta inesperada del servicio de IA") from e
        if not isinstance(data, dict):
            raise InterpretError("Respuesta inesperada del servicio de IA")

        arguments = extract_tool_arguments(data)
        logger.debug("tool_call_arguments", arguments=arguments)

        if arguments.pop("is_valid", True) is False:
            logger.info("query_not_property_search", query=query)
            raise InvalidQueryError()

        try:
            filters = Filters.model_validate(arguments)
        except ValidationError as e:
            logger.error("tool_arguments_rejected", errors=e.errors(include_url=False))
            raise InterpretError("Error al procesar la respuesta de IA") from e

        logger.info("filters_extracted", query=query, filters=filters.to_dict())
        return filters

    async def _post(self, payload: dict[str, Any]) -> httpx.Response:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        try:
            if self._client is not None:
                return await self._client.post(self.url, headers=headers, json=payload, timeout=self.timeout)
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                return await client.post(self.url, headers=headers, json=payload)
        except httpx.TimeoutException as e:
            logger.error("backend_timeout", url=self.url)
            raise InterpretError("Tiempo de espera agotado con el servicio de IA") from e
        except httpx.RequestError as e:
            logger.error("backend_request_failed", error=str(e))
            raise InterpretError(f"Error en AI gateway: {e}") from e
