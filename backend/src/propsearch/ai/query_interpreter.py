"""AI Query Interpreter - Converts natural language to property search filters."""

import asyncio
from enum import Enum

from propsearch.ai.cache import InterpretCache, interpret_cache, normalize_query
from propsearch.ai.errors import (
    InterpretError,
    InvalidQueryError,
    PaymentRequiredError,
    RateLimitError,
)
from propsearch.ai.filters import Filters
from propsearch.ai.gateway_client import (
    INVALID_QUERY_MESSAGE,
    INVALID_QUERY_SUGGESTION,
    EmptyResponseError,
    GatewayClient,
    GatewayTimeoutError,
)
from propsearch.ai.notifications import LogNotifier, Notification, Notifier
from propsearch.logging_config import get_logger

EMPTY_QUERY_MESSAGE = "Por favor describe qué buscas"
GENERIC_FAILURE_MESSAGE = "Error al procesar la búsqueda"


class InterpreterState(Enum):
    """Lifecycle of one gateway roundtrip."""

    IDLE = "idle"
    PENDING = "pending"
    RESOLVED = "resolved"
    CANCELLED = "cancelled"
    FAILED = "failed"


class QueryInterpreter:
    """Interprets free-text property searches into structured filters.

    Each instance has at most one gateway request in flight; starting a new
    one cancels the previous, and only the newest call's result is delivered
    or cached. The cache is shared process-wide unless one is injected.
    """

    def __init__(
        self,
        gateway: GatewayClient | None = None,
        cache: InterpretCache | None = None,
        notifier: Notifier | None = None,
    ):
        """Initialize query interpreter.

        Args:
            gateway: Edge gateway client. Defaults to one built from settings
            cache: Filters cache. Defaults to the process-wide cache
            notifier: Receives user-facing messages. Defaults to logging them
        """
        self.gateway = gateway or GatewayClient()
        self.cache = cache if cache is not None else interpret_cache
        self.notifier = notifier or LogNotifier()
        self.logger = get_logger(__name__)

        self.state = InterpreterState.IDLE
        self.last_outcome: InterpreterState | None = None
        self._inflight: asyncio.Task | None = None

    @property
    def is_processing(self) -> bool:
        """True while a gateway roundtrip is outstanding."""
        return self.state is InterpreterState.PENDING

    async def interpret(self, query: str) -> Filters | None:
        """Interpret a natural language query.

        Args:
            query: Text typed by the user

        Returns:
            Extracted filters, or None when the query was empty, could not be
            interpreted, failed, or was superseded by a newer call
        """
        if not query.strip():
            self._notify(EMPTY_QUERY_MESSAGE)
            return None

        key = normalize_query(query)

        cached = self.cache.get(key)
        if cached is not None:
            self.logger.debug("interpret_cache_hit", query=key)
            return cached

        if self._inflight is not None and not self._inflight.done():
            self.logger.debug("interpret_superseded")
            self._inflight.cancel()

        task = asyncio.ensure_future(self.gateway.fetch_filters(key))
        self._inflight = task
        self.state = InterpreterState.PENDING

        try:
            filters = await task
        except asyncio.CancelledError:
            if self._inflight is not task:
                self.logger.debug("interpret_cancelled", query=key)
                return None
            # The caller itself was cancelled
            self._complete(InterpreterState.CANCELLED)
            raise
        except Exception as e:
            if self._inflight is not task:
                return None
            self._complete(InterpreterState.FAILED)
            self._report_failure(key, e)
            return None

        if self._inflight is not task:
            # Answer arrived after a newer call started; drop it
            self.logger.debug("interpret_stale_response_dropped", query=key)
            return None

        self.cache.set(key, filters)
        self._complete(InterpreterState.RESOLVED)
        self.logger.info("interpret_resolved", query=key, filters=filters.to_dict())
        return filters

    def _complete(self, outcome: InterpreterState) -> None:
        self._inflight = None
        self.last_outcome = outcome
        self.state = InterpreterState.IDLE

    def _report_failure(self, key: str, error: Exception) -> None:
        """Log a failed roundtrip and send the matching user notification."""
        if isinstance(error, InvalidQueryError):
            self.logger.info("interpret_invalid_query", query=key)
            self._notify(
                error.message or INVALID_QUERY_MESSAGE,
                error.suggestion or INVALID_QUERY_SUGGESTION,
                duration_ms=5000,
            )
        elif isinstance(error, RateLimitError):
            self.logger.warning("interpret_rate_limited", query=key)
            self._notify(error.message)
        elif isinstance(error, PaymentRequiredError):
            self.logger.warning("interpret_payment_required", query=key)
            self._notify(error.message)
        elif isinstance(error, (GatewayTimeoutError, EmptyResponseError)):
            self.logger.warning("interpret_failed", query=key, error=error.message)
            self._notify(error.message)
        elif isinstance(error, InterpretError):
            self.logger.error("interpret_failed", query=key, error=error.message, status=error.status_code)
            self._notify(GENERIC_FAILURE_MESSAGE)
        else:
            self.logger.exception("interpret_unexpected_error", query=key)
            self._notify(GENERIC_FAILURE_MESSAGE)

    def _notify(self, message: str, description: str | None = None, duration_ms: int | None = None) -> None:
        self.notifier.notify(Notification(message=message, description=description, duration_ms=duration_ms))

    async def aclose(self) -> None:
        """Cancel any outstanding request and close the gateway client."""
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
        await self.gateway.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
