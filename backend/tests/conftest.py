"""Shared fixtures for propsearch tests."""

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from propsearch.ai.cache import InterpretCache
from propsearch.ai.extractor import FilterExtractor
from propsearch.ai.gateway_client import GatewayClient
from propsearch.ai.notifications import CollectingNotifier
from propsearch.ai.query_interpreter import QueryInterpreter

BACKEND_URL = "https://llm.test/v1/chat/completions"
GATEWAY_URL = "https://gateway.test/api/v1/interpret-search"


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def completion_response(arguments: Any, as_string: bool = True) -> dict[str, Any]:
    """Chat-completion body carrying one ``extract_filters`` tool call."""
    return {
        "choices": [
            {
                "message": {
                    "role": "assistant",
                    "tool_calls": [
                        {
                            "id": "call_1",
                            "type": "function",
                            "function": {
                                "name": "extract_filters",
                                "arguments": json.dumps(arguments) if as_string else arguments,
                            },
                        }
                    ],
                }
            }
        ]
    }


def request_query(request: httpx.Request) -> str:
    return json.loads(request.content)["query"]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> InterpretCache:
    return InterpretCache(ttl_seconds=300, clock=clock)


@pytest.fixture
def notifier() -> CollectingNotifier:
    return CollectingNotifier()


@pytest.fixture
def make_extractor() -> Callable[..., FilterExtractor]:
    """Build an extractor whose backend is answered by ``handler``."""

    def _make(handler, api_key: str = "test-key") -> FilterExtractor:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return FilterExtractor(api_key=api_key, url=BACKEND_URL, model="test-model", client=client)

    return _make


@pytest.fixture
def make_interpreter(cache: InterpretCache, notifier: CollectingNotifier) -> Callable[..., QueryInterpreter]:
    """Build an interpreter whose gateway is answered by ``handler``."""

    def _make(handler) -> QueryInterpreter:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        gateway = GatewayClient(url=GATEWAY_URL, anon_key="", timeout=5.0, client=client)
        return QueryInterpreter(gateway=gateway, cache=cache, notifier=notifier)

    return _make
