"""Natural-language interpretation of property searches."""

from propsearch.ai.cache import InterpretCache, interpret_cache, normalize_query
from propsearch.ai.extractor import FilterExtractor
from propsearch.ai.filters import Filters, PropertyType
from propsearch.ai.gateway_client import GatewayClient
from propsearch.ai.query_interpreter import InterpreterState, QueryInterpreter

__all__ = [
    "FilterExtractor",
    "Filters",
    "GatewayClient",
    "InterpretCache",
    "InterpreterState",
    "PropertyType",
    "QueryInterpreter",
    "interpret_cache",
    "normalize_query",
]
