"""
LLM-backed agents that discover and extract candidate resources for review.
"""

__all__ = [
    'ChatLLM',
    'OpenAIChat',
    'DiscoveryService',
    'ExtractionService',
    'DiscoveredResource',
    'ExtractedResource',
    'ExtractedCandidate',
    'parse_json_or_raise',
]

from .agents import (
    ChatLLM,
    OpenAIChat,
    DiscoveryService,
    ExtractionService,
    DiscoveredResource,
    ExtractedResource,
    ExtractedCandidate,
    parse_json_or_raise,
)
