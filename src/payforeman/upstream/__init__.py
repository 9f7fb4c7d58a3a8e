"""Clients for the hosted platform services."""

from payforeman.upstream.client import PlatformClient
from payforeman.upstream.llm import LlmClient, detect_provider, extract_batch_text

__all__ = ["PlatformClient", "LlmClient", "detect_provider", "extract_batch_text"]
