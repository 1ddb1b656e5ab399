from agentic_loop.llm.providers.base import ProviderAdapter
from agentic_loop.llm.providers.litellm_provider import LiteLLMProviderAdapter
from agentic_loop.llm.providers.rule_provider import RuleBasedProviderAdapter

__all__ = ["LiteLLMProviderAdapter", "ProviderAdapter", "RuleBasedProviderAdapter"]
