"""
LLM client configuration using DSPy.

Only used by the LLM translation provider. Supports Gemini (primary) and OpenAI.
"""

from __future__ import annotations

from functools import lru_cache

import dspy

from autotranslate.core.errors import ConfigurationError


@lru_cache
def get_lm(provider: str, model: str, api_key: str) -> dspy.LM:
    """
    Get configured language model.

    Args:
        provider: 'gemini' or 'openai'
        model: Model name without the litellm prefix
        api_key: Key for the provider

    Returns:
        Configured DSPy LM instance.
    """
    if not api_key:
        raise ConfigurationError(f"No API key configured for LLM provider '{provider}'")

    if provider == "gemini":
        # Use gemini/ prefix for litellm
        return dspy.LM(model=f"gemini/{model}", api_key=api_key)

    elif provider == "openai":
        return dspy.LM(model=f"openai/{model}", api_key=api_key)

    else:
        raise ConfigurationError(f"Unknown LLM provider: {provider}")

