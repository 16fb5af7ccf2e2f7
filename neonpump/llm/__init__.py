from .groq_client import chat_json, LLMError, LLMConfigurationError

__all__ = ["chat_json", "LLMError", "LLMConfigurationError"]
