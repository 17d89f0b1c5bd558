# Completion clients. Heavy SDKs are imported only for the selected provider.

from .echo_dev_client import EchoDevClient


def build_client(provider: str, model: str, cfg):
    if provider == "anthropic":
        from .anthropic_client import AnthropicClient

        return AnthropicClient(model=model, api_key=cfg.ANTHROPIC_API_KEY)
    if provider == "openai":
        from .openai_client import OpenAIClient

        return OpenAIClient(model=model, api_key=cfg.OPENAI_API_KEY)
    if provider == "ollama":
        from .ollama_client import OllamaClient

        return OllamaClient(model=model, host=cfg.OLLAMA_HOST)
    if provider == "echo":
        return EchoDevClient()
    raise ValueError(f"Unknown LLM provider: {provider}")


__all__ = ["EchoDevClient", "build_client"]
