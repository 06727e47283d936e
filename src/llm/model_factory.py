import json
from abc import ABC, abstractmethod
from typing import Any
from urllib import error, request

from src.config.logger import get_logger
from src.config.settings import settings

_logger = get_logger(__name__)


class BaseModelProvider(ABC):
    """Abstract provider contract for chat model creation."""

    name: str = "base"

    @abstractmethod
    def is_available(self, agent_key: str, model: str) -> bool:
        """Whether this provider can serve the given agent/model."""

    @abstractmethod
    def create(self, agent_key: str, model: str, temperature: float) -> Any:
        """Create provider-specific langchain chat model instance."""


class OpenAIProvider(BaseModelProvider):
    """OpenAI-compatible endpoint (Gemini's compatibility API by default)."""

    name = "openai"

    def is_available(self, agent_key: str, model: str) -> bool:
        return settings.has_openai_like_creds(agent_key)

    def create(self, agent_key: str, model: str, temperature: float) -> Any:
        from langchain_openai import ChatOpenAI

        # Upstream failures surface to the caller as-is; the client never retries.
        return ChatOpenAI(
            model=model,
            api_key=settings.OPENAI_API_KEY,
            base_url=settings.get_agent_base_url(agent_key, provider_hint=self.name),
            temperature=temperature,
            max_retries=0,
        )


class OllamaProvider(BaseModelProvider):
    name = "ollama"

    def _base_url(self, agent_key: str) -> str:
        return settings.get_agent_base_url(agent_key, provider_hint=self.name)

    def _model_exists(self, base_url: str, model: str) -> bool:
        tags_url = f"{base_url.rstrip('/')}/api/tags"
        try:
            with request.urlopen(tags_url, timeout=1.5) as resp:
                payload = json.loads(resp.read().decode("utf-8"))
        except (error.URLError, error.HTTPError, TimeoutError, ValueError):
            return False

        names = {
            (item.get("name", "") or "").strip().lower()
            for item in payload.get("models", [])
        }
        wanted = (model or "").strip().lower()
        if wanted in names:
            return True
        return ":" not in wanted and f"{wanted}:latest" in names

    def is_available(self, agent_key: str, model: str) -> bool:
        return self._model_exists(self._base_url(agent_key), model)

    def create(self, agent_key: str, model: str, temperature: float) -> Any:
        from langchain_ollama import ChatOllama

        return ChatOllama(
            model=model,
            base_url=self._base_url(agent_key),
            temperature=temperature,
        )


class ModelFactory:
    """Provider registry + resolution strategy."""

    def __init__(self) -> None:
        self.providers: dict[str, BaseModelProvider] = {
            OpenAIProvider.name: OpenAIProvider(),
            OllamaProvider.name: OllamaProvider(),
        }

    def resolve_provider(
        self,
        agent_key: str,
        model: str,
        explicit_provider: str,
    ) -> BaseModelProvider:
        provider_name = (explicit_provider or "").strip().lower()
        if provider_name and provider_name != "auto":
            provider = self.providers.get(provider_name)
            if provider is None:
                raise ValueError(f"Unknown provider: {provider_name}")
            return provider

        # Auto strategy: prefer local Ollama if model exists, else OpenAI-compatible.
        ollama = self.providers["ollama"]
        if ollama.is_available(agent_key, model):
            return ollama
        if self.providers["openai"].is_available(agent_key, model):
            return self.providers["openai"]
        return ollama

    def create_chat_model(self, agent_key: str, default_model: str, temperature: float) -> Any:
        model = settings.get_agent_model(agent_key, default_model)
        provider = self.resolve_provider(
            agent_key=agent_key,
            model=model,
            explicit_provider=settings.get_agent_provider(agent_key),
        )
        _logger.debug("[model_factory] agent=%s provider=%s model=%s", agent_key, provider.name, model)
        return provider.create(agent_key=agent_key, model=model, temperature=temperature)


_FACTORY = ModelFactory()


def get_chat_model(
    agent_key: str,
    default_model: str = "",
    temperature: float = 0.3,
) -> Any | None:
    """Build the chat model for ``agent_key``; None when no provider can be built."""
    try:
        return _FACTORY.create_chat_model(
            agent_key=agent_key,
            default_model=default_model or settings.DEFAULT_TEXT_MODEL,
            temperature=temperature,
        )
    except Exception as exc:
        _logger.warning("[model_factory] failed to build model for %s: %s", agent_key, exc)
        return None
