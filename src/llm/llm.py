"""Chat model wrapper backed by the model factory."""

from typing import Any, List, Optional

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

from src.config.settings import settings
from src.llm.model_factory import get_chat_model


class AIServiceError(RuntimeError):
    """The upstream AI completion failed or returned nothing usable."""


class _UnavailableLLM:
    def __init__(self, reason: str):
        self.reason = reason

    def invoke(self, _messages):
        raise AIServiceError(self.reason)

    async def ainvoke(self, _messages):
        raise AIServiceError(self.reason)


def _content_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        # Multimodal providers may answer with content blocks.
        parts = []
        for block in content:
            if isinstance(block, dict):
                parts.append(str(block.get("text", "")))
            else:
                parts.append(str(block))
        return "".join(parts)
    return str(content or "")


class ChatLLM:
    """Provider-agnostic chat wrapper returning plain response text.

    Every call is a single attempt: provider errors are re-raised as
    ``AIServiceError`` and an empty answer is treated as a failure.
    """

    def __init__(
        self,
        agent_key: str = "ANALYZER",
        model: Optional[str] = None,
        temperature: float = 0.3,
        llm: Any = None,
    ):
        self.agent_key = agent_key
        self.model = settings.get_agent_model(agent_key, model or settings.DEFAULT_TEXT_MODEL)
        self.temperature = temperature

        if llm is None:
            llm = get_chat_model(
                agent_key=agent_key,
                default_model=model or settings.DEFAULT_TEXT_MODEL,
                temperature=temperature,
            )
        if llm is None:
            llm = _UnavailableLLM(
                f"LLM initialization failed for agent '{agent_key}'. "
                "Please check provider/model env config."
            )
        self._llm = llm

    def invoke(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        messages = self._build_messages(prompt, system_prompt)
        try:
            response = self._llm.invoke(messages)
        except AIServiceError:
            raise
        except Exception as exc:
            raise AIServiceError(f"{type(exc).__name__}: {exc}") from exc
        return self._require_text(response)

    async def ainvoke(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        messages = self._build_messages(prompt, system_prompt)
        return await self._ainvoke_messages(messages)

    async def ainvoke_with_image(self, prompt: str, image_base64: str, mime_type: str = "image/jpeg") -> str:
        message = HumanMessage(
            content=[
                {"type": "text", "text": prompt},
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:{mime_type};base64,{image_base64}"},
                },
            ]
        )
        return await self._ainvoke_messages([message])

    async def _ainvoke_messages(self, messages: List[BaseMessage]) -> str:
        try:
            response = await self._llm.ainvoke(messages)
        except AIServiceError:
            raise
        except Exception as exc:
            raise AIServiceError(f"{type(exc).__name__}: {exc}") from exc
        return self._require_text(response)

    def _require_text(self, response: Any) -> str:
        text = _content_text(getattr(response, "content", response)).strip()
        if not text:
            raise AIServiceError("No valid response from the model")
        return text

    def _build_messages(
        self, prompt: str, system_prompt: Optional[str] = None
    ) -> List[BaseMessage]:
        messages: List[BaseMessage] = []
        if system_prompt:
            messages.append(SystemMessage(content=system_prompt))
        messages.append(HumanMessage(content=prompt))
        return messages

    @property
    def llm(self) -> Any:
        return self._llm


def get_llm(
    agent_key: str = "ANALYZER",
    model: Optional[str] = None,
    temperature: float = 0.3,
) -> ChatLLM:
    """Factory function to create provider-agnostic LLM wrapper."""
    return ChatLLM(agent_key=agent_key, model=model, temperature=temperature)
