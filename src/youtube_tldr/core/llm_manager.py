"""LLM providers and their lifecycle for summary generation."""

import asyncio
from typing import Any, Dict, Optional

from groq import Groq
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from ..exceptions import ProviderNotConfigured, ProviderTransientFailure
from ..utils.logging import get_logger
from .config import config

logger = get_logger("llm_manager")


class LLMProvider:
    """A chat completion backend returning the raw text of one answer."""

    name = "provider"

    @property
    def is_configured(self) -> bool:
        raise NotImplementedError

    async def complete(self, system_prompt: str, user_prompt: str, model: Optional[str] = None) -> str:
        raise NotImplementedError


class OpenAIProvider(LLMProvider):
    """Primary provider: OpenAI chat models in JSON mode via LangChain."""

    name = "openai"

    def __init__(
        self,
        api_key: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None
    ):
        self.api_key = api_key if api_key is not None else config.api.openai_api_key
        self.temperature = temperature if temperature is not None else config.llm.temperature
        self.max_tokens = max_tokens or config.llm.max_tokens
        self.timeout = timeout or config.llm.timeout
        self._llm_cache: Dict[str, Any] = {}

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def get_llm(self, model: str) -> Any:
        """Chat model bound to JSON output, cached per model name."""
        if model in self._llm_cache:
            return self._llm_cache[model]

        logger.info(f"Creating OpenAI LLM: {model} (temp: {self.temperature})")
        llm = ChatOpenAI(
            model=model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
            timeout=self.timeout,
            max_retries=0,
            api_key=self.api_key
        ).bind(response_format={"type": "json_object"})

        self._llm_cache[model] = llm
        return llm

    async def complete(self, system_prompt: str, user_prompt: str, model: Optional[str] = None) -> str:
        if not self.is_configured:
            raise ProviderNotConfigured(provider=self.name)

        model = model or config.llm.default_model
        messages = [SystemMessage(content=system_prompt), HumanMessage(content=user_prompt)]
        try:
            response = await asyncio.wait_for(
                self.get_llm(model).ainvoke(messages),
                timeout=self.timeout
            )
        except asyncio.TimeoutError:
            raise ProviderTransientFailure(f"request timed out after {self.timeout}s", provider=self.name)
        except Exception as e:
            raise ProviderTransientFailure(str(e), provider=self.name) from e

        content = getattr(response, "content", None)
        if not content or not isinstance(content, str):
            raise ProviderTransientFailure("empty response", provider=self.name)
        return content


class GroqProvider(LLMProvider):
    """Secondary provider: Groq chat completions with a fixed model."""

    name = "groq"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None,
        client: Optional[Groq] = None
    ):
        self.api_key = api_key if api_key is not None else config.api.groq_api_key
        self.model = model or config.llm.fallback_model
        self.temperature = temperature if temperature is not None else config.llm.temperature
        self.max_tokens = max_tokens or config.llm.max_tokens
        self.timeout = timeout or config.llm.timeout
        self._client = client

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key) or self._client is not None

    @property
    def client(self) -> Groq:
        """Lazy initialization of the Groq client."""
        if self._client is None:
            self._client = Groq(api_key=self.api_key, timeout=self.timeout, max_retries=0)
        return self._client

    async def complete(self, system_prompt: str, user_prompt: str, model: Optional[str] = None) -> str:
        # The requested model is ignored; this provider always runs its own
        if not self.is_configured:
            raise ProviderNotConfigured(provider=self.name)

        chat_messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        try:
            response = await asyncio.wait_for(
                asyncio.to_thread(
                    self.client.chat.completions.create,
                    model=self.model,
                    messages=chat_messages,
                    temperature=self.temperature,
                    max_tokens=self.max_tokens,
                    stream=False
                ),
                timeout=self.timeout
            )
        except asyncio.TimeoutError:
            raise ProviderTransientFailure(f"request timed out after {self.timeout}s", provider=self.name)
        except Exception as e:
            raise ProviderTransientFailure(str(e), provider=self.name) from e

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError):
            content = None
        if not content:
            raise ProviderTransientFailure("empty response", provider=self.name)
        return content


class LLMManager:
    """Owns the primary and secondary providers used for summaries."""

    def __init__(
        self,
        primary: Optional[LLMProvider] = None,
        secondary: Optional[LLMProvider] = None
    ):
        self.primary = primary or OpenAIProvider()
        self.secondary = secondary or GroqProvider()

    def get_primary(self) -> LLMProvider:
        return self.primary

    def get_secondary(self) -> Optional[LLMProvider]:
        """Secondary provider, or None when it has no credentials."""
        if self.secondary is not None and self.secondary.is_configured:
            return self.secondary
        return None

    def get_info(self) -> Dict[str, Any]:
        return {
            "primary": self.primary.name,
            "primary_configured": self.primary.is_configured,
            "secondary": self.secondary.name if self.secondary else None,
            "secondary_configured": bool(self.get_secondary()),
        }
