import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx
from groq import APIError, AsyncGroq
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from contractrisk.core.prompts import build_review_messages
from contractrisk.core.review_parser import extract_review
from contractrisk.schemas.risk import ProviderReview

logger = logging.getLogger(__name__)


class ProviderError(Exception):
    """A review provider could not produce a usable review."""


def convert_messages(messages: List[BaseMessage]) -> List[Dict[str, str]]:
    """Convert messages to the chat completion format.

    Args:
        messages: List of messages

    Returns:
        List of message dictionaries with role and content
    """
    chat_messages = []
    for message in messages:
        if isinstance(message, SystemMessage):
            role = "system"
        elif isinstance(message, HumanMessage):
            role = "user"
        elif isinstance(message, AIMessage):
            role = "assistant"
        else:
            role = "user"

        chat_messages.append({
            "role": role,
            "content": message.content
        })
    return chat_messages


def message_content(data: Any) -> str:
    """Pull ``choices[0].message.content`` out of a chat completion body."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise ProviderError(f"Unexpected response envelope: {str(e)}") from e
    if not isinstance(content, str):
        raise ProviderError("Response content is not a string")
    return content


class ReviewProvider(ABC):
    """Anything that turns contract text into a structured review."""

    name: str = "base"

    @abstractmethod
    async def review(self, text: str) -> ProviderReview:
        """Review a contract.

        Raises:
            ProviderError: If no usable review could be produced
        """


class ChatReviewProvider(ReviewProvider):
    """Review provider backed by a remote chat completion model."""

    def __init__(
        self,
        name: str,
        api_key: str,
        model: str,
        temperature: float = 0.3,
        max_tokens: int = 4000,
        timeout: float = 60.0,
        max_prompt_chars: int = 8000,
        excerpt_length: int = 100,
    ):
        self.name = name
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.max_prompt_chars = max_prompt_chars
        self.excerpt_length = excerpt_length

    @abstractmethod
    async def complete(self, messages: List[Dict[str, str]]) -> str:
        """Send one chat completion request and return the reply content."""

    async def review(self, text: str) -> ProviderReview:
        if not self.api_key:
            raise ProviderError(f"No API key configured for {self.name}")

        messages = convert_messages(build_review_messages(text, self.max_prompt_chars))
        logger.info(f"Calling {self.name} ({self.model}) for contract review")
        content = await self.complete(messages)

        result = extract_review(content, provider=self.name, excerpt_length=self.excerpt_length)
        if not result.ok:
            raise ProviderError(f"{self.name} returned {result.error}")
        return result.review


class OpenAICompatibleProvider(ChatReviewProvider):
    """Provider speaking the OpenAI chat completion protocol over plain HTTP."""

    def __init__(
        self,
        name: str,
        base_url: str,
        api_key: str,
        model: str,
        json_mode: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        **kwargs: Any,
    ):
        super().__init__(name, api_key, model, **kwargs)
        self.base_url = base_url.rstrip("/")
        self.json_mode = json_mode
        self.transport = transport

    async def complete(self, messages: List[Dict[str, str]]) -> str:
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        if self.json_mode:
            payload["response_format"] = {"type": "json_object"}

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(f"{self.base_url}/chat/completions", json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise ProviderError(f"{self.name} request failed: {str(e)}") from e

        if response.is_error:
            raise ProviderError(f"{self.name} API error: {response.status_code} - {response.text}")

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(f"{self.name} returned a non-JSON body") from e
        return message_content(data)


class GroqProvider(ChatReviewProvider):
    """Provider using the Groq SDK."""

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        **kwargs: Any,
    ):
        super().__init__("groq", api_key, model, **kwargs)
        self.base_url = base_url
        self.transport = transport

    async def complete(self, messages: List[Dict[str, str]]) -> str:
        # A fresh client per call; it is closed once the request is done
        http_client = None
        if self.transport is not None:
            http_client = httpx.AsyncClient(transport=self.transport, timeout=self.timeout)
        client = AsyncGroq(
            api_key=self.api_key,
            base_url=self.base_url,
            timeout=self.timeout,
            max_retries=0,
            http_client=http_client,
        )
        try:
            completion = await client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                stream=False,
            )
        except APIError as e:
            raise ProviderError(f"Error in Groq chat completion: {str(e)}") from e
        finally:
            await client.close()

        content = completion.choices[0].message.content if completion.choices else None
        if not isinstance(content, str):
            raise ProviderError("Groq response content is empty")
        return content
