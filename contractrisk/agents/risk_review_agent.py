import logging
from typing import Callable, List, Optional

import httpx

from contractrisk.agents.fallback_reviewer_agent import FallbackReviewer
from contractrisk.core.config import Settings, get_settings
from contractrisk.core.llm import GroqProvider, OpenAICompatibleProvider, ReviewProvider
from contractrisk.schemas.risk import ProviderReview

logger = logging.getLogger(__name__)

# Order in which providers are tried when no explicit provider is configured
PROVIDER_PRIORITY = ("qwen", "deepseek", "groq")
MOCK_PROVIDER = "mock"


def provider_credential(name: str, config: Settings) -> str:
    """API key configured for a provider, empty when unset."""
    return {
        "qwen": config.QWEN_API_KEY,
        "deepseek": config.DEEPSEEK_API_KEY,
        "groq": config.GROQ_API_KEY,
    }.get(name, "")


def configured_providers(config: Settings) -> List[str]:
    """Providers that have a credential, in priority order."""
    return [name for name in PROVIDER_PRIORITY if provider_credential(name, config)]


def resolve_provider_name(config: Settings) -> Optional[str]:
    """Pick the provider to use, or None for the fallback reviewer.

    An explicit ``AI_PROVIDER`` wins when its credential is present,
    ``AI_PROVIDER=mock`` always selects the fallback, and otherwise the first
    provider in priority order with a credential is chosen.
    """
    explicit = config.AI_PROVIDER.strip().lower()
    if explicit == MOCK_PROVIDER:
        return None
    if explicit:
        if provider_credential(explicit, config):
            return explicit
        logger.warning(f"AI_PROVIDER={explicit} has no credential, using priority order")

    available = configured_providers(config)
    return available[0] if available else None


def build_provider(
    name: str,
    config: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ReviewProvider:
    """Construct a provider by name from settings.

    Args:
        name: One of the names in PROVIDER_PRIORITY
        config: Settings holding URLs, credentials and model names
        transport: Optional httpx transport for the HTTP providers

    Returns:
        The configured provider
    """
    common = dict(
        temperature=config.LLM_TEMPERATURE,
        max_tokens=config.LLM_MAX_TOKENS,
        timeout=config.LLM_TIMEOUT_SECONDS,
        max_prompt_chars=config.MAX_PROMPT_CHARS,
        excerpt_length=config.EXCERPT_LENGTH,
    )
    if name == "qwen":
        return OpenAICompatibleProvider(
            "qwen", config.QWEN_API_URL, config.QWEN_API_KEY, config.QWEN_MODEL,
            json_mode=True, transport=transport, **common,
        )
    if name == "deepseek":
        return OpenAICompatibleProvider(
            "deepseek", config.DEEPSEEK_API_URL, config.DEEPSEEK_API_KEY, config.DEEPSEEK_MODEL,
            transport=transport, **common,
        )
    if name == "groq":
        return GroqProvider(
            config.GROQ_API_KEY, config.GROQ_MODEL, base_url=config.GROQ_API_URL,
            transport=transport, **common,
        )
    raise ValueError(f"Unknown provider: {name}")


def select_provider(config: Optional[Settings] = None) -> ReviewProvider:
    """Select the review provider from the current environment."""
    config = config or get_settings()
    name = resolve_provider_name(config)
    if name is None:
        return FallbackReviewer(excerpt_length=config.EXCERPT_LENGTH, min_text_length=config.MIN_TEXT_LENGTH)
    return build_provider(name, config)


class RiskReviewAgent:
    """Agent for AI contract review with offline fallback."""

    def __init__(
        self,
        provider_factory: Callable[[], ReviewProvider] = select_provider,
        fallback: Optional[FallbackReviewer] = None,
    ):
        """Initialize the risk review agent.

        Args:
            provider_factory: Called on every analysis to pick the provider
            fallback: Reviewer used whenever the provider fails
        """
        self.provider_factory = provider_factory
        self.fallback = fallback or FallbackReviewer()

    async def analyze(self, text: str) -> ProviderReview:
        """Review a contract with the active provider.

        Never raises: any provider failure is logged and answered by the
        fallback reviewer.

        Args:
            text: Plain contract text

        Returns:
            Structured review from the provider or the fallback reviewer
        """
        provider_name = "unknown"
        try:
            provider = self.provider_factory()
            provider_name = provider.name
            logger.info(f"Using review provider: {provider_name}")
            return await provider.review(text)
        except Exception as e:
            logger.warning(f"Review with {provider_name} failed, using fallback reviewer: {str(e)}")
            return self.fallback.review_sync(text)
