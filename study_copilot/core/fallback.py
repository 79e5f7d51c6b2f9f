"""
Fallback Invoker: one generation call with a single primary -> secondary hop.

A primary-tier call that fails because the model is unavailable for the
caller's key (see errors.classify_error) is re-issued once, unchanged, on the
secondary tier. Every other failure propagates as-is.
"""
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from langchain_core.language_models import BaseChatModel

from study_copilot.config import settings as config
from study_copilot.core.errors import ErrorKind, classify_error
from study_copilot.core.llm_utils import build_messages, message_to_response
from study_copilot.core.schemas import (
    GenerationOptions,
    GenerationRequest,
    GenerationResponse,
    ModelTier,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

GOOGLE_SEARCH_TOOL = {"google_search": {}}

LLMFactory = Callable[[str, GenerationOptions], BaseChatModel]


def create_llm(
    model_name: str,
    options: GenerationOptions,
    api_key: str,
    max_retries: int = config.LLM_MAX_RETRIES
) -> BaseChatModel:
    """
    Create a Gemini chat model configured for one request.

    Args:
        model_name: Gemini model identifier
        options: Request options (reasoning budget, response schema)
        api_key: Google API key
        max_retries: SDK-level attempts per call

    Returns:
        ChatGoogleGenerativeAI instance
    """
    from langchain_google_genai import ChatGoogleGenerativeAI

    kwargs = {}
    if options.reasoning_budget is not None:
        kwargs["thinking_budget"] = options.reasoning_budget
    if options.structured_output_schema is not None:
        kwargs["response_mime_type"] = "application/json"
        kwargs["response_schema"] = options.structured_output_schema

    return ChatGoogleGenerativeAI(
        model=model_name,
        google_api_key=api_key,
        max_retries=max_retries,
        **kwargs
    )


async def run_with_fallback(
    primary_call: Callable[[], Awaitable[T]],
    secondary_call: Callable[[], Awaitable[T]],
    label: str = "generation"
) -> T:
    """
    Await ``primary_call``; on a capability-unavailable failure await
    ``secondary_call`` once instead.

    Any other primary failure, and any secondary failure, propagates.
    """
    try:
        return await primary_call()
    except Exception as e:
        if classify_error(e) != ErrorKind.CAPABILITY_UNAVAILABLE:
            raise
        logger.warning(f"Primary tier unavailable for {label}, falling back to secondary tier: {e}")
    return await secondary_call()


class FallbackInvoker:
    """
    Issues generation requests against the primary/secondary model tiers.

    The invoker holds no per-call state and is safe to share between
    concurrent pipelines.
    """

    def __init__(
        self,
        api_key: Optional[str],
        primary_model: str = config.PRIMARY_MODEL,
        secondary_model: str = config.SECONDARY_MODEL,
        llm_factory: Optional[LLMFactory] = None
    ):
        """
        Initialize the invoker.

        Args:
            api_key: Google API key (opaque; never logged)
            primary_model: Model used for PRIMARY requests
            secondary_model: Model used for SECONDARY requests and as the fallback
            llm_factory: Optional (model_name, options) -> chat model factory,
                used instead of ChatGoogleGenerativeAI (e.g. in tests)
        """
        if llm_factory is None and not api_key:
            raise ValueError(
                "GOOGLE_API_KEY not set. Please set it as environment variable "
                "or pass api_key explicitly. Get your key from: https://aistudio.google.com/app/apikey"
            )
        self.primary_model = primary_model
        self.secondary_model = secondary_model
        self._api_key = api_key
        self._llm_factory = llm_factory

    def model_for(self, tier: ModelTier) -> str:
        return self.primary_model if tier == ModelTier.PRIMARY else self.secondary_model

    async def invoke(self, request: GenerationRequest) -> GenerationResponse:
        """
        Run one generation request.

        PRIMARY requests fall back to the secondary model at most once;
        SECONDARY requests are never retried.
        """
        if request.model_tier != ModelTier.PRIMARY:
            return await self._call(self.secondary_model, request)

        return await run_with_fallback(
            lambda: self._call(self.primary_model, request),
            lambda: self._call(self.secondary_model, request),
            label=self.primary_model
        )

    def _create_llm(self, model_name: str, options: GenerationOptions) -> BaseChatModel:
        if self._llm_factory is not None:
            return self._llm_factory(model_name, options)
        return create_llm(model_name, options, self._api_key)

    async def _call(self, model_name: str, request: GenerationRequest) -> GenerationResponse:
        llm = self._create_llm(model_name, request.options)
        if request.options.enable_search_tool:
            llm = llm.bind_tools([GOOGLE_SEARCH_TOOL])

        logger.debug(f"Calling {model_name} (search={request.options.enable_search_tool})")
        message = await llm.ainvoke(build_messages(request))
        return message_to_response(message)


def create_invoker(api_key: Optional[str] = None) -> FallbackInvoker:
    """Create a FallbackInvoker from configured models and credentials."""
    return FallbackInvoker(
        api_key=api_key or config.GOOGLE_API_KEY,
        primary_model=config.PRIMARY_MODEL,
        secondary_model=config.SECONDARY_MODEL
    )
