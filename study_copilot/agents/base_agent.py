from abc import ABC, abstractmethod
from typing import Sequence
import logging

from study_copilot.core.fallback import FallbackInvoker
from study_copilot.core.schemas import (
    DeepDiveTurn,
    GenerationOptions,
    GenerationRequest,
    GenerationResponse,
    ModelTier,
    Part,
)

logger = logging.getLogger(__name__)


class BaseAgent(ABC):
    """
    Abstract base class for single-shot generators layered on the FallbackInvoker.

    Provides common interface for:
    - Agent-specific system prompt
    - Building one GenerationRequest per call on the agent's model tier
    """

    model_tier: ModelTier = ModelTier.SECONDARY

    def __init__(self, invoker: FallbackInvoker):
        self.invoker = invoker

    @abstractmethod
    def get_system_prompt(self) -> str:
        """Return agent-specific system prompt (may be empty)."""
        pass

    async def _generate(
        self,
        parts: Sequence[Part],
        turns: Sequence[DeepDiveTurn] = (),
        structured_output_schema: dict = None
    ) -> GenerationResponse:
        """Issue one generation request with this agent's prompt and tier."""
        request = GenerationRequest(
            model_tier=self.model_tier,
            input=tuple(parts),
            turns=tuple(turns),
            options=GenerationOptions(
                structured_output_schema=structured_output_schema,
                system_preamble=self.get_system_prompt() or None,
            ),
        )
        logger.debug(f"{type(self).__name__} generating ({len(request.turns)} prior turns)")
        return await self.invoker.invoke(request)
