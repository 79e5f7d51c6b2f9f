import asyncio
import logging
from typing import List, Sequence

from study_copilot.config import settings as config
from study_copilot.core.schemas import DeepDiveTurn, Part, Role

from .base_agent import BaseAgent
from .prompts import EMPTY_REPLY_FALLBACK, get_deep_dive_system_prompt

logger = logging.getLogger(__name__)


class DeepDiveAgent(BaseAgent):
    """Tutor that answers follow-up questions about one set of study notes."""

    def __init__(self, invoker, notes: str, context_chars: int = config.DEEP_DIVE_CONTEXT_CHARS):
        super().__init__(invoker)
        self.notes = (notes or "")[:context_chars]

    def get_system_prompt(self) -> str:
        return get_deep_dive_system_prompt(self.notes)

    async def reply(self, history: Sequence[DeepDiveTurn], message: str) -> str:
        """
        Answer one user message given the prior conversation.

        History is sent in full as role-tagged turns. Call errors propagate.
        """
        response = await self._generate([Part.from_text(message)], turns=history)
        return response.text or EMPTY_REPLY_FALLBACK


class DeepDiveSession:
    """Append-only deep-dive conversation around a DeepDiveAgent."""

    def __init__(self, agent: DeepDiveAgent):
        self.agent = agent
        self._history: List[DeepDiveTurn] = []
        self._lock = asyncio.Lock()

    @property
    def history(self) -> List[DeepDiveTurn]:
        return list(self._history)

    async def ask(self, message: str) -> str:
        """
        Send a message and record the exchange.

        The user turn is recorded before the call is issued and stays in the
        history if the call fails; the reply is recorded only on success.
        Concurrent calls are serialized so each sees the turns before it.
        """
        async with self._lock:
            prior = tuple(self._history)
            self._history.append(DeepDiveTurn(role=Role.USER, content=message))
            answer = await self.agent.reply(prior, message)
            self._history.append(DeepDiveTurn(role=Role.ASSISTANT, content=answer))
        return answer
