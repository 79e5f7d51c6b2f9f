"""
Tests for the deep-dive tutor and its conversation history.
"""
import asyncio

import pytest
from unittest.mock import AsyncMock

from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from study_copilot.agents import DeepDiveAgent, DeepDiveSession
from study_copilot.core.schemas import DeepDiveTurn, Role


class TestDeepDiveAgent:
    """Test history-constrained replies"""

    def test_notes_truncated_in_prompt(self, invoker):
        agent = DeepDiveAgent(invoker, "n" * 5000 + "TAIL-MARKER")

        prompt = agent.get_system_prompt()

        assert "n" * 5000 in prompt
        assert "TAIL-MARKER" not in prompt
        assert "$$" in prompt

    @pytest.mark.asyncio
    async def test_history_sent_as_roles(self, invoker, llm_factory, mock_llm, ai_message):
        mock_llm.ainvoke = AsyncMock(return_value=ai_message("Light reactions happen in the thylakoids."))
        agent = DeepDiveAgent(invoker, "# Notes")
        history = [
            DeepDiveTurn(role=Role.USER, content="What is ATP?"),
            DeepDiveTurn(role=Role.ASSISTANT, content="An energy carrier."),
        ]

        reply = await agent.reply(history, "Where do light reactions happen?")

        assert reply == "Light reactions happen in the thylakoids."
        messages = mock_llm.ainvoke.call_args.args[0]
        assert [type(m) for m in messages] == [SystemMessage, HumanMessage, AIMessage, HumanMessage]
        assert messages[1].content == "What is ATP?"
        assert messages[2].content == "An energy carrier."
        assert messages[3].content[0]["text"] == "Where do light reactions happen?"
        assert llm_factory.call_args.args[0] == "flash-model"
        assert llm_factory.call_args.args[1].structured_output_schema is None

    @pytest.mark.asyncio
    async def test_empty_reply_fallback(self, invoker, mock_llm, ai_message):
        mock_llm.ainvoke = AsyncMock(return_value=ai_message(""))
        agent = DeepDiveAgent(invoker, "# Notes")

        assert await agent.reply([], "Hello?") == "I couldn't generate a response."

    @pytest.mark.asyncio
    async def test_errors_propagate(self, invoker, mock_llm):
        mock_llm.ainvoke = AsyncMock(side_effect=RuntimeError("500"))
        agent = DeepDiveAgent(invoker, "# Notes")

        with pytest.raises(RuntimeError):
            await agent.reply([], "Hello?")


class TestDeepDiveSession:
    """Test append-only history"""

    @pytest.mark.asyncio
    async def test_appends_user_then_assistant(self, invoker, mock_llm, ai_message):
        mock_llm.ainvoke = AsyncMock(side_effect=[ai_message("First answer"), ai_message("Second answer")])
        session = DeepDiveSession(DeepDiveAgent(invoker, "# Notes"))

        await session.ask("First?")
        await session.ask("Second?")

        assert [(t.role, t.content) for t in session.history] == [
            (Role.USER, "First?"),
            (Role.ASSISTANT, "First answer"),
            (Role.USER, "Second?"),
            (Role.ASSISTANT, "Second answer"),
        ]
        # The second call carried the first exchange as prior turns
        second_messages = mock_llm.ainvoke.call_args_list[1].args[0]
        assert len(second_messages) == 4

    @pytest.mark.asyncio
    async def test_failure_keeps_user_turn(self, invoker, mock_llm, ai_message):
        mock_llm.ainvoke = AsyncMock(side_effect=[RuntimeError("500 quota"), ai_message("Rayleigh scattering.")])
        session = DeepDiveSession(DeepDiveAgent(invoker, "# Notes"))

        with pytest.raises(RuntimeError):
            await session.ask("Why is the sky blue?")
        assert [(t.role, t.content) for t in session.history] == [(Role.USER, "Why is the sky blue?")]

        # The failed call did not carry its own message as a prior turn
        first_messages = mock_llm.ainvoke.call_args_list[0].args[0]
        assert [type(m) for m in first_messages] == [SystemMessage, HumanMessage]

        await session.ask("Why is the sky blue?")
        assert [t.role for t in session.history] == [Role.USER, Role.USER, Role.ASSISTANT]

    @pytest.mark.asyncio
    async def test_concurrent_asks_are_serialized(self, invoker, mock_llm, ai_message):
        replies = iter(["First answer", "Second answer"])

        async def slow_reply(messages, *args, **kwargs):
            await asyncio.sleep(0)
            return ai_message(next(replies))

        mock_llm.ainvoke = AsyncMock(side_effect=slow_reply)
        session = DeepDiveSession(DeepDiveAgent(invoker, "# Notes"))

        await asyncio.gather(session.ask("First?"), session.ask("Second?"))

        assert [(t.role, t.content) for t in session.history] == [
            (Role.USER, "First?"),
            (Role.ASSISTANT, "First answer"),
            (Role.USER, "Second?"),
            (Role.ASSISTANT, "Second answer"),
        ]
        second_messages = mock_llm.ainvoke.call_args_list[1].args[0]
        assert len(second_messages) == 4
