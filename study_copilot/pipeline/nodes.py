"""
Phase functions of the study pipeline and their graph node wrappers.

Each phase issues exactly one generation request through the FallbackInvoker.
The node wrappers adapt them to LangGraph: they read StudyState and return a
state-update dict.
"""
import logging
from typing import Any, Callable, Dict, Optional

from study_copilot.config import settings as config
from study_copilot.core.errors import ErrorKind, GenerationError
from study_copilot.core.extraction import extract_fenced_block, extract_json
from study_copilot.core.fallback import FallbackInvoker
from study_copilot.core.schemas import (
    GenerationOptions,
    GenerationRequest,
    ModelTier,
    Part,
    StudyPackage,
    StudyPlan,
    TopicContext,
)

from .prompts import (
    DEFAULT_MEDIA_INSTRUCTION,
    get_analysis_system_prompt,
    get_authoring_input,
    get_authoring_system_prompt,
    get_fact_retrieval_prompt,
    get_media_instruction,
    get_simulator_input,
    get_simulator_system_prompt,
)
from .state import PipelineStage, StudyState

logger = logging.getLogger(__name__)

StageCallback = Callable[[PipelineStage], None]

DEFAULT_TOPIC_CONTEXT = TopicContext(
    facts=("Learning is a journey.", "Stay curious.", "Knowledge is power."),
    search_summary="",
)


def _text_parts(*texts: str) -> tuple:
    return tuple(Part.from_text(text) for text in texts)


async def fetch_topic_context(invoker: FallbackInvoker, topic: str) -> TopicContext:
    """
    Gather facts and a search summary for the topic with one search-grounded call.

    The JSON shape is requested in the prompt: the search tool and a response
    schema cannot be combined on this endpoint. Never raises; any failure
    yields DEFAULT_TOPIC_CONTEXT.
    """
    request = GenerationRequest(
        model_tier=ModelTier.SECONDARY,
        input=_text_parts(get_fact_retrieval_prompt(topic, config.FACT_COUNT)),
        options=GenerationOptions(enable_search_tool=True),
    )
    try:
        response = await invoker.invoke(request)
        payload = extract_json(response.text)
        if not isinstance(payload, dict):
            raise GenerationError("Fact payload is not a JSON object", kind=ErrorKind.UNUSABLE_CONTENT)
        facts = payload.get("facts") or ()
        if isinstance(facts, (list, tuple)) and len(facts) != config.FACT_COUNT:
            logger.warning(f"Fact retrieval returned {len(facts)} facts, expected {config.FACT_COUNT}")
        return TopicContext(
            facts=facts,
            search_summary=payload.get("searchContext") or "",
        )
    except Exception as e:
        logger.warning(f"Fact retrieval failed, using defaults: {e}")
    return DEFAULT_TOPIC_CONTEXT


async def analyze_topic(
    invoker: FallbackInvoker,
    topic: str,
    context: TopicContext,
    media: Optional[Part] = None
) -> StudyPlan:
    """
    Produce the study plan narrative.

    Live search is enabled only when the context holds no search summary.
    """
    parts = []
    if media is not None:
        parts.append(media)
        parts.append(Part.from_text(get_media_instruction(media.is_video)))
    parts.append(Part.from_text(topic or DEFAULT_MEDIA_INSTRUCTION))

    request = GenerationRequest(
        model_tier=ModelTier.PRIMARY,
        input=tuple(parts),
        options=GenerationOptions(
            enable_search_tool=context.is_empty,
            reasoning_budget=config.ANALYSIS_THINKING_BUDGET,
            system_preamble=get_analysis_system_prompt(context),
        ),
    )
    response = await invoker.invoke(request)
    if not response.text.strip():
        raise GenerationError("Analysis produced no plan", kind=ErrorKind.UNUSABLE_CONTENT)

    plan = StudyPlan(narrative=response.text, citations=response.citations)
    missing = plan.missing_sections()
    if missing:
        logger.warning(f"Study plan is missing sections: {', '.join(missing)}")
    return plan


async def author_notes(invoker: FallbackInvoker, plan: StudyPlan, topic: str) -> StudyPackage:
    """Write the study notes for an approved plan."""
    request = GenerationRequest(
        model_tier=ModelTier.PRIMARY,
        input=_text_parts(*get_authoring_input(topic, plan.narrative)),
        options=GenerationOptions(
            reasoning_budget=config.AUTHORING_THINKING_BUDGET,
            system_preamble=get_authoring_system_prompt(),
        ),
    )
    response = await invoker.invoke(request)
    if not response.text.strip():
        raise GenerationError("Authoring produced no notes", kind=ErrorKind.UNUSABLE_CONTENT)
    return StudyPackage(notes_markdown=response.text)


async def build_simulator(invoker: FallbackInvoker, plan: StudyPlan, notes: str) -> Optional[str]:
    """
    Generate the single-file simulator document.

    Returns:
        HTML source, or None when the output holds no non-empty html fence
    """
    request = GenerationRequest(
        model_tier=ModelTier.PRIMARY,
        input=_text_parts(*get_simulator_input(plan.narrative, notes)),
        options=GenerationOptions(
            reasoning_budget=config.SIMULATOR_THINKING_BUDGET,
            system_preamble=get_simulator_system_prompt(),
        ),
    )
    response = await invoker.invoke(request)
    source = extract_fenced_block(response.text, "html")
    if source is None or not source.strip():
        logger.warning("Simulator output contained no html code block")
        return None
    return source


def _notify(on_stage: Optional[StageCallback], stage: PipelineStage) -> None:
    if on_stage is not None:
        on_stage(stage)


async def fetch_context_node(
    state: StudyState,
    invoker: FallbackInvoker,
    on_stage: Optional[StageCallback] = None
) -> Dict[str, Any]:
    _notify(on_stage, PipelineStage.FETCHING_CONTEXT)
    context = await fetch_topic_context(invoker, state.get("topic", ""))
    return {"topic_context": context}


async def analyze_node(
    state: StudyState,
    invoker: FallbackInvoker,
    on_stage: Optional[StageCallback] = None
) -> Dict[str, Any]:
    _notify(on_stage, PipelineStage.ANALYZING)
    plan = await analyze_topic(
        invoker,
        state.get("topic", ""),
        state.get("topic_context") or DEFAULT_TOPIC_CONTEXT,
        state.get("media"),
    )
    return {"plan": plan}


async def author_node(
    state: StudyState,
    invoker: FallbackInvoker,
    on_stage: Optional[StageCallback] = None
) -> Dict[str, Any]:
    _notify(on_stage, PipelineStage.AUTHORING)
    package = await author_notes(invoker, state["plan"], state.get("topic", ""))
    return {"package": package}
