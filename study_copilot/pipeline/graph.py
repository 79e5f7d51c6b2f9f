from functools import partial
from typing import Any, Optional

from langgraph.graph import END, START, StateGraph

from study_copilot.core.fallback import FallbackInvoker

from .nodes import StageCallback, analyze_node, author_node, fetch_context_node
from .state import StudyState

# CompiledGraph is the return type of StateGraph.compile()
CompiledGraph = Any


def route_entry(state: StudyState) -> str:
    """Skip context retrieval when the state already carries a TopicContext."""
    if state.get("topic_context") is not None:
        return "analyze"
    return "fetch_context"


def create_study_graph(invoker: FallbackInvoker, on_stage: Optional[StageCallback] = None) -> CompiledGraph:
    """
    Create the forward path of the study pipeline.

    fetch_context -> analyze -> author, with fetch_context skipped when a
    cached context is supplied in the input state.

    Args:
        invoker: Shared FallbackInvoker for all phases
        on_stage: Optional callback invoked with each stage as it starts

    Returns:
        Compiled study graph
    """
    graph_builder = StateGraph(StudyState)

    graph_builder.add_node("fetch_context", partial(fetch_context_node, invoker=invoker, on_stage=on_stage))
    graph_builder.add_node("analyze", partial(analyze_node, invoker=invoker, on_stage=on_stage))
    graph_builder.add_node("author", partial(author_node, invoker=invoker, on_stage=on_stage))

    graph_builder.add_conditional_edges(
        START,
        route_entry,
        {"fetch_context": "fetch_context", "analyze": "analyze"}
    )
    graph_builder.add_edge("fetch_context", "analyze")
    graph_builder.add_edge("analyze", "author")
    graph_builder.add_edge("author", END)

    return graph_builder.compile()
