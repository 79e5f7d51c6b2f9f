"""Context pipeline: fact retrieval, analysis, authoring and simulator synthesis."""
from .graph import create_study_graph
from .nodes import (
    DEFAULT_TOPIC_CONTEXT,
    analyze_topic,
    author_notes,
    build_simulator,
    fetch_topic_context,
)
from .pipeline import StudyPipeline
from .state import PipelineStage, StudyState

__all__ = [
    "DEFAULT_TOPIC_CONTEXT",
    "PipelineStage",
    "StudyPipeline",
    "StudyState",
    "analyze_topic",
    "author_notes",
    "build_simulator",
    "create_study_graph",
    "fetch_topic_context",
]
