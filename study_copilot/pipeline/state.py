from enum import Enum
from typing import Optional, TypedDict

from study_copilot.core.schemas import Part, StudyPackage, StudyPlan, TopicContext


class PipelineStage(str, Enum):
    """Stages of the study pipeline state machine."""
    IDLE = "idle"
    FETCHING_CONTEXT = "fetching_context"
    ANALYZING = "analyzing"
    AUTHORING = "authoring"
    READY = "ready"
    SYNTHESIZING_SIMULATOR = "synthesizing_simulator"


class StudyState(TypedDict, total=False):
    """State flowing through the study graph"""
    topic: str
    media: Optional[Part]
    topic_context: Optional[TopicContext]  # Set once by fetch_context, reused on retries
    plan: Optional[StudyPlan]
    package: Optional[StudyPackage]
