"""
StudyPipeline: the stateful multi-phase workflow behind one study session.

    IDLE -> FETCHING_CONTEXT -> ANALYZING -> AUTHORING -> READY
    READY -> SYNTHESIZING_SIMULATOR -> READY

Any failure returns the pipeline to IDLE and re-raises the original error.
The TopicContext is fetched at most once per pipeline, so a retried run()
after an analysis or authoring failure goes straight to ANALYZING.
"""
import logging
from typing import List, Optional

from study_copilot.core.errors import PipelineStateError
from study_copilot.core.fallback import FallbackInvoker
from study_copilot.core.schemas import (
    DeepDiveTurn,
    Part,
    QuizItem,
    StudyPackage,
    StudyPlan,
    StudySession,
    TopicContext,
)

from .graph import create_study_graph
from .nodes import author_notes, build_simulator
from .state import PipelineStage, StudyState

logger = logging.getLogger(__name__)


class StudyPipeline:
    """Drives one topic (plus optional image or video) to a StudyPackage."""

    def __init__(self, invoker: FallbackInvoker, topic: str, media: Optional[Part] = None):
        topic = (topic or "").strip()
        if not topic and media is None:
            raise ValueError("A study pipeline needs a topic or a media part")

        self.invoker = invoker
        self.topic = topic
        self.media = media
        self.stage = PipelineStage.IDLE
        self.topic_context: Optional[TopicContext] = None
        self.plan: Optional[StudyPlan] = None
        self.package: Optional[StudyPackage] = None
        self._graph = create_study_graph(invoker, on_stage=self._set_stage)

    def _set_stage(self, stage: PipelineStage) -> None:
        if stage != self.stage:
            logger.info(f"Study pipeline: {self.stage.value} -> {stage.value}")
        self.stage = stage

    def _require_stage(self, operation: str, *allowed: PipelineStage) -> None:
        if self.stage not in allowed:
            allowed_names = ", ".join(stage.value for stage in allowed)
            raise PipelineStateError(
                f"Cannot {operation} while {self.stage.value} (allowed from: {allowed_names})"
            )

    async def run(self) -> StudyPackage:
        """
        Run context retrieval (once), analysis and authoring.

        Returns:
            The authored StudyPackage (no simulator yet)

        Raises:
            PipelineStateError: If a run or simulator synthesis is in progress
        """
        self._require_stage("run", PipelineStage.IDLE, PipelineStage.READY)
        self._set_stage(
            PipelineStage.ANALYZING if self.topic_context is not None else PipelineStage.FETCHING_CONTEXT
        )
        plan = None
        package = None

        state: StudyState = {
            "topic": self.topic,
            "media": self.media,
            "topic_context": self.topic_context,
        }
        try:
            async for update in self._graph.astream(state, stream_mode="updates"):
                for node_update in update.values():
                    if not node_update:
                        continue
                    # Cache the context as soon as it exists so a later failure keeps it.
                    if node_update.get("topic_context") is not None:
                        self.topic_context = node_update["topic_context"]
                    if node_update.get("plan") is not None:
                        plan = node_update["plan"]
                    if node_update.get("package") is not None:
                        package = node_update["package"]
        except Exception:
            self._set_stage(PipelineStage.IDLE)
            raise

        if package is None:
            self._set_stage(PipelineStage.IDLE)
            raise PipelineStateError("Study graph finished without producing a package")

        # Earlier results are replaced only once the new run has succeeded.
        self.plan = plan
        self.package = package
        self._set_stage(PipelineStage.READY)
        return package

    async def author(self) -> StudyPackage:
        """Re-run authoring for the current plan, replacing the package."""
        self._require_stage("author", PipelineStage.READY)
        self._set_stage(PipelineStage.AUTHORING)
        try:
            package = await author_notes(self.invoker, self.plan, self.topic)
        except Exception:
            self._set_stage(PipelineStage.IDLE)
            raise

        self.package = package
        self._set_stage(PipelineStage.READY)
        return package

    async def synthesize_simulator(self) -> Optional[str]:
        """
        Generate the interactive simulator for the current package.

        Returns:
            The simulator source, or None when the model returned no code (the
            package is left unchanged and the call may be retried)
        """
        self._require_stage("synthesize a simulator", PipelineStage.READY)
        self._set_stage(PipelineStage.SYNTHESIZING_SIMULATOR)
        try:
            source = await build_simulator(self.invoker, self.plan, self.package.notes_markdown)
        except Exception:
            self._set_stage(PipelineStage.IDLE)
            raise

        if source is not None:
            self.package = self.package.model_copy(update={"simulator_source": source})
        self._set_stage(PipelineStage.READY)
        return source

    def snapshot(
        self,
        quiz: Optional[List[QuizItem]] = None,
        chat_history: Optional[List[DeepDiveTurn]] = None
    ) -> StudySession:
        """Snapshot the current artifacts for an external session store."""
        return StudySession(
            topic=self.topic,
            plan=self.plan,
            package=self.package,
            quiz=list(quiz or []),
            chat_history=list(chat_history or []),
        )
