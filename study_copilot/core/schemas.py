"""
Pydantic models for generation requests, responses and study artifacts.

Request/response values are frozen so they can be shared between concurrent
callers. Study artifacts (plan, package, quiz, chat turns) are plain data the
session store may persist verbatim.
"""
import base64
import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from study_copilot.core.errors import GenerationError
from study_copilot.core.extraction import split_markdown_sections

MAX_TOPIC_FACTS = 20
QUIZ_OPTION_COUNT = 4

# Fixed section headings of a study plan narrative, in order.
PLAN_SECTIONS = (
    "Analysis & Context",
    "Simulator Concept",
    "Visual Identity",
    "Verified Sources",
)


class ModelTier(str, Enum):
    """Capability level of the remote generation endpoint."""
    PRIMARY = "primary"
    SECONDARY = "secondary"


class PartKind(str, Enum):
    TEXT = "text"
    INLINE_DATA = "inline_data"


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class Part(BaseModel):
    """One element of a generation input or output: text or inline binary."""
    model_config = ConfigDict(frozen=True)

    kind: PartKind
    text: Optional[str] = None
    data: Optional[bytes] = None
    mime_type: Optional[str] = None

    @model_validator(mode="after")
    def check_payload(self) -> "Part":
        if self.kind == PartKind.TEXT and self.text is None:
            raise ValueError("text part requires text")
        if self.kind == PartKind.INLINE_DATA and (self.data is None or not self.mime_type):
            raise ValueError("inline data part requires data and mime_type")
        return self

    @classmethod
    def from_text(cls, text: str) -> "Part":
        return cls(kind=PartKind.TEXT, text=text)

    @classmethod
    def from_bytes(cls, data: bytes, mime_type: str) -> "Part":
        return cls(kind=PartKind.INLINE_DATA, data=data, mime_type=mime_type)

    @classmethod
    def from_base64(cls, encoded: str, mime_type: str) -> "Part":
        return cls.from_bytes(base64.b64decode(encoded), mime_type)

    @property
    def is_video(self) -> bool:
        return bool(self.mime_type and self.mime_type.startswith("video/"))

    def to_data_url(self) -> str:
        """Encode an inline part as a ``data:`` URL."""
        if self.kind != PartKind.INLINE_DATA:
            raise ValueError("only inline data parts can be encoded as data URLs")
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


class Citation(BaseModel):
    """Grounding source attached to a search-augmented response."""
    model_config = ConfigDict(frozen=True)

    title: str = ""
    uri: str

    def to_markdown(self) -> str:
        return f"[{self.title or self.uri}]({self.uri})"


class DeepDiveTurn(BaseModel):
    """One message of the deep-dive tutoring conversation."""
    model_config = ConfigDict(frozen=True)

    role: Role
    content: str


class GenerationOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    enable_search_tool: bool = False
    structured_output_schema: Optional[Dict[str, Any]] = Field(
        default=None,
        description="JSON schema the response must follow (sent as response_schema)"
    )
    reasoning_budget: Optional[int] = Field(
        default=None,
        description="Thinking token budget granted to the model before it answers"
    )
    system_preamble: Optional[str] = None


class GenerationRequest(BaseModel):
    """A single call against the remote endpoint. Immutable once built."""
    model_config = ConfigDict(frozen=True)

    model_tier: ModelTier = ModelTier.PRIMARY
    input: Tuple[Part, ...]
    turns: Tuple[DeepDiveTurn, ...] = Field(
        default=(),
        description="Prior conversation, sent before the input as role-tagged messages"
    )
    options: GenerationOptions = Field(default_factory=GenerationOptions)


class GenerationResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str = ""
    parts: Tuple[Part, ...] = ()
    citations: Tuple[Citation, ...] = ()

    def inline_parts(self) -> List[Part]:
        return [part for part in self.parts if part.kind == PartKind.INLINE_DATA]


class TopicContext(BaseModel):
    """Facts and search summary gathered once per pipeline before analysis."""
    model_config = ConfigDict(frozen=True)

    facts: Tuple[str, ...] = ()
    search_summary: str = ""

    @field_validator("facts", mode="before")
    @classmethod
    def clean_facts(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            cleaned = [item.strip() for item in value if isinstance(item, str) and item.strip()]
            return tuple(cleaned[:MAX_TOPIC_FACTS])
        return value

    @property
    def is_empty(self) -> bool:
        return not self.search_summary.strip()


class StudyPlan(BaseModel):
    """Narrative plan produced by the analysis phase."""
    model_config = ConfigDict(frozen=True)

    narrative: str
    citations: Tuple[Citation, ...] = ()

    def missing_sections(self) -> List[str]:
        """Return the fixed plan sections that have no heading in the narrative."""
        headings = [heading.lower() for heading in split_markdown_sections(self.narrative)]
        return [
            section for section in PLAN_SECTIONS
            if not any(section.lower() in heading for heading in headings)
        ]


class StudyPackage(BaseModel):
    model_config = ConfigDict(frozen=True)

    notes_markdown: str
    simulator_source: Optional[str] = None

    @property
    def has_simulator(self) -> bool:
        return bool(self.simulator_source)


class QuizItem(BaseModel):
    """
    Multiple-choice question.

    Field aliases match the wire names of the response schema sent to the
    model (``question``, ``correctAnswer``, ``explanation``).
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    prompt: str = Field(alias="question")
    options: Tuple[str, ...]
    correct_index: int = Field(alias="correctAnswer")
    rationale: str = Field(alias="explanation")

    @field_validator("options")
    @classmethod
    def check_option_count(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        if len(value) != QUIZ_OPTION_COUNT:
            raise ValueError(f"expected {QUIZ_OPTION_COUNT} options, got {len(value)}")
        return value

    @model_validator(mode="after")
    def check_correct_index(self) -> "QuizItem":
        if not 0 <= self.correct_index < len(self.options):
            raise ValueError(f"correct_index {self.correct_index} does not index an option")
        return self


class OperationStatus(str, Enum):
    PENDING = "pending"
    DONE = "done"


class LongRunningOperation(BaseModel):
    """Client-side view of an asynchronous generation job."""

    id: str
    status: OperationStatus = OperationStatus.PENDING
    result_locator: Optional[str] = None

    @property
    def is_done(self) -> bool:
        return self.status == OperationStatus.DONE

    def advance(self, done: bool, result_locator: Optional[str] = None) -> None:
        """
        Record one polling observation.

        Status only moves PENDING -> DONE; a DONE operation is terminal and a
        later pending report is an error.
        """
        if self.is_done:
            if not done:
                raise GenerationError(f"Operation {self.id} reported pending after completion")
            return
        if done:
            self.status = OperationStatus.DONE
            self.result_locator = result_locator or None


class StudySession(BaseModel):
    """Snapshot of one study session for an external session store."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    topic: str
    created_at: datetime = Field(default_factory=datetime.now)
    plan: Optional[StudyPlan] = None
    package: Optional[StudyPackage] = None
    quiz: List[QuizItem] = Field(default_factory=list)
    chat_history: List[DeepDiveTurn] = Field(default_factory=list)
