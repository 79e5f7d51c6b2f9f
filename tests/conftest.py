"""
Pytest configuration and fixtures
"""
import pytest
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, Mock

from langchain_core.messages import AIMessage

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from study_copilot.core.fallback import FallbackInvoker  # noqa: E402

PRIMARY = "pro-model"
SECONDARY = "flash-model"

PLAN_NARRATIVE = """## 🧐 Analysis & Context
Photosynthesis converts light energy into chemical energy in chloroplasts.

## 🎮 Simulator Concept
Adjustable parameters: light intensity (range slider), CO2 concentration (range slider),
temperature (range slider) and a reset button.

## 🎨 Visual Identity
Typography: Inter. Colors: #0B7A75 (teal), #F4A259 (orange). Layout: sidebar controls.

## 🔍 Verified Sources
- https://en.wikipedia.org/wiki/Photosynthesis
"""

NOTES_MARKDOWN = """# Photosynthesis

## Key Concepts
> **Photosynthesis**: the process by which plants convert light into chemical energy.

$$6CO_2 + 6H_2O \\rightarrow C_6H_{12}O_6 + 6O_2$$
"""

SIMULATOR_REPLY = """Here is the simulator:

```html
<!DOCTYPE html>
<html><body><input type="range" title="Light intensity"><script>requestAnimationFrame(()=>{});</script></body></html>
```
"""


def _ai(text="", **metadata) -> AIMessage:
    """Build a Gemini-like AIMessage with optional response metadata."""
    return AIMessage(content=text, response_metadata=metadata)


def _facts_reply(count=20, summary="Plants convert light, water and CO2 into glucose and oxygen.") -> AIMessage:
    facts = ", ".join(f'"Fact {i}"' for i in range(1, count + 1))
    return _ai(f'```json\n{{"facts": [{facts}], "searchContext": "{summary}"}}\n```')


@pytest.fixture
def mock_llm():
    """Create a mock chat model for testing"""
    llm = MagicMock()
    llm.bind_tools = Mock(return_value=llm)
    llm.ainvoke = AsyncMock(return_value=_ai("ok"))
    return llm


@pytest.fixture
def llm_factory(mock_llm):
    """(model_name, options) -> mock_llm; call_args_list records every request"""
    return Mock(return_value=mock_llm)


@pytest.fixture
def invoker(llm_factory):
    """FallbackInvoker wired to the mock chat model"""
    return FallbackInvoker(
        api_key=None,
        primary_model=PRIMARY,
        secondary_model=SECONDARY,
        llm_factory=llm_factory
    )


@pytest.fixture
def ai_message():
    """Factory for Gemini-like AIMessages: ai_message(text, **response_metadata)"""
    return _ai


@pytest.fixture
def facts_reply():
    """Factory for a fenced fact-retrieval reply: facts_reply(count, summary)"""
    return _facts_reply


@pytest.fixture
def plan_narrative():
    return PLAN_NARRATIVE


@pytest.fixture
def notes_markdown():
    return NOTES_MARKDOWN


@pytest.fixture
def simulator_reply():
    return SIMULATOR_REPLY
