"""
Text-completion clients.

Every generation call goes through a CompletionClient: given a system prompt
and a user prompt it returns the model's raw text. Implementations:

  AnthropicCompletionClient  Claude Messages API (default provider)
  OpenAICompletionClient     OpenAI chat completions
  CannedCompletionClient     fixed responses per operation (TEST_MODE, tests)

No retries: a failed call surfaces as UpstreamGenerationError.
"""
import json
from typing import Dict, List, Optional, Protocol, Union

from anthropic import AsyncAnthropic
from openai import AsyncOpenAI

from cago.config import get_settings
from cago.utils.errors import UpstreamGenerationError
from cago.utils.logger import get_logger
from cago.utils.metrics import track_duration

logger = get_logger()


class CompletionClient(Protocol):
    async def complete(
        self,
        prompt: str,
        *,
        system: str,
        max_tokens: int,
        operation: str = "call",
    ) -> str:
        ...


class AnthropicCompletionClient:
    """Claude via the Anthropic Messages API"""

    def __init__(self, api_key: str, model: str):
        if not api_key:
            raise UpstreamGenerationError(
                "ANTHROPIC_API_KEY not found. Set it in the environment, "
                "or set TEST_MODE=true to use canned responses."
            )
        self.client = AsyncAnthropic(api_key=api_key)
        self.model = model

    async def complete(self, prompt: str, *, system: str, max_tokens: int, operation: str = "call") -> str:
        try:
            async with track_duration("anthropic", operation):
                message = await self.client.messages.create(
                    model=self.model,
                    max_tokens=max_tokens,
                    system=system,
                    messages=[{"role": "user", "content": prompt}],
                )
        except Exception as e:
            logger.error(f"[Anthropic] {operation} call failed: {e}")
            raise UpstreamGenerationError(f"Anthropic call failed: {e}") from e

        text_blocks = [block.text for block in message.content if getattr(block, "type", "") == "text"]
        if not text_blocks:
            raise UpstreamGenerationError("Anthropic returned no text content")

        if getattr(message, "stop_reason", None) == "max_tokens":
            logger.warning(f"[Anthropic] {operation} response hit max_tokens={max_tokens}")

        return text_blocks[0]


class OpenAICompletionClient:
    """GPT via OpenAI chat completions"""

    def __init__(self, api_key: str, model: str):
        if not api_key:
            raise UpstreamGenerationError(
                "OPENAI_API_KEY not found. Set it in the environment, "
                "or set TEST_MODE=true to use canned responses."
            )
        self.client = AsyncOpenAI(api_key=api_key)
        self.model = model

    async def complete(self, prompt: str, *, system: str, max_tokens: int, operation: str = "call") -> str:
        try:
            async with track_duration("openai", operation):
                response = await self.client.chat.completions.create(
                    model=self.model,
                    max_tokens=max_tokens,
                    temperature=0.7,
                    messages=[
                        {"role": "system", "content": system},
                        {"role": "user", "content": prompt},
                    ],
                )
        except Exception as e:
            logger.error(f"[OpenAI] {operation} call failed: {e}")
            raise UpstreamGenerationError(f"OpenAI call failed: {e}") from e

        choice = response.choices[0]
        if choice.finish_reason == "length":
            logger.warning(f"[OpenAI] {operation} response hit max_tokens={max_tokens}")

        content = choice.message.content
        if content is None:
            raise UpstreamGenerationError("OpenAI returned no text content")
        return content


# Canned model output used in TEST_MODE
MOCK_RESPONSES: Dict[str, str] = {
    "assessment": json.dumps({
        "stage": {
            "label": "Building Foundation",
            "description": "Your years in operations give you a working sense of data, even if the formal tools are still new.",
        },
        "assets": [
            {"text": "Three years reconciling weekly inventory reports", "signal": "This is analysis work, even if it was not called that"},
            {"text": "Self-taught spreadsheet formulas", "signal": "Comfort with structured data tends to carry over"},
        ],
        "gaps": [
            {"text": "SQL is not yet part of your routine", "note": "Most people in your position pick it up within a few months"},
        ],
        "readiness": [
            {"name": "Clarity of direction", "level": "moderate", "note": "You named a direction and a reason for it"},
            {"name": "Foundational knowledge", "level": "developing", "note": "Learning so far has been on the job"},
            {"name": "Practical experience", "level": "moderate", "note": "Your reporting work counts"},
        ],
        "transition": "Your starting point is more connected to this direction than it may feel.",
    }),
    "mentor": json.dumps({
        "mentor": {
            "name": "Priya Raman",
            "title": "Senior Analyst at Northwind",
            "experience": "9 years in operations analytics",
            "initials": "PR",
            "specialties": ["Operations to analytics transitions", "SQL foundations", "Portfolio reviews"],
            "approach": "Patient and practical, works from your real examples.",
        },
        "matchReasons": [
            {"title": "Similar starting point", "text": "Priya moved into analytics from a supply chain role."},
        ],
        "sessionExpectations": [
            {"topic": "Framing your reporting work", "outcome": "A clear way to describe it", "why": "It is your strongest evidence"},
        ],
        "questionsToAsk": [
            {"question": "Which of my current reports would make a good portfolio piece?", "context": "Builds on what you already do"},
        ],
        "whatToPrepare": [
            {"item": "One report you are proud of", "why": "Gives the session a concrete anchor", "howTo": "Remove any sensitive figures"},
        ],
    }),
    "plan": json.dumps({
        "directionConfirmation": "Your operations background already involves the core of analysis work.",
        "hardSkills": [
            {"skill": "SQL", "why": "Most analyst work starts with a query", "priority": "essential",
             "currentLevel": "New", "targetLevel": "Comfortable with joins", "resource": "SQLBolt",
             "practiceProject": "Query a public inventory dataset"},
        ],
        "softSkills": [{"skill": "Explaining findings", "why": "Insight only matters once shared", "dailyPractice": "Summarize one chart in two sentences"}],
        "tools": [{"name": "PostgreSQL", "why": "Free and widely used", "getStarted": "Install locally and load a CSV"}],
        "phasedPath": {
            "day30": {"theme": "Foundation", "goals": ["Basic SQL"], "tasks": [{"task": "Finish SQLBolt", "deliverable": "Notes", "estimatedHours": "10 hours"}], "milestone": "Write a join unaided"},
            "day60": {"theme": "Building", "goals": ["First project"], "tasks": [{"task": "Inventory analysis", "deliverable": "Short write-up", "estimatedHours": "15 hours"}], "milestone": "Project published"},
            "day90": {"theme": "Momentum", "goals": ["Share work"], "tasks": [{"task": "Present to a peer", "deliverable": "Slides", "estimatedHours": "5 hours"}], "milestone": "Feedback gathered"},
        },
        "weeklyActions": [{"action": "Practice queries", "frequency": "3x per week", "why": "Repetition builds fluency"}],
        "quickWins": [{"action": "Rewrite one report as a query", "impact": "Connects old and new skills", "steps": ["Pick a report", "Write the query"]}],
        "potentialBlockers": [{"blocker": "Limited evening time", "solution": "Short, fixed sessions"}],
        "successMetrics": [{"metric": "Queries written", "target30": "20", "target60": "50", "target90": "100"}],
        "closingReassurance": "You are building on real experience, not starting over.",
    }),
    "meeting_extract": json.dumps({
        "summary": "Discussed moving from operations reporting into an analyst role.",
        "highlights": ["Reporting work is relevant experience", "SQL is the first skill to build"],
        "actionItems": [
            {"text": "Finish the SQLBolt lessons", "priority": "high", "due": "This week"},
            {"text": "Draft a one-page project summary", "priority": "medium", "due": "Next week"},
        ],
    }),
    "followups": json.dumps({
        "context": "Your recent conversations keep returning to SQL and portfolio work.",
        "suggestions": [
            {"action": "Book a second session to review your first query project", "reason": "Keeps momentum after the first milestone", "priority": "high", "timing": "In two weeks"},
        ],
    }),
}


class CannedCompletionClient:
    """
    Returns fixed responses keyed by operation.

    A list value is consumed in order, one entry per call. Every call is
    recorded in `calls` so tests can assert on prompts.
    """

    def __init__(self, responses: Optional[Dict[str, Union[str, List[str]]]] = None):
        self.responses = dict(MOCK_RESPONSES if responses is None else responses)
        self.calls: List[dict] = []

    async def complete(self, prompt: str, *, system: str, max_tokens: int, operation: str = "call") -> str:
        self.calls.append({
            "operation": operation,
            "prompt": prompt,
            "system": system,
            "max_tokens": max_tokens,
        })

        response = self.responses.get(operation)
        if response is None:
            raise UpstreamGenerationError(f"No canned response for operation '{operation}'")
        if isinstance(response, list):
            if not response:
                raise UpstreamGenerationError(f"Canned responses for '{operation}' exhausted")
            return response.pop(0)
        return response


_client: Optional[CompletionClient] = None


def get_completion_client() -> CompletionClient:
    """FastAPI dependency: completion client selected from settings."""
    global _client
    if _client is not None:
        return _client

    settings = get_settings()
    if settings.test_mode:
        logger.info("[TEST MODE] Using canned completion responses")
        _client = CannedCompletionClient()
    elif settings.llm_provider == "openai":
        _client = OpenAICompletionClient(settings.openai_api_key, settings.openai_model)
    elif settings.llm_provider == "anthropic":
        _client = AnthropicCompletionClient(settings.anthropic_api_key, settings.anthropic_model)
    else:
        raise UpstreamGenerationError(f"Unknown LLM_PROVIDER '{settings.llm_provider}'")

    return _client
