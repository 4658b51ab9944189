"""Coaching Service - assessment, mentor recommendation and execution plan generation"""

from typing import Iterable, Optional

from cago.services.completion import CompletionClient
from cago.services.json_extractor import extract, require_object
from cago.services import prompts
from cago.utils.logger import get_logger

logger = get_logger()

ASSESSMENT_LIST_FIELDS = ("assets", "gaps", "readiness")
MENTOR_LIST_FIELDS = ("matchReasons", "sessionExpectations", "questionsToAsk", "whatToPrepare")
PLAN_LIST_FIELDS = (
    "hardSkills",
    "softSkills",
    "tools",
    "weeklyActions",
    "quickWins",
    "potentialBlockers",
    "successMetrics",
)


def normalize(result: dict, list_fields: Iterable[str], **labels) -> dict:
    """Stamp caller labels and default absent list fields to []."""
    for key, value in labels.items():
        result[key] = value
    for field in list_fields:
        if result.get(field) is None:
            result[field] = []
    return result


class CoachingService:
    def __init__(self, client: CompletionClient):
        self.client = client

    async def generate_assessment(self, direction_label: str, background: str, confidence: str) -> dict:
        """Generate the "You Are Here" assessment."""
        prompt = prompts.build_assessment_prompt(direction_label, background, confidence)
        content = await self.client.complete(
            prompt,
            system=prompts.SYSTEM_PROMPT,
            max_tokens=prompts.ASSESSMENT_MAX_TOKENS,
            operation="assessment",
        )
        assessment = require_object(extract(content, repair=False), content)
        return normalize(assessment, ASSESSMENT_LIST_FIELDS, directionLabel=direction_label)

    async def generate_mentor(
        self,
        direction_label: str,
        background: str,
        confidence: str,
        adjustments: Optional[str] = None,
    ) -> dict:
        """Recommend a mentor with session expectations and prep."""
        prompt = prompts.build_mentor_prompt(direction_label, background, confidence, adjustments)
        content = await self.client.complete(
            prompt,
            system=prompts.SYSTEM_PROMPT,
            max_tokens=prompts.MENTOR_MAX_TOKENS,
            operation="mentor",
        )
        recommendation = require_object(extract(content, repair=False), content)
        return normalize(recommendation, MENTOR_LIST_FIELDS, directionLabel=direction_label)

    async def generate_plan(
        self,
        direction_label: str,
        background: str,
        confidence: str,
        adjustments: Optional[str] = None,
    ) -> dict:
        """
        Generate the 90-day execution plan.

        The plan is the largest response and the one most likely to be cut
        off at max_tokens, so it is the only kind extracted with repair.
        """
        prompt = prompts.build_plan_prompt(direction_label, background, confidence, adjustments)
        content = await self.client.complete(
            prompt,
            system=prompts.SYSTEM_PROMPT,
            max_tokens=prompts.PLAN_MAX_TOKENS,
            operation="plan",
        )
        logger.info(f"Plan response length: {len(content)}")

        plan = require_object(extract(content, repair=True), content)
        return normalize(plan, PLAN_LIST_FIELDS, directionLabel=direction_label)
