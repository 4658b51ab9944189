"""
Journey wizard - the five ordered steps of the coaching flow.

This is the model of the client-side wizard, shipped as a library for web
and CLI clients; the HTTP routes are stateless and do not import it.

    DIRECTION_INPUT -> ASSESSMENT -> CONFIRMATION -> MENTOR_MATCH -> PLAN

Forward moves need the previous step's result; back moves keep whatever was
already fetched. All moves go through the TRANSITIONS table.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from cago.utils.errors import InvalidTransitionError


class JourneyStep(int, Enum):
    DIRECTION_INPUT = 1
    ASSESSMENT = 2
    CONFIRMATION = 3
    MENTOR_MATCH = 4
    PLAN = 5


class JourneyEvent(str, Enum):
    SUBMIT_DIRECTION = "submit_direction"
    ASSESSMENT_READY = "assessment_ready"
    CONFIRM = "confirm"
    MENTOR_READY = "mentor_ready"
    PLAN_READY = "plan_ready"
    BACK = "back"


TRANSITIONS: Dict[Tuple[JourneyStep, JourneyEvent], JourneyStep] = {
    (JourneyStep.DIRECTION_INPUT, JourneyEvent.SUBMIT_DIRECTION): JourneyStep.ASSESSMENT,
    (JourneyStep.ASSESSMENT, JourneyEvent.ASSESSMENT_READY): JourneyStep.CONFIRMATION,
    (JourneyStep.CONFIRMATION, JourneyEvent.CONFIRM): JourneyStep.MENTOR_MATCH,
    (JourneyStep.CONFIRMATION, JourneyEvent.BACK): JourneyStep.ASSESSMENT,
    (JourneyStep.MENTOR_MATCH, JourneyEvent.MENTOR_READY): JourneyStep.PLAN,
    (JourneyStep.MENTOR_MATCH, JourneyEvent.BACK): JourneyStep.CONFIRMATION,
    (JourneyStep.PLAN, JourneyEvent.PLAN_READY): JourneyStep.PLAN,
}

DEFAULT_CONFIDENCE = "curious"


@dataclass
class UserData:
    direction: str = ""
    direction_label: str = ""
    background: str = ""
    confidence: str = DEFAULT_CONFIDENCE
    adjustments: str = ""


@dataclass
class JourneyResults:
    assessment: Optional[dict] = None
    mentor: Optional[dict] = None
    plan: Optional[dict] = None


@dataclass
class JourneySession:
    step: JourneyStep = JourneyStep.DIRECTION_INPUT
    user: UserData = field(default_factory=UserData)
    results: JourneyResults = field(default_factory=JourneyResults)

    def _apply(self, event: JourneyEvent) -> JourneyStep:
        next_step = TRANSITIONS.get((self.step, event))
        if next_step is None:
            raise InvalidTransitionError(f"Cannot {event.value} from {self.step.name}")
        self.step = next_step
        return next_step

    def _require_step(self, event: JourneyEvent) -> None:
        if (self.step, event) not in TRANSITIONS:
            raise InvalidTransitionError(f"Cannot {event.value} from {self.step.name}")

    def submit_direction(
        self,
        direction: str,
        direction_label: str,
        background: str,
        confidence: str = DEFAULT_CONFIDENCE,
    ) -> JourneyStep:
        self._require_step(JourneyEvent.SUBMIT_DIRECTION)
        if not (direction_label or "").strip() or not (background or "").strip():
            raise InvalidTransitionError("A direction and some background are needed to continue")

        self.user.direction = direction or direction_label
        self.user.direction_label = direction_label.strip()
        self.user.background = background.strip()
        self.user.confidence = confidence or DEFAULT_CONFIDENCE
        return self._apply(JourneyEvent.SUBMIT_DIRECTION)

    def complete_assessment(self, assessment: Optional[dict]) -> JourneyStep:
        self._require_step(JourneyEvent.ASSESSMENT_READY)
        if not assessment:
            raise InvalidTransitionError("Assessment is not ready yet")
        self.results.assessment = assessment
        return self._apply(JourneyEvent.ASSESSMENT_READY)

    def confirm(self, adjustments: str = "") -> JourneyStep:
        self._require_step(JourneyEvent.CONFIRM)
        self.user.adjustments = (adjustments or "").strip()
        return self._apply(JourneyEvent.CONFIRM)

    def complete_mentor(self, mentor: Optional[dict]) -> JourneyStep:
        self._require_step(JourneyEvent.MENTOR_READY)
        if not mentor:
            raise InvalidTransitionError("Mentor recommendation is not ready yet")
        self.results.mentor = mentor
        return self._apply(JourneyEvent.MENTOR_READY)

    def complete_plan(self, plan: Optional[dict]) -> JourneyStep:
        self._require_step(JourneyEvent.PLAN_READY)
        if not plan:
            raise InvalidTransitionError("Plan is not ready yet")
        self.results.plan = plan
        return self._apply(JourneyEvent.PLAN_READY)

    def back(self) -> JourneyStep:
        return self._apply(JourneyEvent.BACK)

    def start_over(self) -> JourneyStep:
        self.step = JourneyStep.DIRECTION_INPUT
        self.user = UserData()
        self.results = JourneyResults()
        return self.step

    def request_payload(self) -> dict:
        """Body sent to the coaching endpoints."""
        payload = {
            "direction": self.user.direction,
            "directionLabel": self.user.direction_label,
            "background": self.user.background,
            "confidence": self.user.confidence,
        }
        if self.user.adjustments:
            payload["adjustments"] = self.user.adjustments
        return payload

    def progress(self) -> list:
        """Per-step status for a progress indicator."""
        return [
            {
                "step": step.value,
                "name": step.name,
                "completed": step.value < self.step.value,
                "active": step == self.step,
            }
            for step in JourneyStep
        ]
