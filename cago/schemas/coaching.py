"""
Pydantic schemas for the coaching flow (assessment, mentor, plan).
Field names follow the camelCase the web client sends.
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class CoachingRequest(BaseModel):
    """What the user told us on the direction step"""
    model_config = ConfigDict(populate_by_name=True)

    # Client-side option id (e.g. "data-insights"), echoed back by the web client;
    # prompts and responses use directionLabel only
    direction: Optional[str] = Field("", description="Client option id, not used in prompts")
    direction_label: Optional[str] = Field("", alias="directionLabel")
    background: Optional[str] = ""
    confidence: Optional[str] = Field("curious", description="curious/drawn/pulled")


class AdjustedCoachingRequest(CoachingRequest):
    """Coaching request after the confirmation step"""
    adjustments: Optional[str] = Field(None, description="Context the user added after the assessment")
