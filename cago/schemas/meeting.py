"""Pydantic schemas for meeting insights, follow-ups, reminders and Read.ai"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class MeetingExtractRequest(BaseModel):
    title: Optional[str] = None
    notes: Optional[str] = ""


class FollowUpsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    recent_meetings: Optional[List[Dict[str, Any]]] = Field(None, alias="recentMeetings")
    current_meeting: Optional[Dict[str, Any]] = Field(None, alias="currentMeeting")
    user_context: Optional[Dict[str, Any]] = Field(None, alias="userContext")


class ReminderCompleteRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    meeting_id: str = Field(..., alias="meetingId")
    item_index: int = Field(..., alias="itemIndex", ge=0)
    completed: bool = True


class ReadAIKeyRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    api_key: Optional[str] = Field("", alias="apiKey")
