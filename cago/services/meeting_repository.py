"""
Meeting history and reminder state.

MeetingRepository is the storage seam for recent meeting extractions and the
completion state of their action items. The default implementation keeps a
rolling, process-local history (newest first).
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Protocol

from cago.utils.errors import NotFoundError

PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}


@dataclass
class MeetingRecord:
    title: str
    summary: str = ""
    highlights: List[str] = field(default_factory=list)
    action_items: List[dict] = field(default_factory=list)
    source: str = "manual"
    id: str = field(default_factory=lambda: f"meeting-{uuid.uuid4().hex[:12]}")
    date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_insights(cls, insights: dict, source: str = "manual") -> "MeetingRecord":
        return cls(
            title=insights.get("title") or "Recent conversation",
            summary=insights.get("summary") or "",
            highlights=list(insights.get("highlights") or []),
            action_items=[dict(item) for item in insights.get("actionItems") or [] if isinstance(item, dict)],
            source=source,
        )

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "date": self.date.isoformat(),
            "summary": self.summary,
            "highlights": self.highlights,
            "actionItems": self.action_items,
            "source": self.source,
        }


class MeetingRepository(Protocol):
    def get_recent(self, limit: int = 5) -> List[MeetingRecord]:
        ...

    def append(self, record: MeetingRecord) -> MeetingRecord:
        ...

    def mark_complete(self, meeting_id: str, item_index: int, completed: bool = True) -> MeetingRecord:
        ...

    def upcoming_reminders(self, limit: int = 5) -> List[dict]:
        ...


class InMemoryMeetingRepository:
    """Rolling meeting history held in process memory."""

    def __init__(self, max_meetings: int = 10):
        self.max_meetings = max_meetings
        self._meetings: List[MeetingRecord] = []

    def get_recent(self, limit: int = 5) -> List[MeetingRecord]:
        return self._meetings[:limit]

    def append(self, record: MeetingRecord) -> MeetingRecord:
        self._meetings = [record, *self._meetings][:self.max_meetings]
        return record

    def get(self, meeting_id: str) -> Optional[MeetingRecord]:
        return next((m for m in self._meetings if m.id == meeting_id), None)

    def mark_complete(self, meeting_id: str, item_index: int, completed: bool = True) -> MeetingRecord:
        meeting = self.get(meeting_id)
        if meeting is None:
            raise NotFoundError("Meeting not found")
        if not 0 <= item_index < len(meeting.action_items):
            raise NotFoundError("Action item not found")

        meeting.action_items[item_index]["completed"] = completed
        return meeting

    def upcoming_reminders(self, limit: int = 5) -> List[dict]:
        """Open action items with a due value, high priority first."""
        reminders: List[Dict] = []
        for meeting in self._meetings:
            for index, item in enumerate(meeting.action_items):
                if not item.get("due") or item.get("completed"):
                    continue
                reminders.append({
                    **item,
                    "meetingId": meeting.id,
                    "itemIndex": index,
                    "meetingTitle": meeting.title,
                    "meetingDate": meeting.date.isoformat(),
                })

        # sorted() is stable, so meeting order holds within a priority
        reminders = sorted(
            reminders,
            key=lambda r: PRIORITY_ORDER.get(r.get("priority") or "medium", PRIORITY_ORDER["medium"]),
        )
        return reminders[:limit]
