import pytest

from cago.services.meeting_repository import InMemoryMeetingRepository, MeetingRecord
from cago.utils.errors import NotFoundError


def _record(title, items=()):
    return MeetingRecord(title=title, action_items=[dict(item) for item in items])


def test_history_is_newest_first_and_capped():
    repo = InMemoryMeetingRepository(max_meetings=3)
    for i in range(5):
        repo.append(_record(f"Meeting {i}"))

    assert [m.title for m in repo.get_recent(10)] == ["Meeting 4", "Meeting 3", "Meeting 2"]
    assert [m.title for m in repo.get_recent(1)] == ["Meeting 4"]


def test_from_insights_defaults():
    record = MeetingRecord.from_insights({"summary": "Short", "actionItems": [{"text": "Email Sam"}, "stray"]})

    assert record.title == "Recent conversation"
    assert record.action_items == [{"text": "Email Sam"}]
    assert record.to_dict()["actionItems"] == [{"text": "Email Sam"}]
    assert record.id.startswith("meeting-")


def test_upcoming_reminders_skip_undated_and_completed():
    repo = InMemoryMeetingRepository()
    repo.append(_record("Older", [
        {"text": "No date"},
        {"text": "Low one", "priority": "low", "due": "Friday"},
    ]))
    repo.append(_record("Newer", [
        {"text": "Done", "priority": "high", "due": "Today", "completed": True},
        {"text": "Unprioritized", "due": "Next week"},
        {"text": "Urgent", "priority": "high", "due": "Tomorrow"},
    ]))

    reminders = repo.upcoming_reminders()

    assert [r["text"] for r in reminders] == ["Urgent", "Unprioritized", "Low one"]
    assert reminders[0]["meetingTitle"] == "Newer"
    assert reminders[2]["itemIndex"] == 1


def test_upcoming_reminders_capped_at_five():
    repo = InMemoryMeetingRepository()
    repo.append(_record("Busy", [{"text": f"Task {i}", "due": "Soon"} for i in range(8)]))

    assert len(repo.upcoming_reminders()) == 5


def test_mark_complete_and_uncomplete():
    repo = InMemoryMeetingRepository()
    record = repo.append(_record("Sync", [{"text": "Send notes", "due": "Today"}]))

    repo.mark_complete(record.id, 0)
    assert repo.upcoming_reminders() == []

    repo.mark_complete(record.id, 0, completed=False)
    assert [r["text"] for r in repo.upcoming_reminders()] == ["Send notes"]


def test_mark_complete_errors():
    repo = InMemoryMeetingRepository()
    record = repo.append(_record("Sync", [{"text": "Send notes", "due": "Today"}]))

    with pytest.raises(NotFoundError):
        repo.mark_complete("meeting-missing", 0)
    with pytest.raises(NotFoundError):
        repo.mark_complete(record.id, 3)
