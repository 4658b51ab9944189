"""Meeting Service - insights extraction from notes/transcripts and follow-up suggestions"""

from typing import List, Optional

from cago.config import get_settings
from cago.services.completion import CompletionClient
from cago.services.json_extractor import extract, require_object
from cago.services.coaching_service import normalize
from cago.services import prompts
from cago.utils.errors import ValidationError
from cago.utils.logger import get_logger

logger = get_logger()

DEFAULT_MEETING_TITLE = "Recent conversation"
MEETING_LIST_FIELDS = ("highlights", "actionItems")
FOLLOWUP_LIST_FIELDS = ("suggestions",)
FOLLOWUP_HISTORY_SIZE = 5


class MeetingService:
    def __init__(self, client: CompletionClient):
        self.client = client
        self.max_notes_chars = get_settings().max_notes_chars

    async def extract_insights(self, notes: Optional[str], title: Optional[str] = None) -> dict:
        """
        Extract summary, highlights and action items from meeting notes.

        Raises:
            ValidationError: notes are empty; no generation call is made
        """
        notes = (notes or "").strip()
        if not notes:
            raise ValidationError("Meeting notes are required")

        if len(notes) > self.max_notes_chars:
            logger.warning(f"Meeting notes truncated from {len(notes)} to {self.max_notes_chars} chars")
            notes = notes[:self.max_notes_chars]

        title = (title or "").strip() or DEFAULT_MEETING_TITLE
        content = await self.client.complete(
            prompts.build_meeting_extract_prompt(notes, title),
            system=prompts.SYSTEM_PROMPT,
            max_tokens=prompts.MEETING_EXTRACT_MAX_TOKENS,
            operation="meeting_extract",
        )
        insights = require_object(extract(content, repair=False), content)
        return normalize(insights, MEETING_LIST_FIELDS, title=title)

    async def suggest_followups(
        self,
        recent_meetings: List[dict],
        current_meeting: Optional[dict] = None,
        user_context: Optional[dict] = None,
    ) -> dict:
        """Suggest next steps across the most recent meetings."""
        content = await self.client.complete(
            prompts.build_followups_prompt(recent_meetings[:FOLLOWUP_HISTORY_SIZE], current_meeting, user_context),
            system=prompts.SYSTEM_PROMPT,
            max_tokens=prompts.FOLLOWUPS_MAX_TOKENS,
            operation="followups",
        )
        followups = require_object(extract(content, repair=False), content)
        return normalize(followups, FOLLOWUP_LIST_FIELDS)


def flatten_transcript(transcript) -> str:
    """Join a transcript given as speaker blocks into plain lines."""
    if isinstance(transcript, str):
        return transcript
    if isinstance(transcript, dict):
        # {"speaker_blocks": [...]} as sent by note takers
        transcript = transcript.get("speaker_blocks") or transcript.get("blocks") or transcript.get("text") or ""
        if isinstance(transcript, str):
            return transcript
    if not isinstance(transcript, list):
        return ""

    lines = []
    for block in transcript:
        if isinstance(block, str):
            lines.append(block)
        elif isinstance(block, dict):
            text = block.get("text") or block.get("words") or ""
            speaker = block.get("speaker")
            if isinstance(speaker, dict):
                speaker = speaker.get("name")
            if text:
                lines.append(f"{speaker}: {text}" if speaker else text)
    return "\n".join(lines)


def notes_from_payload(payload: dict) -> str:
    """First usable notes/transcript field of a third-party webhook payload."""
    for key in ("notes", "transcript", "text", "content"):
        value = payload.get(key)
        if value:
            text = flatten_transcript(value)
            if text.strip():
                return text
    return ""
