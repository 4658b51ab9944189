"""Webhook Routes - meeting notes pushed by third-party note takers"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, HTTPException

from cago.dependencies import get_meeting_repository, get_meeting_service
from cago.services.meeting_repository import MeetingRecord, MeetingRepository
from cago.services.meeting_service import MeetingService, notes_from_payload
from cago.utils.errors import GenerationParseError, UpstreamGenerationError, ValidationError
from cago.utils.logger import get_logger

router = APIRouter(prefix="/api/webhook", tags=["Webhooks"])
logger = get_logger()


@router.post("/meeting")
async def meeting_webhook(
    payload: Dict[str, Any] = Body(...),
    service: MeetingService = Depends(get_meeting_service),
    repository: MeetingRepository = Depends(get_meeting_repository),
):
    """Run a pushed transcript through the same extraction as typed notes."""
    source = str(payload.get("source") or "webhook")
    notes = notes_from_payload(payload)
    if not notes.strip():
        raise ValidationError("Webhook payload has no notes or transcript")

    title = payload.get("title") or payload.get("meeting_title")
    title = str(title) if title is not None else None
    logger.info(f"[Webhook] Meeting received from {source} ({len(notes)} chars)")

    try:
        insights = await service.extract_insights(notes, title)
    except (UpstreamGenerationError, GenerationParseError) as e:
        logger.error(f"[Webhook] Extraction failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to extract meeting insights")

    record = repository.append(MeetingRecord.from_insights(insights, source=source))
    return {**insights, "source": source, "meetingId": record.id}
