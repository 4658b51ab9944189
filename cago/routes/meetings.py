"""Meeting Routes - notes extraction, file upload, follow-ups, history and reminders"""

from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile

from cago.config import get_settings
from cago.dependencies import get_document_extractor, get_meeting_repository, get_meeting_service
from cago.middleware.rate_limit import limiter, GENERATION_LIMIT
from cago.schemas.meeting import MeetingExtractRequest, FollowUpsRequest, ReminderCompleteRequest
from cago.services.document_text import DocumentTextExtractor, infer_title
from cago.services.meeting_repository import MeetingRecord, MeetingRepository
from cago.services.meeting_service import MeetingService
from cago.utils.errors import GenerationParseError, UpstreamGenerationError, ValidationError
from cago.utils.logger import get_logger

router = APIRouter(prefix="/api/meeting", tags=["Meetings"])
logger = get_logger()
settings = get_settings()

UPLOAD_CHUNK_BYTES = 8192


@router.post("/extract")
@limiter.limit(GENERATION_LIMIT)
async def extract_meeting(
    request: Request,
    body: MeetingExtractRequest,
    service: MeetingService = Depends(get_meeting_service),
    repository: MeetingRepository = Depends(get_meeting_repository),
):
    """Extract summary, highlights and action items from meeting notes."""
    try:
        insights = await service.extract_insights(body.notes, body.title)
    except (UpstreamGenerationError, GenerationParseError) as e:
        logger.error(f"[Meeting] Extraction failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to extract meeting insights")

    record = repository.append(MeetingRecord.from_insights(insights, source="manual"))
    logger.info(f"[Meeting] Extracted {len(insights['actionItems'])} action items into {record.id}")
    return {**insights, "meetingId": record.id}


@router.post("/extract-file")
async def extract_file(
    file: Optional[UploadFile] = File(None),
    extractor: DocumentTextExtractor = Depends(get_document_extractor),
):
    """Pull raw text out of an uploaded PDF, DOCX or text file."""
    if file is None or not file.filename:
        raise ValidationError("No file uploaded")

    max_size = settings.max_upload_bytes
    if file.size is not None and file.size > max_size:
        raise ValidationError(f"File too large. Maximum allowed: {max_size} bytes")

    # Read with a streaming size limit
    chunks = []
    bytes_read = 0
    while chunk := await file.read(UPLOAD_CHUNK_BYTES):
        bytes_read += len(chunk)
        if bytes_read > max_size:
            raise ValidationError(f"File too large. Maximum allowed: {max_size} bytes")
        chunks.append(chunk)

    text = extractor.extract_text(file.filename, b"".join(chunks), file.content_type)
    if not text.strip():
        raise ValidationError("No readable text found in file")

    logger.info(f"[Meeting] Extracted {len(text)} chars from {file.filename}")
    return {
        "text": text,
        "title": infer_title(text, file.filename),
        "filename": file.filename,
    }


@router.post("/followups")
@limiter.limit(GENERATION_LIMIT)
async def suggest_followups(
    request: Request,
    body: FollowUpsRequest,
    service: MeetingService = Depends(get_meeting_service),
    repository: MeetingRepository = Depends(get_meeting_repository),
):
    """Suggest next steps from recent meetings (client-sent or stored history)."""
    recent = body.recent_meetings
    if recent is None:
        recent = [m.to_dict() for m in repository.get_recent(5)]

    if not recent and not body.current_meeting:
        raise ValidationError("No meetings to base follow-ups on")

    try:
        return await service.suggest_followups(recent, body.current_meeting, body.user_context)
    except (UpstreamGenerationError, GenerationParseError) as e:
        logger.error(f"[Meeting] Follow-up generation failed: {e}")
        raise HTTPException(status_code=500, detail="Failed to generate follow-ups")


@router.get("/history")
async def meeting_history(repository: MeetingRepository = Depends(get_meeting_repository)):
    return {"meetings": [m.to_dict() for m in repository.get_recent(settings.meeting_history_limit)]}


@router.get("/reminders")
async def upcoming_reminders(repository: MeetingRepository = Depends(get_meeting_repository)):
    return {"reminders": repository.upcoming_reminders()}


@router.post("/reminders/complete")
async def complete_reminder(
    body: ReminderCompleteRequest,
    repository: MeetingRepository = Depends(get_meeting_repository),
):
    meeting = repository.mark_complete(body.meeting_id, body.item_index, body.completed)
    return {"success": True, "meeting": meeting.to_dict()}
