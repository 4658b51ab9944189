"""FastAPI dependency providers for services and their collaborators."""
from fastapi import Depends

from cago.config import get_settings
from cago.services.coaching_service import CoachingService
from cago.services.completion import CompletionClient, get_completion_client
from cago.services.document_text import DocumentTextExtractor, FileTextExtractor
from cago.services.meeting_repository import InMemoryMeetingRepository, MeetingRepository
from cago.services.meeting_service import MeetingService
from cago.services.readai_client import ReadAIClient

_meeting_repository = InMemoryMeetingRepository(max_meetings=get_settings().meeting_history_limit)


def get_meeting_repository() -> MeetingRepository:
    return _meeting_repository


def get_document_extractor() -> DocumentTextExtractor:
    return FileTextExtractor()


def get_readai_client() -> ReadAIClient:
    return ReadAIClient()


def get_coaching_service(client: CompletionClient = Depends(get_completion_client)) -> CoachingService:
    return CoachingService(client)


def get_meeting_service(client: CompletionClient = Depends(get_completion_client)) -> MeetingService:
    return MeetingService(client)
