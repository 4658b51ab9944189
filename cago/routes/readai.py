"""Read.ai Routes - connect with an API key and list meetings"""

from fastapi import APIRouter, Depends

from cago.dependencies import get_readai_client
from cago.schemas.meeting import ReadAIKeyRequest
from cago.services.readai_client import ReadAIClient

router = APIRouter(prefix="/api/readai", tags=["Read.ai"])


@router.post("/connect")
async def connect(body: ReadAIKeyRequest, client: ReadAIClient = Depends(get_readai_client)):
    return await client.connect(body.api_key)


@router.post("/meetings")
async def list_meetings(body: ReadAIKeyRequest, client: ReadAIClient = Depends(get_readai_client)):
    return await client.list_meetings(body.api_key)
