"""Coaching Routes - You Are Here assessment, mentor recommendation, execution plan"""

from fastapi import APIRouter, Depends, HTTPException, Request

from cago.dependencies import get_coaching_service
from cago.middleware.rate_limit import limiter, GENERATION_LIMIT
from cago.schemas.coaching import CoachingRequest, AdjustedCoachingRequest
from cago.services.coaching_service import CoachingService
from cago.utils.errors import GenerationParseError, UpstreamGenerationError, ValidationError
from cago.utils.logger import get_logger

router = APIRouter(prefix="/api", tags=["Coaching"])
logger = get_logger()


def _require_direction(body: CoachingRequest) -> None:
    if not (body.direction_label or "").strip():
        raise ValidationError("directionLabel is required")
    if not (body.background or "").strip():
        raise ValidationError("background is required")


def _log_generation_failure(kind: str, error: Exception) -> None:
    logger.error(f"[{kind}] Generation failed: {error}")
    if isinstance(error, GenerationParseError) and error.raw_text:
        logger.debug(f"[{kind}] Raw model response: {error.raw_text[:4000]}")


@router.post("/assessment")
@limiter.limit(GENERATION_LIMIT)
async def generate_assessment(
    request: Request,
    body: CoachingRequest,
    service: CoachingService = Depends(get_coaching_service),
):
    """Generate the "You Are Here" assessment."""
    _require_direction(body)
    try:
        logger.info(f"[Assessment] Generating for direction={body.direction_label}")
        return await service.generate_assessment(
            direction_label=body.direction_label,
            background=body.background.strip(),
            confidence=body.confidence or "curious",
        )
    except (UpstreamGenerationError, GenerationParseError) as e:
        _log_generation_failure("Assessment", e)
        raise HTTPException(status_code=500, detail="Failed to generate assessment")


@router.post("/mentor")
@limiter.limit(GENERATION_LIMIT)
async def generate_mentor(
    request: Request,
    body: AdjustedCoachingRequest,
    service: CoachingService = Depends(get_coaching_service),
):
    """Recommend a mentor with session expectations and prep."""
    _require_direction(body)
    try:
        logger.info(f"[Mentor] Generating for direction={body.direction_label}")
        return await service.generate_mentor(
            direction_label=body.direction_label,
            background=body.background.strip(),
            confidence=body.confidence or "curious",
            adjustments=(body.adjustments or "").strip() or None,
        )
    except (UpstreamGenerationError, GenerationParseError) as e:
        _log_generation_failure("Mentor", e)
        raise HTTPException(status_code=500, detail="Failed to generate mentor recommendation")


@router.post("/plan")
@limiter.limit(GENERATION_LIMIT)
async def generate_plan(
    request: Request,
    body: AdjustedCoachingRequest,
    service: CoachingService = Depends(get_coaching_service),
):
    """Generate the 90-day execution plan (truncation repair enabled)."""
    _require_direction(body)
    try:
        logger.info(f"[Plan] Generating for direction={body.direction_label}")
        return await service.generate_plan(
            direction_label=body.direction_label,
            background=body.background.strip(),
            confidence=body.confidence or "curious",
            adjustments=(body.adjustments or "").strip() or None,
        )
    except (UpstreamGenerationError, GenerationParseError) as e:
        _log_generation_failure("Plan", e)
        raise HTTPException(status_code=500, detail="Failed to generate execution plan")
