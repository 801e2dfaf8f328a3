"""API routes for the smart waste backend"""
import logging
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse

from src.api.models import (
    ClassifyRequest,
    EnhancedClassifyRequest,
    ChatResponse,
    CheckAIRequest,
    CheckAIResponse,
    DashboardResponse,
    HealthCheckResponse,
)
from src.api.auth import verify_api_key, get_optional_user_id, require_user_id
from src.api.middleware import limiter, AI_RATE_LIMIT, DEFAULT_RATE_LIMIT
from src.agent.chatbot import chat_with_assistant
from src.db.connection import db
from src.gamification.dashboards import dashboard_summary
from src.models.classification import ClassificationRecord, ClassifiedWaste, EnhancedClassificationResult
from src.models.gamification import LeaderboardPeriod, UserStats
from src.models.pickup import PickupRequest, PickupRequestInput, PickupStatus
from src.services.classification_service import check_ai_connection
from src.services.container import ServiceContainer, get_container
from src.validators import ChatInput

logger = logging.getLogger(__name__)

router = APIRouter()

def get_services() -> ServiceContainer:
    """Service container dependency"""
    return get_container()


# ==========================================
# Classification
# ==========================================

@router.post("/api/v1/classify", response_model=ClassifiedWaste)
@limiter.limit(AI_RATE_LIMIT)
async def classify(
    request: Request,
    payload: ClassifyRequest,
    api_key: str = Depends(verify_api_key),
    user_id: Optional[str] = Depends(get_optional_user_id),
    services: ServiceContainer = Depends(get_services),
):
    """
    Classify a single waste item from a data URL image

    Saves a history row for signed-in users; a failed save does not change
    the response. Rate limit: 10 requests per minute (AI calls are expensive)
    """
    if not payload.image:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No image provided")

    result, history = await services.classification_service.classify(
        payload.image, api_key=payload.api_key, user_id=user_id
    )
    if history is not None and not history.succeeded:
        logger.warning(f"Classification returned without history row for user {user_id}")

    return result


@router.post("/api/v1/classify/enhanced", response_model=EnhancedClassificationResult)
@limiter.limit(AI_RATE_LIMIT)
async def classify_enhanced(
    request: Request,
    payload: EnhancedClassifyRequest,
    api_key: str = Depends(verify_api_key),
    user_id: Optional[str] = Depends(get_optional_user_id),
    services: ServiceContainer = Depends(get_services),
):
    """
    Multi-item classification with OCR, reasoning and CO2 estimate

    Signed-in users also get a history row and stats/badge bookkeeping.
    """
    if not payload.image_url:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Image URL is required")

    result, _, bookkeeping = await services.classification_service.classify_enhanced(
        payload.image_url,
        enable_ocr=payload.enable_ocr,
        enable_explanation=payload.enable_explanation,
        user_location=payload.user_location,
        user_id=user_id,
        api_key=payload.api_key,
    )
    if bookkeeping is not None and bookkeeping.badges_awarded:
        logger.info(f"User {user_id} earned badges: {', '.join(bookkeeping.badges_awarded)}")

    return result


@router.get("/api/v1/classifications", response_model=list[ClassificationRecord])
@limiter.limit(DEFAULT_RATE_LIMIT)
async def list_classifications(
    request: Request,
    limit: int = 50,
    api_key: str = Depends(verify_api_key),
    user_id: str = Depends(require_user_id),
    services: ServiceContainer = Depends(get_services),
):
    """User's classification history, newest first"""
    limit = max(1, min(limit, 200))
    return await services.classification_service.get_history(user_id, limit)


# ==========================================
# Chat
# ==========================================

@router.post("/api/v1/chat", response_model=ChatResponse)
@limiter.limit(AI_RATE_LIMIT)
async def chat(
    request: Request,
    payload: ChatInput,
    api_key: str = Depends(verify_api_key),
):
    """
    Ask the waste-management assistant a question

    Rate limit: 10 requests per minute (AI calls are expensive)
    """
    if not payload.message:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Message is required")

    response = await chat_with_assistant(
        payload.message,
        [m.model_dump() for m in payload.history],
    )
    return ChatResponse(response=response)


# ==========================================
# Gamification
# ==========================================

@router.get("/api/v1/gamification")
@limiter.limit(DEFAULT_RATE_LIMIT)
async def gamification(
    request: Request,
    action: Optional[str] = None,
    period: str = LeaderboardPeriod.ALL_TIME.value,
    limit: int = 10,
    api_key: str = Depends(verify_api_key),
    user_id: str = Depends(require_user_id),
    services: ServiceContainer = Depends(get_services),
):
    """
    Gamification reads selected by ?action=

    stats, badges, leaderboard (period, limit), all-badges, challenges,
    challenge-progress
    """
    service = services.gamification_service

    if action == "stats":
        stats = await service.get_user_stats(user_id)
        return stats or UserStats(user_id=user_id)

    if action == "badges":
        return await service.get_user_badges(user_id)

    if action == "leaderboard":
        try:
            leaderboard_period = LeaderboardPeriod(period)
        except ValueError:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid period")
        return await service.get_leaderboard(leaderboard_period, max(1, min(limit, 100)))

    if action == "all-badges":
        return await service.get_all_badges()

    if action == "challenges":
        return await service.get_active_challenges()

    if action == "challenge-progress":
        return await service.get_user_challenge_progress(user_id)

    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid action")


@router.get("/api/v1/dashboard", response_model=DashboardResponse)
@limiter.limit(DEFAULT_RATE_LIMIT)
async def dashboard(
    request: Request,
    api_key: str = Depends(verify_api_key),
    user_id: str = Depends(require_user_id),
    services: ServiceContainer = Depends(get_services),
):
    """Pickup counts, classification count, stats, rank and CO2 equivalents"""
    pickups = await services.pickup_service.list_user_pickups(user_id)
    classifications_count = await services.classification_service.count_history(user_id)
    stats = await services.gamification_service.get_user_stats(user_id)

    return dashboard_summary(
        [p.model_dump(mode="json") for p in pickups],
        classifications_count,
        stats,
    )


# ==========================================
# Pickups
# ==========================================

@router.post("/api/v1/pickups", response_model=PickupRequest, status_code=status.HTTP_201_CREATED)
@limiter.limit(DEFAULT_RATE_LIMIT)
async def schedule_pickup(
    request: Request,
    payload: PickupRequestInput,
    api_key: str = Depends(verify_api_key),
    user_id: str = Depends(require_user_id),
    services: ServiceContainer = Depends(get_services),
):
    """Schedule a waste pickup (422 with field messages when invalid)"""
    return await services.pickup_service.schedule_pickup(user_id, payload)


@router.get("/api/v1/pickups", response_model=list[PickupRequest])
@limiter.limit(DEFAULT_RATE_LIMIT)
async def list_pickups(
    request: Request,
    api_key: str = Depends(verify_api_key),
    user_id: str = Depends(require_user_id),
    services: ServiceContainer = Depends(get_services),
):
    """User's pickup requests, newest first"""
    return await services.pickup_service.list_user_pickups(user_id)


@router.get("/api/v1/facilities/pickups", response_model=list[PickupRequest])
@limiter.limit(DEFAULT_RATE_LIMIT)
async def facility_pickups(
    request: Request,
    status_filter: str = Query(default=PickupStatus.PENDING.value, alias="status"),
    api_key: str = Depends(verify_api_key),
    services: ServiceContainer = Depends(get_services),
):
    """
    Pickup requests across all users for facility operators

    ?status=pending (default), any other status, or "all"
    """
    if status_filter == "all":
        pickup_status = None
    else:
        try:
            pickup_status = PickupStatus(status_filter)
        except ValueError:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid status")

    return await services.pickup_service.list_pickups_by_status(pickup_status)


# ==========================================
# Settings / Health
# ==========================================

@router.post("/api/v1/settings/check-ai", response_model=CheckAIResponse)
@limiter.limit(AI_RATE_LIMIT)
async def check_ai(
    request: Request,
    payload: CheckAIRequest,
    api_key: str = Depends(verify_api_key),
):
    """Confirm the vision model is reachable with the configured (or given) key"""
    ok, message = await check_ai_connection(payload.api_key)
    if not ok:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=CheckAIResponse(ok=False, message=message).model_dump()
        )
    return CheckAIResponse(ok=ok, message=message)


@router.get("/health", response_model=HealthCheckResponse)
async def health_check():
    """Health check endpoint"""
    db_status = "connected" if db.is_initialized and await db.ping() else "disconnected"

    return HealthCheckResponse(
        status="healthy" if db_status == "connected" else "degraded",
        database=db_status,
        timestamp=datetime.now()
    )
