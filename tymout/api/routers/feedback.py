"""
Feedback API router.
Ratings and reviews on events, circles and users.
"""
from typing import List

from fastapi import APIRouter, Depends

from tymout.api.dependencies import get_current_user_id, get_feedback_service
from tymout.models.schemas import (
    ApiResponse,
    Feedback,
    FeedbackCreate,
    FeedbackStats,
    FeedbackUpdate,
    MessageResponse,
    TargetType,
)
from tymout.services.feedback import FeedbackService

router = APIRouter(prefix="/api/feedback", tags=["feedback"])


@router.get(
    "/target/{target_type}/{target_id}",
    response_model=ApiResponse[List[Feedback]],
    summary="Get active feedback for a target",
)
async def get_target_feedback(
    target_type: TargetType,
    target_id: str,
    service: FeedbackService = Depends(get_feedback_service),
) -> ApiResponse[List[Feedback]]:
    return ApiResponse(data=await service.list_for_target(target_type, target_id))


@router.get(
    "/stats/{target_type}/{target_id}",
    response_model=ApiResponse[FeedbackStats],
    summary="Get rating statistics for a target",
)
async def get_target_stats(
    target_type: TargetType,
    target_id: str,
    service: FeedbackService = Depends(get_feedback_service),
) -> ApiResponse[FeedbackStats]:
    return ApiResponse(data=await service.stats_for_target(target_type, target_id))


@router.get(
    "/user",
    response_model=ApiResponse[List[Feedback]],
    summary="Get feedback written by the caller",
)
async def get_user_feedback(
    user_id: str = Depends(get_current_user_id),
    service: FeedbackService = Depends(get_feedback_service),
) -> ApiResponse[List[Feedback]]:
    return ApiResponse(data=await service.list_for_user(user_id))


@router.post(
    "",
    response_model=ApiResponse[Feedback],
    summary="Create feedback",
    responses={400: {"description": "Invalid body or feedback already submitted"}},
)
async def create_feedback(
    payload: FeedbackCreate,
    user_id: str = Depends(get_current_user_id),
    service: FeedbackService = Depends(get_feedback_service),
) -> ApiResponse[Feedback]:
    return ApiResponse(data=await service.create(user_id, payload))


@router.put(
    "/{feedback_id}",
    response_model=ApiResponse[Feedback],
    summary="Update the caller's feedback",
)
async def update_feedback(
    feedback_id: str,
    payload: FeedbackUpdate,
    user_id: str = Depends(get_current_user_id),
    service: FeedbackService = Depends(get_feedback_service),
) -> ApiResponse[Feedback]:
    return ApiResponse(data=await service.update(user_id, feedback_id, payload))


@router.delete(
    "/{feedback_id}",
    response_model=ApiResponse[MessageResponse],
    summary="Delete the caller's feedback",
)
async def delete_feedback(
    feedback_id: str,
    user_id: str = Depends(get_current_user_id),
    service: FeedbackService = Depends(get_feedback_service),
) -> ApiResponse[MessageResponse]:
    await service.delete(user_id, feedback_id)
    return ApiResponse(data=MessageResponse(msg="Feedback removed"))


@router.post(
    "/{feedback_id}/report",
    response_model=ApiResponse[MessageResponse],
    summary="Report feedback for moderation",
    dependencies=[Depends(get_current_user_id)],
)
async def report_feedback(
    feedback_id: str,
    service: FeedbackService = Depends(get_feedback_service),
) -> ApiResponse[MessageResponse]:
    await service.report(feedback_id)
    return ApiResponse(data=MessageResponse(msg="Feedback reported"))
