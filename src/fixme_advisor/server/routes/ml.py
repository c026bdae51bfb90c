"""Recommendation model API routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from fixme_advisor.server.dependencies import get_service
from fixme_advisor.server.models import (
    ErrorResponse,
    FeedbackRequest,
    ModelStatsResponse,
    PredictionResponse,
    SnapshotModel,
    TrainingSampleResponse,
    TrainRequest,
)
from fixme_advisor.service import AdvisorService

router = APIRouter(prefix="/ml", tags=["ml"], responses={503: {"model": ErrorResponse}})


@router.post(
    "/predict",
    response_model=PredictionResponse,
    summary="Recommend optimizations",
    description="Rank action types by expected effectiveness for a hardware state.",
)
async def predict(
    snapshot: SnapshotModel,
    service: Annotated[AdvisorService, Depends(get_service)],
) -> PredictionResponse:
    result = await service.predict(snapshot.to_snapshot())
    return PredictionResponse.model_validate(result.to_dict())


@router.get(
    "/stats",
    response_model=ModelStatsResponse,
    summary="Get training set statistics",
)
async def get_model_stats(
    service: Annotated[AdvisorService, Depends(get_service)],
) -> ModelStatsResponse:
    stats = await service.get_model_stats()
    return ModelStatsResponse.model_validate(stats.to_dict())


@router.post(
    "/train",
    response_model=TrainingSampleResponse,
    summary="Add a training sample",
)
async def train(
    request: TrainRequest,
    service: Annotated[AdvisorService, Depends(get_service)],
) -> TrainingSampleResponse:
    sample = await service.train(
        request.snapshot.to_snapshot(), request.action_type, request.effectiveness
    )
    return TrainingSampleResponse.model_validate(sample.to_dict())


@router.post(
    "/feedback",
    response_model=TrainingSampleResponse,
    summary="Rate an executed action",
    description="Convert a 1-5 rating into effectiveness and train with it.",
)
async def feedback(
    request: FeedbackRequest,
    service: Annotated[AdvisorService, Depends(get_service)],
) -> TrainingSampleResponse:
    sample = await service.record_feedback(
        request.snapshot.to_snapshot(), request.action_type, request.rating
    )
    return TrainingSampleResponse.model_validate(sample.to_dict())
