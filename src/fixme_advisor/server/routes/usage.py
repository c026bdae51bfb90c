"""Usage gate API routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from fixme_advisor.server.dependencies import get_service
from fixme_advisor.server.models import (
    ErrorResponse,
    GateDecisionResponse,
    LogRequest,
    PolicyResponse,
    UsageRecordResponse,
    UsageTypeStatsResponse,
)
from fixme_advisor.service import AdvisorService, blocked_message

router = APIRouter(tags=["usage"], responses={503: {"model": ErrorResponse}})


@router.get(
    "/usage",
    response_model=dict[str, UsageTypeStatsResponse],
    summary="Get usage per action type",
)
async def get_usage(
    service: Annotated[AdvisorService, Depends(get_service)],
) -> dict[str, UsageTypeStatsResponse]:
    stats = await service.get_usage_stats()
    return {
        action_type: UsageTypeStatsResponse.model_validate(s.to_dict())
        for action_type, s in stats.items()
    }


@router.get(
    "/gate/{action_type}",
    response_model=GateDecisionResponse,
    response_model_exclude_none=True,
    summary="Check whether an action may run now",
)
async def check_gate(
    action_type: str,
    service: Annotated[AdvisorService, Depends(get_service)],
) -> GateDecisionResponse:
    decision = await service.can_execute(action_type)
    response = GateDecisionResponse.model_validate(decision.to_dict())
    if not decision.allowed:
        response.message = blocked_message(decision)
    return response


@router.post(
    "/gate/{action_type}/log",
    response_model=UsageRecordResponse,
    summary="Record an executed action",
)
async def log_request(
    action_type: str,
    request: LogRequest,
    service: Annotated[AdvisorService, Depends(get_service)],
) -> UsageRecordResponse:
    record = await service.log_request(action_type, request.success, request.details)
    return UsageRecordResponse.model_validate(record.to_dict())


@router.get(
    "/policies",
    response_model=dict[str, PolicyResponse],
    summary="List cooldowns and daily limits",
)
async def list_policies(
    service: Annotated[AdvisorService, Depends(get_service)],
) -> dict[str, PolicyResponse]:
    return {
        str(name): PolicyResponse.model_validate(policy.to_dict())
        for name, policy in service.policies.items()
    }
