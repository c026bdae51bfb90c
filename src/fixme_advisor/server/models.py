"""Pydantic models for API request/response."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from fixme_advisor.core.snapshot import HardwareSnapshot

# ============ Request Models ============


class SnapshotModel(BaseModel):
    """Hardware utilization at the time of the request."""

    cpu_percent: float = Field(
        0.0, ge=0, allow_inf_nan=False, description="CPU utilization percent"
    )
    memory_percent: float = Field(
        0.0, ge=0, allow_inf_nan=False, description="Memory utilization percent"
    )
    gpu_percent: float = Field(
        0.0, ge=0, allow_inf_nan=False, description="GPU utilization percent"
    )
    process_count: float = Field(
        0.0, ge=0, allow_inf_nan=False, description="Running process count"
    )

    def to_snapshot(self) -> HardwareSnapshot:
        return HardwareSnapshot(
            cpu_percent=self.cpu_percent,
            memory_percent=self.memory_percent,
            gpu_percent=self.gpu_percent,
            process_count=self.process_count,
        )


class TrainRequest(BaseModel):
    """Request to add a training sample."""

    action_type: str = Field(..., min_length=1, max_length=100, description="Action type")
    effectiveness: float = Field(..., description="Outcome score, clamped to 0-1")
    snapshot: SnapshotModel = Field(default_factory=SnapshotModel)


class FeedbackRequest(BaseModel):
    """User rating of an executed action."""

    action_type: str = Field(..., min_length=1, max_length=100, description="Action type")
    rating: int = Field(..., ge=1, le=5, description="Rating from 1 (bad) to 5 (great)")
    snapshot: SnapshotModel = Field(default_factory=SnapshotModel)


class LogRequest(BaseModel):
    """Record of an executed action."""

    success: bool = Field(True, description="Whether the action completed")
    details: dict[str, Any] = Field(default_factory=dict, description="Extra context")


# ============ Response Models ============


class PredictionItem(BaseModel):
    type: str
    score: float
    confidence: int


class PredictionResponse(BaseModel):
    """Ranked recommendations for a hardware state."""

    predictions: list[PredictionItem]
    confidence: int
    message: str


class ModelStatsResponse(BaseModel):
    total_samples: int
    type_counts: dict[str, int]
    avg_effectiveness: float
    is_ready: bool


class TrainingSampleResponse(BaseModel):
    features: list[float]
    action_type: str
    effectiveness: float
    created_at: str


class GateDecisionResponse(BaseModel):
    """Gate decision; only the fields relevant to the outcome are set."""

    allowed: bool
    reason: str | None = None
    remaining_seconds: int | None = None
    limit: int | None = None
    remaining: int | None = None
    message: str | None = None


class UsageRecordResponse(BaseModel):
    action_type: str
    timestamp_ms: int
    success: bool
    details: dict[str, Any]


class UsageTypeStatsResponse(BaseModel):
    today_count: int
    total_count: int
    limit: int
    success_rate: int
    last_used: str


class PolicyResponse(BaseModel):
    cooldown_ms: int
    daily_limit: int
    label: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str


class ErrorResponse(BaseModel):
    """Error response."""

    detail: str
