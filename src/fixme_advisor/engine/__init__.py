"""Recommendation and gating engine."""

from fixme_advisor.engine.features import FEATURE_COUNT, extract_features
from fixme_advisor.engine.predictor import KNNPredictor, ModelStats, Prediction, PredictionResult
from fixme_advisor.engine.trainer import Trainer, rating_to_effectiveness
from fixme_advisor.engine.usage_gate import GateDecision, UsageGate, UsageTypeStats

__all__ = [
    "FEATURE_COUNT",
    "GateDecision",
    "KNNPredictor",
    "ModelStats",
    "Prediction",
    "PredictionResult",
    "Trainer",
    "UsageGate",
    "UsageTypeStats",
    "extract_features",
    "rating_to_effectiveness",
]
