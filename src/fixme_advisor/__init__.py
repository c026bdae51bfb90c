"""fixme-advisor - local adaptive recommendations and usage gating for system tuning."""

from fixme_advisor.core.action_type import ActionPolicy, ActionType
from fixme_advisor.core.snapshot import HardwareSnapshot
from fixme_advisor.core.training_sample import TrainingSample
from fixme_advisor.core.usage_record import UsageRecord
from fixme_advisor.engine.features import extract_features
from fixme_advisor.engine.predictor import KNNPredictor, ModelStats, PredictionResult
from fixme_advisor.engine.trainer import Trainer
from fixme_advisor.engine.usage_gate import GateDecision, UsageGate, UsageTypeStats
from fixme_advisor.service import ActionOutcome, AdvisorService

__version__ = "0.1.0"

__all__ = [
    # Core models
    "ActionPolicy",
    "ActionType",
    "HardwareSnapshot",
    "TrainingSample",
    "UsageRecord",
    # Engine
    "KNNPredictor",
    "ModelStats",
    "PredictionResult",
    "Trainer",
    "UsageGate",
    "GateDecision",
    "UsageTypeStats",
    "extract_features",
    # Facade
    "AdvisorService",
    "ActionOutcome",
    # Version
    "__version__",
]
