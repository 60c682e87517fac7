"""
Risk Classification Pattern - Cash Flow Forecasting Engine

Converts continuous metrics into discrete risk levels.

Use cases:
- Liquidity risk from the current ratio
- Runway risk from months of cash remaining
- Stress test outcome levels
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from enum import Enum
import logging

logger = logging.getLogger(__name__)


class RiskLevel(Enum):
    """Risk levels with associated properties."""
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @property
    def priority(self) -> int:
        """Numeric priority (lower = more urgent)."""
        return {
            RiskLevel.HIGH: 1,
            RiskLevel.MEDIUM: 2,
            RiskLevel.LOW: 3
        }[self]

    @property
    def color(self) -> str:
        """Standard color for visualization."""
        return {
            RiskLevel.HIGH: "#dc3545",    # Red
            RiskLevel.MEDIUM: "#ffc107",  # Yellow
            RiskLevel.LOW: "#28a745"      # Green
        }[self]


@dataclass
class RiskThreshold:
    """A half-open band [min_value, max_value) mapped to a level."""
    level: RiskLevel
    min_value: float
    max_value: float
    description: str = ""
    action_required: str = ""


@dataclass
class RiskClassification:
    """Result of classifying a metric."""
    metric: str
    value: float
    level: RiskLevel
    description: str
    action_required: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metric": self.metric,
            "value": self.value,
            "level": self.level.value,
            "level_priority": self.level.priority,
            "level_color": self.level.color,
            "description": self.description,
            "action_required": self.action_required,
            "metadata": self.metadata
        }


class RiskClassifier:
    """
    Classifies a metric into a risk level by threshold bands.

    Example for liquidity:
    ```python
    classifier = RiskClassifier("current_ratio", [
        RiskThreshold(RiskLevel.HIGH, 0, 1, "Liabilities exceed current assets"),
        RiskThreshold(RiskLevel.LOW, 1, float("inf"), "Current assets cover liabilities"),
    ])

    result = classifier.classify(0.6)
    print(result.level.value)  # "HIGH"
    ```
    """

    def __init__(self, metric: str, thresholds: List[RiskThreshold]):
        if not thresholds:
            raise ValueError("At least one threshold must be defined")

        self.metric = metric
        self.thresholds = sorted(thresholds, key=lambda t: t.min_value)
        self._validate_thresholds()

    def _validate_thresholds(self) -> None:
        """Warn on gaps or overlaps between bands."""
        for current, next_t in zip(self.thresholds, self.thresholds[1:]):
            if current.max_value != next_t.min_value:
                logger.warning(
                    f"Threshold gap/overlap in {self.metric} between {current.level.value} "
                    f"({current.max_value}) and {next_t.level.value} ({next_t.min_value})"
                )

    def classify(
        self,
        value: float,
        metadata: Optional[Dict[str, Any]] = None
    ) -> RiskClassification:
        """Classify a value; values outside all bands take the nearest band."""
        matched = None
        for threshold in self.thresholds:
            if threshold.min_value <= value < threshold.max_value:
                matched = threshold
                break

        if matched is None:
            matched = self.thresholds[0] if value < self.thresholds[0].min_value else self.thresholds[-1]

        return RiskClassification(
            metric=self.metric,
            value=round(value, 4),
            level=matched.level,
            description=matched.description,
            action_required=matched.action_required,
            metadata=metadata or {}
        )


# =============================================================================
# Factory Functions
# =============================================================================

def create_liquidity_risk_classifier() -> RiskClassifier:
    """Current ratio below 1 is high risk."""
    return RiskClassifier("current_ratio", [
        RiskThreshold(RiskLevel.HIGH, 0, 1,
                      "Current liabilities exceed current assets",
                      "Secure short-term financing; accelerate collections"),
        RiskThreshold(RiskLevel.LOW, 1, float("inf"),
                      "Current assets cover current liabilities",
                      "Routine monitoring"),
    ])


def create_runway_risk_classifier() -> RiskClassifier:
    """Months of runway: under 3 high, under 6 medium."""
    return RiskClassifier("runway_months", [
        RiskThreshold(RiskLevel.HIGH, 0, 3,
                      "Less than three months of cash",
                      "Cut discretionary spend; raise funding immediately"),
        RiskThreshold(RiskLevel.MEDIUM, 3, 6,
                      "Three to six months of cash",
                      "Plan financing; review burn weekly"),
        RiskThreshold(RiskLevel.LOW, 6, float("inf"),
                      "Six months or more of cash",
                      "Routine monitoring"),
    ])
