"""
Liquidity Analyzer

Current, quick and cash ratios from a balance sheet snapshot, with a textual
interpretation, warning flags and a risk classification.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from src.common.numeric import safe_divide
from src.patterns.risk_classification import (
    RiskClassification,
    RiskClassifier,
    RiskLevel,
    create_liquidity_risk_classifier
)
from .statements import BalanceSheetSnapshot

logger = logging.getLogger(__name__)

LOW_CURRENT_RATIO = "LOW_CURRENT_RATIO"
LOW_QUICK_RATIO = "LOW_QUICK_RATIO"
LOW_CASH_RATIO = "LOW_CASH_RATIO"
NO_CURRENT_LIABILITIES = "NO_CURRENT_LIABILITIES"

CASH_RATIO_WARNING_LEVEL = 0.2


@dataclass(frozen=True)
class LiquidityMetrics:
    """Liquidity ratios for one snapshot"""
    current_ratio: float
    quick_ratio: float
    cash_ratio: float
    interpretation: str
    risk_level: RiskLevel
    warnings: List[str] = field(default_factory=list)
    classification: Optional[RiskClassification] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_ratio": self.current_ratio,
            "quick_ratio": self.quick_ratio,
            "cash_ratio": self.cash_ratio,
            "interpretation": self.interpretation,
            "risk_level": self.risk_level.value,
            "warnings": list(self.warnings)
        }


class LiquidityAnalyzer:
    """
    Computes liquidity ratios.

    Example:
    ```python
    analyzer = LiquidityAnalyzer()
    metrics = analyzer.analyze(BalanceSheetSnapshot.from_dict({
        "currentAssets": 150000, "currentLiabilities": 75000, "cash": 50000
    }))
    print(metrics.current_ratio, metrics.risk_level.value)  # 2.0 LOW
    ```
    """

    def __init__(self, classifier: Optional[RiskClassifier] = None):
        self.classifier = classifier or create_liquidity_risk_classifier()

    def analyze(self, balance_sheet: BalanceSheetSnapshot) -> LiquidityMetrics:
        assets = balance_sheet.current_assets
        liabilities = balance_sheet.current_liabilities.total

        current_ratio = safe_divide(assets.total, liabilities)
        quick_ratio = safe_divide(assets.cash + assets.accounts_receivable, liabilities)
        cash_ratio = safe_divide(assets.cash, liabilities)

        warnings = []
        if liabilities == 0:
            # Ratios are undefined; nothing is owed so there is no liquidity risk
            warnings.append(NO_CURRENT_LIABILITIES)
            classification = None
            risk_level = RiskLevel.LOW
        else:
            if current_ratio < 1:
                warnings.append(LOW_CURRENT_RATIO)
            if quick_ratio < 1:
                warnings.append(LOW_QUICK_RATIO)
            if cash_ratio < CASH_RATIO_WARNING_LEVEL:
                warnings.append(LOW_CASH_RATIO)
            classification = self.classifier.classify(current_ratio, {
                "quick_ratio": quick_ratio,
                "cash_ratio": cash_ratio
            })
            risk_level = classification.level

        if warnings:
            logger.debug(f"Liquidity warnings: {', '.join(warnings)}")

        return LiquidityMetrics(
            current_ratio=round(current_ratio, 4),
            quick_ratio=round(quick_ratio, 4),
            cash_ratio=round(cash_ratio, 4),
            interpretation=self.interpret(current_ratio, liabilities),
            risk_level=risk_level,
            warnings=warnings,
            classification=classification
        )

    @staticmethod
    def interpret(current_ratio: float, liabilities: float = 1.0) -> str:
        """Describe the current ratio band."""
        if liabilities == 0:
            return "No current liabilities - liquidity ratios not applicable"
        if current_ratio < 1:
            return "Low liquidity - may struggle to meet short-term obligations"
        if current_ratio < 2:
            return "Moderate liquidity - monitor cash flow closely"
        if current_ratio < 3:
            return "Good liquidity - healthy short-term financial position"
        return "Excellent liquidity - very strong short-term financial position"
