"""Risk tiering of the inherent risk rating (IRR)."""

from __future__ import annotations

from typing import Literal

RiskTier = Literal["Critical", "High", "Medium", "Low"]

RISK_TIER_ORDER: tuple[RiskTier, ...] = ("Critical", "High", "Medium", "Low")

# Inclusive lower bounds, most severe first.
_THRESHOLDS: tuple[tuple[float, RiskTier], ...] = (
    (4.0, "Critical"),
    (3.0, "High"),
    (2.0, "Medium"),
)


def classify_risk_tier(score: float) -> RiskTier:
    """Bucket a risk score: >=4 Critical, >=3 High, >=2 Medium, otherwise Low.

    Total over floats; NaN falls through every comparison and lands in Low.
    """
    for bound, tier in _THRESHOLDS:
        if score >= bound:
            return tier
    return "Low"


def risk_tier_rank(tier: str) -> int:
    """Sort key placing Critical first; unknown labels sort last."""
    try:
        return RISK_TIER_ORDER.index(tier)  # type: ignore[arg-type]
    except ValueError:
        return len(RISK_TIER_ORDER)
