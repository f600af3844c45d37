"""
Item appraisal calculator.

Turns the attributes of a physical asset into an estimated value. The
calculation always produces a result: missing value information falls back
to a fixed base and is reflected in the confidence rating instead of an error.
"""

from appraisal_api.core.config import settings
from appraisal_api.services.utils import round_half_up
from appraisal_api.schemas.appraisal import (
    ItemAppraisalInput,
    ItemAppraisalResult,
    ItemCategory,
    ItemCondition,
)

# Straight-line depreciation per year of age
DEPRECIATION_RATES = {
    ItemCategory.ELECTRONICS: 0.20,
    ItemCategory.VEHICLES: 0.15,
    ItemCategory.FURNITURE: 0.10,
    ItemCategory.JEWELRY: 0.02,
    ItemCategory.EQUIPMENT: 0.12,
    ItemCategory.ART: -0.05,  # appreciates
    ItemCategory.OTHER: 0.10,
}
DEFAULT_DEPRECIATION_RATE = 0.10

CONDITION_MULTIPLIERS = {
    ItemCondition.EXCELLENT: 1.10,
    ItemCondition.GOOD: 1.00,
    ItemCondition.FAIR: 0.80,
    ItemCondition.POOR: 0.60,
}

MARKET_ADJUSTMENT_CAP = 0.5


def calculate_appraisal(data: ItemAppraisalInput) -> ItemAppraisalResult:
    base_value = max(data.original_value, data.market_comparables)
    if base_value == 0:
        base_value = data.market_comparables or settings.scoring.item_fallback_value

    rate = DEPRECIATION_RATES.get(data.category, DEFAULT_DEPRECIATION_RATE)
    retained = max(0.0, 1 - rate * data.age)

    condition_multiplier = CONDITION_MULTIPLIERS.get(data.condition, 1.0)

    market_adjustment = 0.0
    if data.market_comparables > 0 and data.original_value > 0:
        ratio = data.market_comparables / data.original_value
        market_adjustment = min(max(ratio - 1, -MARKET_ADJUSTMENT_CAP), MARKET_ADJUSTMENT_CAP)

    estimated_value = round_half_up(
        base_value * retained * condition_multiplier * (1 + market_adjustment)
    )

    if data.original_value > 0 and data.market_comparables > 0:
        confidence = "High"
    elif data.original_value > 0 or data.market_comparables > 0:
        confidence = "Medium"
    else:
        confidence = "Low"

    return ItemAppraisalResult(
        estimated_value=estimated_value,
        depreciation_factor=1 - retained,
        condition_adjustment=condition_multiplier - 1,
        market_adjustment=market_adjustment,
        confidence=confidence,
    )
