"""Position risk math — pure functions, no I/O.

All figures are plain token amounts (FLOW), not USD values:

    health_factor    = collateral * collateral_factor / borrowed
    max_borrowable   = collateral * collateral_factor / liquidation_threshold - borrowed
    max_withdrawable = collateral - borrowed * liquidation_threshold / collateral_factor

Borrowing ``max_borrowable`` or withdrawing ``max_withdrawable`` leaves the
position exactly at ``liquidation_threshold``.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from .models import HealthSummary, Position

COLLATERAL_FACTOR = 0.75
LIQUIDATION_THRESHOLD = 1.05


@dataclass(frozen=True)
class RiskParameters:
    collateral_factor: float = COLLATERAL_FACTOR
    liquidation_threshold: float = LIQUIDATION_THRESHOLD


DEFAULT_PARAMETERS = RiskParameters()


def parse_amount(value: str | None) -> float:
    """Parse a ledger amount string, treating anything unusable as 0."""
    if value is None:
        return 0.0
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return 0.0
    return parsed if math.isfinite(parsed) else 0.0


def health_factor(
    collateral: float,
    borrowed: float,
    params: RiskParameters = DEFAULT_PARAMETERS,
) -> float:
    """Risk-weighted collateral over debt; ``inf`` when there is no debt."""
    if borrowed <= 0:
        return float("inf")
    return (collateral * params.collateral_factor) / borrowed


def max_borrowable(
    collateral: float,
    borrowed: float,
    params: RiskParameters = DEFAULT_PARAMETERS,
) -> float:
    """Additional debt that keeps the health factor at or above the threshold."""
    max_debt = (collateral * params.collateral_factor) / params.liquidation_threshold
    return max(0.0, max_debt - borrowed)


def max_withdrawable(
    collateral: float,
    borrowed: float,
    params: RiskParameters = DEFAULT_PARAMETERS,
) -> float:
    """Collateral that can be removed while keeping the same health constraint."""
    if borrowed <= 0:
        return max(0.0, collateral)
    min_collateral_needed = (borrowed * params.liquidation_threshold) / params.collateral_factor
    return max(0.0, collateral - min_collateral_needed)


def is_at_risk(hf: float, params: RiskParameters = DEFAULT_PARAMETERS) -> bool:
    """True when the position is eligible for liquidation."""
    return hf < params.liquidation_threshold


def get_health_summary(
    position: Position | None,
    params: RiskParameters = DEFAULT_PARAMETERS,
) -> HealthSummary:
    """Derive display figures for a position; an absent position counts as empty."""
    collateral = parse_amount(position.collateral if position else None)
    borrowed = parse_amount(position.borrowed if position else None)
    return HealthSummary(
        health_factor=health_factor(collateral, borrowed, params),
        max_borrowable=max_borrowable(collateral, borrowed, params),
        max_withdrawable=max_withdrawable(collateral, borrowed, params),
    )
