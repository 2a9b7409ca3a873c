"""UFix64 amount handling for user input and display."""
from __future__ import annotations

import math


def normalize_amount(text: str) -> str:
    """Turn free-text input into the decimal shape UFix64 arguments require.

    Examples:
        ""   → "0.0"
        ".5" → "0.5"
        "5"  → "5.0"
        "5." → "5.0"

    Sign and range are not checked; the ledger rejects values it cannot
    decode.
    """
    value = text.strip()
    if not value:
        return "0.0"
    if value.startswith("."):
        value = f"0{value}"
    if "." not in value:
        value = f"{value}.0"
    if value.endswith("."):
        value = f"{value}0"
    return value


def format_amount(value: str | float | None, places: int = 4) -> str:
    """Fixed-decimal display of an amount; absent or unparseable shows as zero."""
    if value is None or value == "":
        return f"{0:.{places}f}"
    try:
        number = float(value)
    except ValueError:
        number = 0.0
    if not math.isfinite(number):
        number = 0.0
    return f"{number:.{places}f}"


def format_health_factor(value: float) -> str:
    """Three-decimal health factor; a debt-free position shows as ∞."""
    return "∞" if math.isinf(value) else f"{value:.3f}"
