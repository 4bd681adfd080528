# src/trading_risk/utils/formatter.py


# --- Helper Functions for Formatting ---
def format_usd(value: float) -> str:
    """
    Dollar amount with thousands separators, e.g. '$1,234.5'. Rounds to six
    decimals and drops trailing zeros, so sub-micro amounts render as $0.
    """
    text = f"{abs(value):,.6f}".rstrip("0").rstrip(".")
    return f"{'-' if value < 0 else ''}${text}"


def format_currency(value: float, precision: int = 2) -> str:
    if value > 1_000_000_000:
        return f"${value/1_000_000_000:.{precision}f}B"
    if value > 1_000_000:
        return f"${value/1_000_000:.{precision}f}M"
    if value > 1_000:
        return f"${value/1_000:.{precision}f}K"
    return f"${value:.{precision}f}"


def format_percent(value: float) -> str:
    """`value` is already a percentage (0-100), not a fraction."""
    return f"{value:.1f}%"
