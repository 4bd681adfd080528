# src/trading_risk/portfolio/ledger.py
"""
Caller-side portfolio bookkeeping.

The risk engine only reads positions. After an approved order is executed the
caller folds the fill into its portfolio with `apply_fill`, and refreshes
marks on every tick with `mark_to_market`. Both return a new mapping and leave
the input untouched.
"""

# --- Built Ins  ---
from collections.abc import Iterable

# --- Installed  ---
from loguru import logger as log

# --- Local  ---
from ..core.enums import Side
from ..core.models import Portfolio, Position, Strategy

# Below this absolute quantity a position is considered flat.
FLAT_QUANTITY_EPSILON = 1e-6


def apply_fill(
    portfolio: Portfolio,
    symbol: str,
    side: Side,
    quantity: float,
    fill_price: float,
    mark_price: float,
) -> Portfolio:
    side = Side(side)
    previous = portfolio.get(symbol) or Position(symbol=symbol, quantity=0.0, market_value=0.0)

    if side is Side.BUY:
        new_quantity = previous.quantity + quantity
    else:
        new_quantity = previous.quantity - quantity

    # Only buys move the average entry; sells realise against it.
    average_price = previous.average_price
    if side is Side.BUY and new_quantity != 0:
        total_cost = previous.quantity * previous.average_price + quantity * fill_price
        average_price = total_cost / new_quantity
    if abs(new_quantity) < FLAT_QUANTITY_EPSILON:
        average_price = 0.0

    updated = Position(
        symbol=symbol,
        quantity=new_quantity,
        average_price=abs(average_price),
        market_value=abs(new_quantity * mark_price),
    )
    log.info(f"Fill applied: {side.value} {quantity} {symbol} @ {fill_price} -> qty {new_quantity}")
    return {**portfolio, symbol: updated}


def mark_to_market(portfolio: Portfolio, symbol: str, last_price: float) -> Portfolio:
    position = portfolio.get(symbol)
    if position is None:
        return portfolio
    marked = position.model_copy(update={"market_value": abs(position.quantity * last_price)})
    return {**portfolio, symbol: marked}


def total_strategy_pnl(strategies: Iterable[Strategy]) -> float:
    """Aggregate session P&L across strategies, fed to the engine as the global daily P&L."""
    return sum(s.pnl for s in strategies)
