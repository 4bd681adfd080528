# src/trading_risk/core/models.py

# --- Built Ins  ---
from typing import Literal

# --- Installed  ---
from pydantic import BaseModel, ConfigDict, Field

# --- Local  ---
from .enums import Side, StrategyStatus


class AppBaseModel(BaseModel):
    """Base model for all risk data contracts. Instances are immutable."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


# --- Portfolio Models ---


class Position(AppBaseModel):
    """
    A per-symbol holding as supplied by the portfolio snapshot provider.
    `market_value` is the absolute mark-to-market notional, |quantity * last price|.
    """

    symbol: str
    quantity: float = Field(..., description="Signed quantity; negative means short.")
    average_price: float = Field(default=0.0, alias="averagePrice")
    market_value: float = Field(..., alias="marketValue")


# Keyed by symbol. Keys are unique, ordering carries no meaning.
Portfolio = dict[str, Position]


# --- Order Models ---


class OrderRequest(AppBaseModel):
    """
    An order awaiting pre-trade validation. Never stored.

    Construction rejects NaN/inf and zero or negative price/quantity with a
    ValidationError, so the risk engine only ever evaluates well-formed orders.
    """

    model_config = ConfigDict(allow_inf_nan=False)

    symbol: str = Field(..., min_length=1)
    side: Side
    price: float = Field(..., gt=0)
    quantity: float = Field(..., gt=0)

    @property
    def order_value(self) -> float:
        return self.price * self.quantity


# --- Strategy Models ---


class Strategy(AppBaseModel):
    """Running strategy context. Only `name` and `pnl` feed the risk checks."""

    id: str | None = None
    name: str
    pnl: float = Field(default=0.0, description="Running session P&L, negative is a loss.")
    status: StrategyStatus = StrategyStatus.STOPPED
    language: Literal["Rust", "Python", "C++"] | None = None
    latency: float | None = Field(default=None, description="Microseconds.")
    memory_usage: float | None = Field(default=None, alias="memoryUsage", description="MB.")
