# src/trading_risk/risk/exposure.py

# --- Built Ins  ---
from collections.abc import Iterable

# --- Installed  ---
from loguru import logger as log
from pydantic import Field, computed_field

# --- Local  ---
from ..core.models import AppBaseModel, Position
from ..utils.formatter import format_currency, format_percent
from .models import RiskConfiguration


def _utilization(exposure: float, limit: float) -> float:
    """Percentage of `limit` consumed, clamped to [0, 100]."""
    if limit <= 0:
        return 100.0 if exposure > 0 else 0.0
    return max(0.0, min(exposure * 100 / limit, 100.0))


class GroupExposure(AppBaseModel):
    id: str
    name: str
    exposure: float
    limit: float

    @computed_field
    @property
    def utilization(self) -> float:
        return _utilization(self.exposure, self.limit)


class RiskSnapshot(AppBaseModel):
    """
    Point-in-time view of limit usage, as shown on the dashboard's risk panel.
    Informational only; the engine never consults it.
    """

    symbol: str
    current_exposure: float
    max_position_size_usd: float
    global_daily_pnl: float
    max_global_daily_loss: float
    groups: list[GroupExposure] = Field(default_factory=list)

    @computed_field
    @property
    def position_utilization(self) -> float:
        return _utilization(self.current_exposure, self.max_position_size_usd)

    @computed_field
    @property
    def global_drawdown(self) -> float:
        return abs(min(self.global_daily_pnl, 0.0))

    @computed_field
    @property
    def drawdown_utilization(self) -> float:
        return _utilization(self.global_drawdown, self.max_global_daily_loss)

    @computed_field
    @property
    def is_halted(self) -> bool:
        return self.drawdown_utilization >= 100.0

    def summary(self) -> str:
        state = "SYSTEM HALTED" if self.is_halted else "MONITORING ACTIVE"
        parts = [
            state,
            f"{self.symbol} {format_currency(self.current_exposure)} ({format_percent(self.position_utilization)})",
            f"drawdown {format_currency(self.global_drawdown)} ({format_percent(self.drawdown_utilization)})",
        ]
        parts.extend(f"{g.name} {format_percent(g.utilization)}" for g in self.groups)
        return " | ".join(parts)


def compute_group_exposures(config: RiskConfiguration, positions: Iterable[Position]) -> dict[str, float]:
    """
    Current notional per correlation group, keyed by group id. Unlike the
    pre-trade check, a position counts toward every group that lists it.
    """
    positions = list(positions)
    return {
        group.id: sum(p.market_value for p in positions if p.symbol in group.symbols)
        for group in config.correlation_groups
    }


def build_risk_snapshot(
    config: RiskConfiguration,
    positions: Iterable[Position],
    symbol: str,
    global_daily_pnl: float,
) -> RiskSnapshot:
    positions = list(positions)
    exposures = compute_group_exposures(config, positions)
    current = next((p for p in positions if p.symbol == symbol), None)

    snapshot = RiskSnapshot(
        symbol=symbol,
        current_exposure=current.market_value if current is not None else 0.0,
        max_position_size_usd=config.max_position_size_usd,
        global_daily_pnl=global_daily_pnl,
        max_global_daily_loss=config.max_global_daily_loss,
        groups=[
            GroupExposure(id=g.id, name=g.name, exposure=exposures[g.id], limit=g.max_exposure_usd)
            for g in config.correlation_groups
        ],
    )
    if snapshot.is_halted:
        log.warning(f"Risk snapshot: {snapshot.summary()}")
    else:
        log.debug(f"Risk snapshot: {snapshot.summary()}")
    return snapshot
