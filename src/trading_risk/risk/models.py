# src/trading_risk/risk/models.py

# --- Built Ins  ---
from typing import Annotated, Literal, Optional, Union

# --- Installed  ---
from pydantic import ConfigDict, Field, field_serializer, model_validator

# --- Local  ---
from ..core.enums import RiskRule
from ..core.models import AppBaseModel


class CorrelationGroup(AppBaseModel):
    """
    A set of instruments whose combined notional is capped on top of the
    per-instrument cap (sector / asset-class concentration).
    """

    # A NaN cap would make every `>` comparison false and silently pass orders.
    model_config = ConfigDict(allow_inf_nan=False)

    id: str = Field(..., min_length=1)
    name: str
    symbols: frozenset[str]
    max_exposure_usd: float = Field(..., ge=0, alias="maxExposureUSD")

    @field_serializer("symbols")
    def _serialize_symbols(self, symbols: frozenset[str]) -> list[str]:
        return sorted(symbols)


class RiskConfiguration(AppBaseModel):
    """
    The active set of pre-trade limits.

    Immutable: operators change limits by building a new instance and handing it
    to `RiskValidationEngine.update_config`. Accepts the dashboard's camelCase
    keys as aliases.
    """

    model_config = ConfigDict(allow_inf_nan=False)

    max_position_size_usd: float = Field(..., ge=0, alias="maxPositionSizeUSD")
    max_daily_loss_per_strategy: float = Field(..., ge=0, alias="maxDailyLossPerStrategy")
    max_global_daily_loss: float = Field(..., ge=0, alias="maxGlobalDailyLoss")
    max_order_value: float = Field(..., ge=0, alias="maxOrderValue")
    restricted_symbols: frozenset[str] = Field(default_factory=frozenset, alias="restrictedSymbols")
    # Ordered: the first group listing a symbol is the one enforced for it.
    correlation_groups: tuple[CorrelationGroup, ...] = Field(default=(), alias="correlationGroups")

    @model_validator(mode="after")
    def _check_unique_group_ids(self) -> "RiskConfiguration":
        seen: set[str] = set()
        for group in self.correlation_groups:
            if group.id in seen:
                raise ValueError(f"Duplicate correlation group id '{group.id}'")
            seen.add(group.id)
        return self

    @field_serializer("restricted_symbols")
    def _serialize_restricted(self, symbols: frozenset[str]) -> list[str]:
        return sorted(symbols)

    def group_for(self, symbol: str) -> Optional[CorrelationGroup]:
        """Returns the first correlation group (in list order) containing `symbol`."""
        return next((g for g in self.correlation_groups if symbol in g.symbols), None)


# --- Verdicts ---


class Allowed(AppBaseModel):
    """The order passed every guard."""

    outcome: Literal["allowed"] = "allowed"

    @property
    def allowed(self) -> bool:
        return True

    @property
    def reason(self) -> None:
        return None


class Denied(AppBaseModel):
    """
    The order failed a guard. `rule` names the first failing check; `value` and
    `limit` are the raw numbers it compared, kept for audit.
    """

    outcome: Literal["denied"] = "denied"
    rule: RiskRule
    reason: str = Field(..., min_length=1)
    value: Optional[float] = None
    limit: Optional[float] = None

    @property
    def allowed(self) -> bool:
        return False


RiskCheckResult = Annotated[Union[Allowed, Denied], Field(discriminator="outcome")]
