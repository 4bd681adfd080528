# src/trading_risk/risk/engine.py

# --- Built Ins  ---
from collections.abc import Iterable
from typing import Optional

# --- Installed  ---
from loguru import logger as log

# --- Local  ---
from ..core.enums import RiskRule, Side
from ..core.models import OrderRequest, Position, Strategy
from ..utils.formatter import format_usd
from .models import Allowed, Denied, RiskCheckResult, RiskConfiguration


class RiskValidationEngine:
    """
    Pre-trade risk checker.

    Evaluates six guards in a fixed order and stops at the first violation,
    so the reported reason always belongs to the earliest failing rule:

    1. restricted symbol
    2. max order value
    3. global daily loss (circuit breaker, halts all trading)
    4. per-strategy daily loss (only with a strategy context)
    5. projected single-instrument exposure
    6. correlation-group exposure

    The engine is stateless apart from the active configuration reference. It
    never mutates the positions it is given; callers apply fills themselves
    after execution (see `trading_risk.portfolio.ledger`).
    """

    def __init__(self, config: RiskConfiguration):
        self._config = config

    @property
    def config(self) -> RiskConfiguration:
        return self._config

    def update_config(self, config: RiskConfiguration) -> None:
        """
        Swaps in a new configuration. The reference is replaced whole, never
        edited field by field, so an in-flight validation keeps the instance
        it started with.
        """
        previous = self._config
        self._config = config
        log.info(
            f"Risk configuration replaced: max_order_value {format_usd(previous.max_order_value)} -> "
            f"{format_usd(config.max_order_value)}, "
            f"{len(config.restricted_symbols)} restricted symbols, "
            f"{len(config.correlation_groups)} correlation groups"
        )

    def validate_order(
        self,
        symbol: str,
        side: Side,
        price: float,
        quantity: float,
        positions: Iterable[Position],
        strategy: Optional[Strategy],
        global_daily_pnl: float,
    ) -> RiskCheckResult:
        """
        Convenience entry point taking raw order fields.

        Raises pydantic.ValidationError for malformed orders (non-finite,
        zero or negative price/quantity); that is a caller contract violation,
        not a risk denial.
        """
        order = OrderRequest(symbol=symbol, side=side, price=price, quantity=quantity)
        return self.validate(order, positions, strategy, global_daily_pnl)

    def validate(
        self,
        order: OrderRequest,
        positions: Iterable[Position],
        strategy: Optional[Strategy],
        global_daily_pnl: float,
    ) -> RiskCheckResult:
        config = self._config
        result = self._evaluate(config, order, list(positions), strategy, global_daily_pnl)

        if isinstance(result, Denied):
            log.warning(f"Order blocked [{result.rule.value}] {order.side.value} {order.quantity} {order.symbol}: {result.reason}")
        else:
            log.debug(f"Order approved: {order.side.value} {order.quantity} {order.symbol} @ {order.price}")
        return result

    @staticmethod
    def _evaluate(
        config: RiskConfiguration,
        order: OrderRequest,
        positions: list[Position],
        strategy: Optional[Strategy],
        global_daily_pnl: float,
    ) -> RiskCheckResult:
        symbol = order.symbol
        order_value = order.order_value

        # 1. Restricted symbols: absolute veto.
        if symbol in config.restricted_symbols:
            return Denied(
                rule=RiskRule.RESTRICTED_SYMBOL,
                reason=f"Risk: Symbol {symbol} is restricted.",
            )

        # 2. Max order value
        if order_value > config.max_order_value:
            return Denied(
                rule=RiskRule.MAX_ORDER_VALUE,
                reason=f"Risk: Order value {format_usd(order_value)} exceeds limit {format_usd(config.max_order_value)}.",
                value=order_value,
                limit=config.max_order_value,
            )

        # 3. Global daily loss. Triggers at equality.
        if global_daily_pnl <= -config.max_global_daily_loss:
            return Denied(
                rule=RiskRule.GLOBAL_DAILY_LOSS,
                reason=f"Risk: Global daily loss limit reached ({format_usd(config.max_global_daily_loss)}). Trading halted.",
                value=global_daily_pnl,
                limit=config.max_global_daily_loss,
            )

        # 4. Strategy daily loss
        if strategy is not None and strategy.pnl <= -config.max_daily_loss_per_strategy:
            return Denied(
                rule=RiskRule.STRATEGY_DAILY_LOSS,
                reason=f"Risk: Strategy {strategy.name} hit daily loss limit ({format_usd(config.max_daily_loss_per_strategy)}).",
                value=strategy.pnl,
                limit=config.max_daily_loss_per_strategy,
            )

        # 5. Single instrument. Revalued at the order price, not the stored mark.
        current = next((p for p in positions if p.symbol == symbol), None)
        current_qty = current.quantity if current is not None else 0.0
        if order.side is Side.BUY:
            new_qty = current_qty + order.quantity
        else:
            new_qty = current_qty - order.quantity

        projected_exposure = abs(new_qty * order.price)
        if projected_exposure > config.max_position_size_usd:
            return Denied(
                rule=RiskRule.POSITION_LIMIT,
                reason=f"Risk: Projected {symbol} position {format_usd(projected_exposure)} exceeds limit {format_usd(config.max_position_size_usd)}.",
                value=projected_exposure,
                limit=config.max_position_size_usd,
            )

        # 6. Correlation group. The traded symbol's stored market value is
        # replaced by its projected exposure, so it is never counted twice.
        group = config.group_for(symbol)
        if group is not None:
            others = sum(p.market_value for p in positions if p.symbol in group.symbols and p.symbol != symbol)
            total_exposure = others + projected_exposure
            if total_exposure > group.max_exposure_usd:
                return Denied(
                    rule=RiskRule.CORRELATION_LIMIT,
                    reason=(
                        f"Risk: Correlation Limit Breached. Group '{group.name}' exposure would be "
                        f"{format_usd(total_exposure)} (Limit: {format_usd(group.max_exposure_usd)})."
                    ),
                    value=total_exposure,
                    limit=group.max_exposure_usd,
                )

        return Allowed()
