# src/trading_risk/core/enums.py

from enum import Enum


class Side(str, Enum):
    """Direction of an order. Single source of truth for BUY/SELL strings."""

    BUY = "BUY"
    SELL = "SELL"


class StrategyStatus(str, Enum):
    RUNNING = "RUNNING"
    PAUSED = "PAUSED"
    STOPPED = "STOPPED"
    ERROR = "ERROR"


class RiskRule(str, Enum):
    """
    The pre-trade guards, listed in the order the engine evaluates them.
    A denial names exactly one of these.
    """

    RESTRICTED_SYMBOL = "RESTRICTED_SYMBOL"
    MAX_ORDER_VALUE = "MAX_ORDER_VALUE"
    GLOBAL_DAILY_LOSS = "GLOBAL_DAILY_LOSS"
    STRATEGY_DAILY_LOSS = "STRATEGY_DAILY_LOSS"
    POSITION_LIMIT = "POSITION_LIMIT"
    CORRELATION_LIMIT = "CORRELATION_LIMIT"
