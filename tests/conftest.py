# tests/conftest.py
"""
Pytest configuration and shared fixtures.
"""

import pytest

from trading_risk.risk.engine import RiskValidationEngine
from trading_risk.risk.models import CorrelationGroup, RiskConfiguration


@pytest.fixture(autouse=True)
def reset_environment():
    """Reset environment variables between tests."""
    import os

    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def risk_config() -> RiskConfiguration:
    """Small limits with a single crypto group, convenient for hand-computed scenarios."""
    return RiskConfiguration(
        max_position_size_usd=100_000,
        max_daily_loss_per_strategy=5_000,
        max_global_daily_loss=10_000,
        max_order_value=50_000,
        restricted_symbols=frozenset({"SCAM"}),
        correlation_groups=(
            CorrelationGroup(
                id="CRYPTO",
                name="Crypto Assets",
                symbols=frozenset({"BTC", "ETH", "SOL"}),
                max_exposure_usd=150_000,
            ),
        ),
    )


@pytest.fixture
def engine(risk_config) -> RiskValidationEngine:
    return RiskValidationEngine(risk_config)
