# src/trading_risk/config/risk_config.py

# --- Built Ins  ---
import os
import tomllib
from pathlib import Path

# --- Installed  ---
import orjson
from loguru import logger as log
from pydantic import ValidationError

# --- Local  ---
from ..risk.models import CorrelationGroup, RiskConfiguration

RISK_CONFIG_ENV_VAR = "RISK_CONFIG_PATH"
LOCAL_RISK_CONFIG_PATH = Path("config") / "risk.toml"

# The dashboard's startup limits.
DEFAULT_RISK_CONFIG = RiskConfiguration(
    max_position_size_usd=2_000_000,
    max_daily_loss_per_strategy=50_000,
    max_global_daily_loss=100_000,
    max_order_value=500_000,
    restricted_symbols=frozenset({"LUNA", "FTT"}),
    correlation_groups=(
        CorrelationGroup(
            id="CRYPTO_L1",
            name="L1 Crypto (BTC/ETH)",
            symbols=frozenset({"BTCUSDT", "ETHUSDT", "SOLUSDT"}),
            max_exposure_usd=3_000_000,
        ),
        CorrelationGroup(
            id="STABLE",
            name="Stablecoins",
            symbols=frozenset({"USDC", "USDT"}),
            max_exposure_usd=5_000_000,
        ),
    ),
)


def load_risk_config() -> RiskConfiguration:
    """
    Loads the risk limits from TOML.

    Lookup order:
    1. The path in RISK_CONFIG_PATH, if it points at a file.
    2. config/risk.toml relative to the working directory.

    Raises:
        FileNotFoundError: neither location holds a file.
        RuntimeError: the file is not valid TOML or fails schema validation.
    """
    candidates = []
    env_path = os.environ.get(RISK_CONFIG_ENV_VAR)
    if env_path:
        candidates.append(Path(env_path))
    candidates.append(LOCAL_RISK_CONFIG_PATH)

    config_path = next((path for path in candidates if path.is_file()), None)
    if config_path is None:
        searched = ", ".join(str(path) for path in candidates)
        raise FileNotFoundError(f"Risk config NOT FOUND. Searched: {searched}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
        config = RiskConfiguration.model_validate(data)
    except (tomllib.TOMLDecodeError, ValidationError) as e:
        log.error(f"Failed to load risk config from {config_path}: {e}")
        raise RuntimeError(f"RiskConfiguration validation failed for {config_path}") from e

    log.info(
        f"Loaded risk config from {config_path}: "
        f"{len(config.restricted_symbols)} restricted symbols, {len(config.correlation_groups)} correlation groups"
    )
    return config


def dump_risk_config(config: RiskConfiguration) -> bytes:
    """Serializes every field; symbol sets are written sorted so output is stable."""
    return orjson.dumps(config.model_dump(mode="json"))


def parse_risk_config(payload: bytes | str) -> RiskConfiguration:
    """Inverse of `dump_risk_config`. Also accepts the dashboard's camelCase keys."""
    return RiskConfiguration.model_validate(orjson.loads(payload))
