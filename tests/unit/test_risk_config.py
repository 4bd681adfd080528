# tests/unit/test_risk_config.py
"""
Unit tests for the risk configuration loader and serializers.

Tests cover:
- Loading from the env path and the local fallback
- Error handling for missing files
- Error handling for invalid TOML and schema violations
- Proper exception chaining with 'from' clause
- Lossless JSON round-trip
"""

import os
from pathlib import Path
from unittest.mock import mock_open, patch

import orjson
import pytest
from pydantic import ValidationError

from trading_risk.config.risk_config import (
    DEFAULT_RISK_CONFIG,
    dump_risk_config,
    load_risk_config,
    parse_risk_config,
)
from trading_risk.risk.models import RiskConfiguration

REPO_RISK_TOML = Path(__file__).parents[2] / "config" / "risk.toml"

VALID_TOML = b"""
max_position_size_usd = 100000.0
max_daily_loss_per_strategy = 5000.0
max_global_daily_loss = 10000.0
max_order_value = 50000.0
restricted_symbols = ["SCAM"]

[[correlation_groups]]
id = "CRYPTO"
name = "Crypto Assets"
symbols = ["BTC", "ETH", "SOL"]
max_exposure_usd = 150000.0
"""


class TestLoadRiskConfig:
    """Tests for load_risk_config function."""

    def test_load_from_env_path(self, risk_config):
        # Arrange
        mock_file = mock_open(read_data=VALID_TOML)

        with patch.dict(os.environ, {"RISK_CONFIG_PATH": "/app/config/risk.toml"}):
            with patch("pathlib.Path.is_file", return_value=True):
                with patch("builtins.open", mock_file):
                    # Act
                    config = load_risk_config()

                    # Assert
                    assert isinstance(config, RiskConfiguration)
                    assert config == risk_config
                    mock_file.assert_called_once_with(Path("/app/config/risk.toml"), "rb")

    def test_fallback_to_local_path(self):
        # Arrange
        mock_file = mock_open(read_data=VALID_TOML)

        with patch.dict(os.environ, {}, clear=True):
            with patch("pathlib.Path.is_file", return_value=True):
                with patch("builtins.open", mock_file):
                    # Act
                    config = load_risk_config()

                    # Assert
                    assert config.max_order_value == 50_000.0
                    mock_file.assert_called_once_with(Path("config") / "risk.toml", "rb")

    def test_env_path_missing_falls_back_to_local(self):
        # Arrange
        mock_file = mock_open(read_data=VALID_TOML)

        with patch.dict(os.environ, {"RISK_CONFIG_PATH": "/does/not/exist.toml"}):
            with patch("pathlib.Path.is_file") as mock_is_file:
                # First call returns False (env path), second returns True (local path)
                mock_is_file.side_effect = [False, True]
                with patch("builtins.open", mock_file):
                    # Act
                    config = load_risk_config()

                    # Assert
                    assert config.restricted_symbols == frozenset({"SCAM"})

    def test_file_not_found_raises_error(self):
        with patch.dict(os.environ, {}, clear=True):
            with patch("pathlib.Path.is_file", return_value=False):
                # Act & Assert
                with pytest.raises(FileNotFoundError, match="Risk config NOT FOUND"):
                    load_risk_config()

    def test_invalid_toml_raises_runtime_error_with_chaining(self):
        # Arrange
        mock_file = mock_open(read_data=b"invalid toml content [[[[")

        with patch.dict(os.environ, {"RISK_CONFIG_PATH": "/app/config/risk.toml"}):
            with patch("pathlib.Path.is_file", return_value=True):
                with patch("builtins.open", mock_file):
                    # Act & Assert
                    with pytest.raises(RuntimeError, match="RiskConfiguration validation failed") as exc_info:
                        load_risk_config()

                    # Verify exception chaining
                    assert exc_info.value.__cause__ is not None

    def test_validation_error_raises_runtime_error_with_chaining(self):
        # Arrange - Missing required limits
        mock_file = mock_open(read_data=b"max_order_value = 1000.0\n")

        with patch.dict(os.environ, {"RISK_CONFIG_PATH": "/app/config/risk.toml"}):
            with patch("pathlib.Path.is_file", return_value=True):
                with patch("builtins.open", mock_file):
                    # Act & Assert
                    with pytest.raises(RuntimeError, match="RiskConfiguration validation failed") as exc_info:
                        load_risk_config()

                    assert isinstance(exc_info.value.__cause__, ValidationError)

    def test_nan_limit_raises_runtime_error_with_chaining(self):
        # Arrange - TOML accepts nan, the limits must not
        mock_file = mock_open(read_data=VALID_TOML.replace(b"max_order_value = 50000.0", b"max_order_value = nan"))

        with patch.dict(os.environ, {"RISK_CONFIG_PATH": "/app/config/risk.toml"}):
            with patch("pathlib.Path.is_file", return_value=True):
                with patch("builtins.open", mock_file):
                    # Act & Assert
                    with pytest.raises(RuntimeError, match="RiskConfiguration validation failed") as exc_info:
                        load_risk_config()

                    assert isinstance(exc_info.value.__cause__, ValidationError)

    def test_shipped_config_matches_default(self):
        with patch.dict(os.environ, {"RISK_CONFIG_PATH": str(REPO_RISK_TOML)}):
            assert load_risk_config() == DEFAULT_RISK_CONFIG

    def test_load_real_file(self, tmp_path):
        # Arrange
        path = tmp_path / "limits.toml"
        path.write_bytes(VALID_TOML)

        with patch.dict(os.environ, {"RISK_CONFIG_PATH": str(path)}):
            # Act
            config = load_risk_config()

        # Assert
        assert config.group_for("ETH").name == "Crypto Assets"


class TestRiskConfigSerialization:
    """Tests for dump_risk_config / parse_risk_config."""

    def test_round_trip_preserves_every_field(self):
        # Act
        restored = parse_risk_config(dump_risk_config(DEFAULT_RISK_CONFIG))

        # Assert
        assert restored == DEFAULT_RISK_CONFIG
        assert [g.id for g in restored.correlation_groups] == ["CRYPTO_L1", "STABLE"]

    def test_dump_is_stable(self):
        payload = orjson.loads(dump_risk_config(DEFAULT_RISK_CONFIG))

        assert payload["restricted_symbols"] == ["FTT", "LUNA"]
        assert payload["correlation_groups"][0]["symbols"] == ["BTCUSDT", "ETHUSDT", "SOLUSDT"]
        assert payload["max_position_size_usd"] == 2_000_000

    def test_parse_accepts_dashboard_document(self):
        # Arrange
        document = """
        {
            "maxPositionSizeUSD": 2000000,
            "maxDailyLossPerStrategy": 50000,
            "maxGlobalDailyLoss": 100000,
            "maxOrderValue": 500000,
            "restrictedSymbols": ["LUNA", "FTT"],
            "correlationGroups": [
                {"id": "CRYPTO_L1", "name": "L1 Crypto (BTC/ETH)", "symbols": ["BTCUSDT", "ETHUSDT", "SOLUSDT"], "maxExposureUSD": 3000000},
                {"id": "STABLE", "name": "Stablecoins", "symbols": ["USDC", "USDT"], "maxExposureUSD": 5000000}
            ]
        }
        """

        # Act
        config = parse_risk_config(document)

        # Assert
        assert config == DEFAULT_RISK_CONFIG

    def test_parse_rejects_null_limit(self):
        # Arrange - what a non-finite float would serialize to
        payload = orjson.loads(dump_risk_config(DEFAULT_RISK_CONFIG))
        payload["max_position_size_usd"] = None

        # Act & Assert
        with pytest.raises(ValidationError):
            parse_risk_config(orjson.dumps(payload))

    def test_parse_rejects_duplicate_group_ids(self):
        payload = orjson.loads(dump_risk_config(DEFAULT_RISK_CONFIG))
        payload["correlation_groups"][1]["id"] = "CRYPTO_L1"

        with pytest.raises(ValidationError):
            parse_risk_config(orjson.dumps(payload))
