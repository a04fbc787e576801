"""
Tests for process costing configuration.

Covers:
- Schema defaults and validation
- YAML loading with and without the root key
- get_active_config resolution order (argument, environment, defaults)
"""

from decimal import Decimal

import pytest
import yaml

from costing_config import CONFIG_ENV_VAR, get_active_config
from costing_config.loader import load_config, parse_config
from costing_config.schema import ProcessCostingConfig
from costing_engines.variance import VarianceThresholds


class TestProcessCostingConfig:

    def test_defaults(self):
        config = ProcessCostingConfig.with_defaults()
        assert config.default_currency == "SAR"
        assert config.default_unit == "units"
        assert config.variance_thresholds == VarianceThresholds()

    def test_empty_currency_rejected(self):
        with pytest.raises(ValueError):
            ProcessCostingConfig(default_currency=" ")

    def test_empty_unit_rejected(self):
        with pytest.raises(ValueError):
            ProcessCostingConfig(default_unit="")

    def test_from_dict(self):
        config = ProcessCostingConfig.from_dict({
            "default_currency": "USD",
            "variance_thresholds": {"medium_percent": 3, "high_percent": "7.5"},
        })
        assert config.default_currency == "USD"
        assert config.default_unit == "units"
        assert config.variance_thresholds.medium_percent == Decimal("3")
        assert config.variance_thresholds.high_percent == Decimal("7.5")

    def test_from_dict_unknown_key(self):
        with pytest.raises(TypeError):
            ProcessCostingConfig.from_dict({"default_colour": "blue"})

    def test_from_dict_inverted_thresholds(self):
        with pytest.raises(ValueError):
            ProcessCostingConfig.from_dict({
                "variance_thresholds": {"medium_percent": 10, "high_percent": 5},
            })


class TestLoader:

    def test_parse_with_root_key(self):
        config = parse_config({"process_costing": {"default_unit": "kg"}})
        assert config.default_unit == "kg"

    def test_parse_empty_root_key(self):
        assert parse_config({"process_costing": None}).default_currency == "SAR"

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "costing.yaml"
        path.write_text(
            "process_costing:\n"
            "  default_currency: EUR\n"
            "  default_unit: liters\n"
            "  variance_thresholds:\n"
            "    medium_percent: 2\n"
            "    high_percent: 4\n"
        )
        config = load_config(path)
        assert config.default_currency == "EUR"
        assert config.default_unit == "liters"
        assert config.variance_thresholds.high_percent == Decimal("4")

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == ProcessCostingConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.yaml")

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("process_costing: [unclosed\n")
        with pytest.raises(yaml.YAMLError):
            load_config(path)


class TestGetActiveConfig:

    def test_defaults_without_source(self, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        assert get_active_config() == ProcessCostingConfig()

    def test_explicit_path(self, tmp_path, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        path = tmp_path / "costing.yaml"
        path.write_text("default_currency: KWD\n")
        assert get_active_config(path).default_currency == "KWD"

    def test_environment_variable(self, tmp_path, monkeypatch):
        path = tmp_path / "env.yaml"
        path.write_text("default_currency: QAR\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        assert get_active_config().default_currency == "QAR"

    def test_explicit_path_wins_over_environment(self, tmp_path, monkeypatch):
        env_path = tmp_path / "env.yaml"
        env_path.write_text("default_currency: QAR\n")
        arg_path = tmp_path / "arg.yaml"
        arg_path.write_text("default_currency: OMR\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(env_path))
        assert get_active_config(arg_path).default_currency == "OMR"

    def test_emits_config_trace(self, monkeypatch, captured_logs):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        get_active_config()
        traces = [r for r in captured_logs() if r["message"] == "COSTING_CONFIG_TRACE"]
        assert len(traces) == 1
        assert traces[0]["source"] == "defaults"
        assert traces[0]["default_currency"] == "SAR"
