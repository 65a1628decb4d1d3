"""
Tests for YAML configuration loading and lookups.
"""

import pytest

from config_manager import ConfigManager, get_config, get_scoring_defaults
from scoreboard_types import ScoringConfig


def _write(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return str(path)


class TestConfigManager:

    def test_project_config_loads_and_validates(self):
        cfg = get_config()
        assert cfg.validate()
        assert cfg.get('scoring.benchmark.industry_average') == 7.2
        assert cfg.get('scoring.history.max_entries') == 1000

    def test_dot_notation_default(self, tmp_path):
        cfg = ConfigManager(_write(tmp_path, "models:\n  evaluator:\n    model_name: judge-1\n"))
        assert cfg.get('models.evaluator.model_name') == "judge-1"
        assert cfg.get('models.evaluator.temperature', 0.3) == 0.3
        assert cfg.get('models.evaluator.model_name.extra', "fallback") == "fallback"

    def test_missing_file_uses_defaults(self, tmp_path):
        cfg = ConfigManager(str(tmp_path / "missing.yaml"))
        assert cfg.get('system.name') == "LegalScore"
        assert cfg.get('scoring.history.max_entries') == 1000

    def test_invalid_yaml_uses_defaults(self, tmp_path):
        cfg = ConfigManager(_write(tmp_path, "scoring: [unclosed\n"))
        assert cfg.get('external_services.llm.api_key_env') == "LEGAL_LLM_API_KEY"

    def test_testing_environment_overrides(self, tmp_path):
        cfg = ConfigManager(_write(tmp_path, "system:\n  environment: testing\n"))
        assert cfg.get('logging.level') == "DEBUG"
        assert cfg.get_timeout('llm_request') == 30

    def test_production_environment_overrides(self, tmp_path):
        cfg = ConfigManager(_write(tmp_path, "system:\n  environment: production\n  debug: true\n"))
        assert cfg.get('logging.level') == "WARNING"
        assert cfg.is_debug_enabled() is False

    def test_decision_logging_switches(self, tmp_path):
        cfg = ConfigManager(_write(
            tmp_path, "logging:\n  decisions:\n    enabled: true\n    analyzer: false\n"
        ))
        assert cfg.is_decision_logging_enabled('scoreboard')
        assert not cfg.is_decision_logging_enabled('analyzer')

        muted = ConfigManager(_write(tmp_path, "logging:\n  decisions:\n    enabled: false\n"))
        assert not muted.is_decision_logging_enabled('scoreboard')
        assert not muted.is_decision_logging_enabled()

    def test_validate_rejects_bad_baseline(self, tmp_path):
        cfg = ConfigManager(_write(tmp_path, (
            "system: {}\n"
            "models:\n  evaluator:\n    model_name: judge\n"
            "scoring:\n  benchmark:\n    industry_average: 0\n"
        )))
        assert cfg.validate() is False


class TestScoringDefaults:

    def test_defaults_come_from_yaml(self):
        defaults = get_scoring_defaults()
        assert defaults["minimumConfidenceThreshold"] == 0.6
        config = ScoringConfig.from_defaults()
        assert config.require_precedent_analysis is True
        assert config.custom_weights is None

    def test_overrides_win(self):
        config = ScoringConfig.from_defaults({"strictAccuracyMode": True, "minimumConfidenceThreshold": 0.8})
        assert config.strict_accuracy_mode is True
        assert config.minimum_confidence_threshold == 0.8

    def test_override_validation(self):
        with pytest.raises(ValueError):
            ScoringConfig.from_defaults({"customWeights": {"clarity": 1.5}})
