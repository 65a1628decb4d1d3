"""
Configuration Manager for LegalScore
Handles loading and accessing configuration from YAML files
"""

import os
import yaml
import asyncio
import logging
from typing import Dict, Any, Optional
from pathlib import Path

logger = logging.getLogger(__name__)

class ConfigManager:
    """
    Centralized configuration manager for the LegalScore service

    Loads configuration from YAML files and provides easy access to nested values.
    Supports environment-specific overrides and fallback values.
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration manager

        Args:
            config_path: Path to config file. If None, uses default location.
        """
        self._config = {}
        self._config_path = config_path or self._get_default_config_path()
        self._load_config()

    def _get_default_config_path(self) -> str:
        """Get default configuration file path"""
        env_path = os.getenv("LEGALSCORE_CONFIG")
        if env_path:
            return env_path

        # Look for config file in project root
        project_root = Path(__file__).parent.parent
        config_file = project_root / "config" / "config.yaml"

        if config_file.exists():
            return str(config_file)

        # Fallback to src directory
        fallback_config = Path(__file__).parent / "config.yaml"
        if fallback_config.exists():
            return str(fallback_config)

        # Let _load_config report the miss and fall back to defaults
        return str(config_file)

    def _load_config(self):
        """Load configuration from YAML file"""
        try:
            with open(self._config_path, 'r', encoding='utf-8') as f:
                self._config = yaml.safe_load(f) or {}

            logger.info(f"Configuration loaded from: {self._config_path}")

        except FileNotFoundError:
            logger.error(f"Configuration file not found: {self._config_path}")
            self._config = self._get_default_config()
        except yaml.YAMLError as e:
            logger.error(f"Error parsing YAML configuration: {e}")
            self._config = self._get_default_config()

        self._apply_environment_overrides()

    def _apply_environment_overrides(self):
        """Apply environment-specific configuration overrides"""
        env = self.get('system.environment', 'development')

        if env == 'production':
            self._config.setdefault('logging', {})['level'] = 'WARNING'
            self._config.setdefault('system', {})['debug'] = False
        elif env == 'testing':
            self._config.setdefault('logging', {})['level'] = 'DEBUG'
            self._config.setdefault('performance', {}).setdefault('timeouts', {})['llm_request'] = 30

    def _get_default_config(self) -> Dict[str, Any]:
        """Get minimal default configuration if file loading fails"""
        return {
            'system': {
                'name': 'LegalScore',
                'version': '1.0.0',
                'environment': 'development',
                'debug': False
            },
            'models': {
                'analyzer': {'model_name': 'gpt-4', 'temperature': 0.3, 'top_p': 0.9},
                'evaluator': {'model_name': 'gpt-4', 'temperature': 0.3, 'top_p': 0.9}
            },
            'external_services': {
                'llm': {'api_base': 'https://api.openai.com/v1', 'api_key_env': 'LEGAL_LLM_API_KEY'}
            },
            'scoring': {
                'defaults': {},
                'benchmark': {'industry_average': 7.2},
                'history': {'max_entries': 1000}
            },
            'logging': {
                'level': 'INFO',
                'decisions': {'enabled': True}
            }
        }

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation

        Args:
            key: Configuration key in dot notation (e.g., 'scoring.benchmark.industry_average')
            default: Default value if key not found

        Returns:
            Configuration value or default

        Examples:
            config.get('scoring.history.max_entries')
            config.get('models.evaluator.temperature', 0.3)
        """
        keys = key.split('.')
        value = self._config

        try:
            for k in keys:
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def validate(self) -> bool:
        """
        Validate configuration completeness

        Returns:
            True if configuration is valid, False otherwise
        """
        required_sections = ['system', 'models', 'scoring']

        for section in required_sections:
            if section not in self._config:
                logger.warning(f"Missing required configuration section: {section}")
                return False

        if not self.get('models.evaluator.model_name'):
            logger.warning("Missing evaluator model name")
            return False

        baseline = self.get('scoring.benchmark.industry_average', 7.2)
        if not isinstance(baseline, (int, float)) or baseline <= 0:
            logger.warning(f"Invalid industry average baseline: {baseline}")
            return False

        logger.info("Configuration validation passed")
        return True

    def is_debug_enabled(self) -> bool:
        """Check if debug mode is enabled"""
        return self.get('system.debug', False)

    def is_decision_logging_enabled(self, component: str = None) -> bool:
        """
        Check if decision logging is enabled for a component

        Args:
            component: Component name (scoreboard, analyzer, etc.). If None, checks global setting.

        Returns:
            True if decision logging is enabled
        """
        if not self.get('logging.decisions.enabled', True):
            return False
        if component:
            return self.get(f'logging.decisions.{component}', True)
        return True

    def get_timeout(self, timeout_type: str) -> int:
        """
        Get timeout value for specific operation

        Args:
            timeout_type: Type of timeout (llm_request)

        Returns:
            Timeout value in seconds
        """
        return self.get(f'performance.timeouts.{timeout_type}', 60)

    def __str__(self) -> str:
        """String representation of configuration"""
        return f"ConfigManager(path={self._config_path}, sections={list(self._config.keys())})"

    def __repr__(self) -> str:
        return self.__str__()


# Global configuration instance
_config_instance = None

# Global semaphore instance
_llm_gate = None

def get_config() -> ConfigManager:
    """
    Get global configuration instance (singleton pattern)

    Returns:
        ConfigManager instance
    """
    global _config_instance
    if _config_instance is None:
        _config_instance = ConfigManager()
    return _config_instance

def get_llm_gate() -> asyncio.Semaphore:
    """
    Get LLM concurrent request semaphore (singleton pattern)

    Returns:
        Semaphore for limiting LLM concurrent requests
    """
    global _llm_gate
    if _llm_gate is None:
        llm_limit = get_config().get('performance.concurrency.llm_concurrent_limit', 8)
        _llm_gate = asyncio.Semaphore(llm_limit)
        logger.info(f"LLM gate initialized with limit: {llm_limit}")
    return _llm_gate

def configure_logging(level: Optional[str] = None):
    """Apply the configured log level to the root logger (entry points only)"""
    cfg = get_config()
    level_name = (level or cfg.get('logging.level', 'INFO')).upper()
    if level is None and cfg.is_debug_enabled():
        level_name = 'DEBUG'
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

# Convenience functions for common configuration access
def get_model_name(model_type: str) -> str:
    """Get model name for specific model type"""
    return get_config().get(f'models.{model_type}.model_name', 'gpt-4')

def get_industry_average() -> float:
    """Get the benchmark baseline used for comparisons"""
    return float(get_config().get('scoring.benchmark.industry_average', 7.2))

def get_history_capacity() -> int:
    """Get the number of scoreboards kept for trend computation"""
    return int(get_config().get('scoring.history.max_entries', 1000))

def get_scoring_defaults() -> Dict[str, Any]:
    """Get configured defaults for scoring options"""
    return dict(get_config().get('scoring.defaults', {}) or {})

def get_max_tokens(key: str, default: int = 2000) -> int:
    """Get a token budget, e.g. 'scoring.max_tokens.recommendations'"""
    return int(get_config().get(key, default))

