"""
Configuration management for JobMatch.
"""

from pathlib import Path
from typing import Optional
import copy
import json
import os

from jobmatch.core.errors import ConfigurationError


class Config:
    """Manages engine configuration and API keys."""

    DEFAULT_CONFIG = {
        "api_keys": {
            "anthropic": "",
            "openai": "",
        },
        "analysis": {
            "provider": "anthropic",
            "model": "",
            "base_url": "",
            "timeout_seconds": 30,
            "max_retries": 2,
            "backoff_seconds": 1.0,
            "max_tokens": 2000,
            "temperature": 0.3,
        },
        "batch": {
            "batch_size": 3,
            "batch_delay_seconds": 1.0,
            "concurrency": 3,
        },
        "scoring": {
            "jitter": 0,
            "seed": None,
            "keywords": [],
            "bonuses": {},
        },
        "logging": {
            "level": "WARNING",
        },
    }

    PROVIDERS = ("anthropic", "openai")

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to config file (default: ~/.jobmatch/config.json)
        """
        if config_path:
            self.config_path = Path(config_path)
        else:
            self.config_path = Path.home() / ".jobmatch" / "config.json"

        self.config = self._load_config()

    def _load_config(self) -> dict:
        """Load configuration from file or fall back to defaults."""
        defaults = copy.deepcopy(self.DEFAULT_CONFIG)

        if self.config_path.exists():
            with open(self.config_path, 'r', encoding='utf-8') as f:
                try:
                    user_config = json.load(f)
                except json.JSONDecodeError as e:
                    raise ConfigurationError(f"Config file {self.config_path} is not valid JSON: {e}") from e

            if not isinstance(user_config, dict):
                raise ConfigurationError(f"Config file {self.config_path} must hold a JSON object")

            return self._deep_merge(defaults, user_config)

        return defaults

    def _deep_merge(self, base: dict, override: dict) -> dict:
        """Deep merge two dictionaries."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    def save(self) -> None:
        """Save current configuration to file."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.config_path, 'w', encoding='utf-8') as f:
            json.dump(self.config, f, indent=2)

    def get(self, key: str, default=None):
        """
        Get a configuration value using dot notation.

        Args:
            key: Configuration key (e.g., "analysis.timeout_seconds")
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value) -> None:
        """
        Set a configuration value using dot notation.

        Args:
            key: Configuration key (e.g., "batch.batch_size")
            value: Value to set
        """
        keys = key.split('.')
        config = self.config

        for k in keys[:-1]:
            if not isinstance(config.get(k), dict):
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    def get_api_key(self, provider: str) -> str:
        """
        Get API key for a provider.

        Environment variables (e.g. ANTHROPIC_API_KEY) take precedence over
        the config file.
        """
        env_value = os.environ.get(f"{provider.upper()}_API_KEY")
        if env_value:
            return env_value

        return self.get(f"api_keys.{provider}", "") or ""

    def require_api_key(self, provider: str) -> str:
        """Get an API key or fail with a message saying how to set it."""
        key = self.get_api_key(provider)
        if not key:
            raise ConfigurationError(
                f"No API key configured for '{provider}'. Set {provider.upper()}_API_KEY "
                f"or run: jobmatch config --set-api-key {provider} KEY"
            )
        return key

    def set_api_key(self, provider: str, key: str) -> None:
        """Set API key for a provider."""
        self.set(f"api_keys.{provider}", key)
        self.save()

    def get_analysis_config(self) -> dict:
        """Settings for the external analysis collaborator, with types coerced."""
        provider = self.get("analysis.provider", "anthropic")
        if provider not in self.PROVIDERS:
            raise ConfigurationError(
                f"Unknown analysis provider '{provider}'; expected one of {list(self.PROVIDERS)}"
            )
        return {
            "provider": provider,
            "model": self.get("analysis.model") or None,
            "base_url": self.get("analysis.base_url") or None,
            "timeout": float(self.get("analysis.timeout_seconds", 30)),
            "max_retries": int(self.get("analysis.max_retries", 2)),
            "backoff": float(self.get("analysis.backoff_seconds", 1.0)),
            "max_tokens": int(self.get("analysis.max_tokens", 2000)),
            "temperature": float(self.get("analysis.temperature", 0.3)),
        }

    def get_batch_config(self) -> dict:
        return {
            "batch_size": int(self.get("batch.batch_size", 3)),
            "batch_delay": float(self.get("batch.batch_delay_seconds", 1.0)),
            "concurrency": int(self.get("batch.concurrency", 3)),
        }

    def get_scoring_config(self) -> dict:
        return {
            "jitter": int(self.get("scoring.jitter", 0) or 0),
            "seed": self.get("scoring.seed"),
            "keywords": self.get("scoring.keywords") or [],
            "bonuses": self.get("scoring.bonuses") or {},
        }

    def get_log_level(self) -> str:
        return str(self.get("logging.level", "WARNING")).upper()

    def print_config(self) -> None:
        """Print current configuration (with API keys masked)."""
        masked_config = self._mask_sensitive(self.config)
        print(json.dumps(masked_config, indent=2))

    def _mask_sensitive(self, data: dict, sensitive_keys: set = None, mask_all: bool = False) -> dict:
        """Mask sensitive values in configuration. Everything under a sensitive section is masked."""
        if sensitive_keys is None:
            sensitive_keys = {"api_key", "api_keys", "secret", "password"}

        result = {}
        for key, value in data.items():
            sensitive = mask_all or any(s in key.lower() for s in sensitive_keys)
            if isinstance(value, dict):
                result[key] = self._mask_sensitive(value, sensitive_keys, sensitive)
            elif sensitive and (isinstance(value, str) or value is None):
                if value:
                    result[key] = f"{value[:4]}...{value[-4:]}" if len(value) > 8 else "****"
                else:
                    result[key] = "(not set)"
            else:
                result[key] = value
        return result
