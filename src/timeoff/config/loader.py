"""Config loader for YAML files and environment overrides."""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import SecretStr
from pydantic import ValidationError as PydanticValidationError

from timeoff.config.models import TimeoffConfig
from timeoff.core.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "TIMEOFF_CONFIG_PATH"
DEFAULT_CONFIG_FILE = "timeoff.yaml"


class ConfigLoader:
    """Load TimeoffConfig from YAML files and the process environment."""

    @staticmethod
    def load(path: Path | str | None = None, env: Mapping[str, str] | None = None) -> TimeoffConfig:
        """Load configuration.

        Args:
            path: YAML file. Defaults to $TIMEOFF_CONFIG_PATH, then ./timeoff.yaml
                if it exists, then built-in defaults.
            env: Environment to read overrides from (defaults to os.environ).

        Returns:
            Parsed TimeoffConfig instance with environment overrides applied.

        Raises:
            ConfigError: If the file is missing or invalid.
        """
        env = os.environ if env is None else env

        if path is None:
            path = env.get(CONFIG_PATH_ENV)
        if path is None and Path(DEFAULT_CONFIG_FILE).exists():
            path = DEFAULT_CONFIG_FILE

        data: dict[str, Any] = {}
        if path is not None:
            config_path = Path(path)
            if not config_path.exists():
                raise ConfigError(f"Config file not found: {config_path}")
            try:
                with open(config_path, encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
            logger.info(f"Loaded config from {config_path}")

        try:
            config = TimeoffConfig.model_validate(data)
        except PydanticValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

        return apply_env_overrides(config, env)


def apply_env_overrides(config: TimeoffConfig, env: Mapping[str, str]) -> TimeoffConfig:
    """Credentials and endpoints may come from the environment instead of YAML."""
    api_key = env.get("TIMEOFF_RECOGNIZER_API_KEY") or env.get("OPENAI_API_KEY")
    if api_key:
        config.recognizer.api_key = SecretStr(api_key)
    if model := env.get("TIMEOFF_RECOGNIZER_MODEL"):
        config.recognizer.model = model
    if endpoint := env.get("TIMEOFF_APPROVAL_ENDPOINT"):
        config.approval.endpoint = endpoint
    if default_user_id := env.get("TIMEOFF_DEFAULT_USER_ID"):
        config.channels.default_user_id = default_user_id
    if slack_token := env.get("TIMEOFF_SLACK_BOT_TOKEN"):
        config.channels.slack_token = SecretStr(slack_token)
    if log_level := env.get("TIMEOFF_LOG_LEVEL"):
        config.log_level = log_level
    return config
