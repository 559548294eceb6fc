"""Configuration module for timeoff."""

from timeoff.config.loader import ConfigLoader, apply_env_overrides
from timeoff.config.models import (
    ApprovalConfig,
    ChannelsConfig,
    MessagesConfig,
    PersistenceConfig,
    RecognizerConfig,
    TimeoffConfig,
)

__all__ = [
    "ApprovalConfig",
    "ChannelsConfig",
    "ConfigLoader",
    "MessagesConfig",
    "PersistenceConfig",
    "RecognizerConfig",
    "TimeoffConfig",
    "apply_env_overrides",
]
