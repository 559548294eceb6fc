"""Configuration models for timeoff.

Defined using Pydantic for validation and YAML serialization support.
"""

from typing import Literal

from pydantic import BaseModel, Field, SecretStr

from timeoff.dialogs.date_resolver import RETRY_PROMPT
from timeoff.dialogs.interrupts import CANCEL_TEXT, HELP_TEXT
from timeoff.dialogs.vacation import END_DATE_PROMPT, START_DATE_PROMPT


class RecognizerConfig(BaseModel):
    """Intent/date recognizer configuration."""

    provider: str = Field(default="openai", description="Model provider (openai, anthropic, etc.)")
    model: str = Field(default="gpt-4o-mini", description="Model identifier")
    api_key: SecretStr | None = Field(
        default=None, description="Provider credentials; without them nothing is recognized"
    )
    temperature: float = Field(default=0.0, description="Temperature for generation")


class ApprovalConfig(BaseModel):
    """Downstream approval service."""

    endpoint: str | None = Field(default=None, description="URL that receives approval requests")
    timeout: float = Field(default=10.0, gt=0, description="Timeout for outbound HTTP calls")


class ChannelsConfig(BaseModel):
    """Channel credentials and identity fallback."""

    slack_token: SecretStr | None = Field(
        default=None, description="Slack OAuth token used for users.info lookups"
    )
    default_user_id: str | None = Field(
        default=None,
        description="User id attributed to turns from channels without real identities",
    )
    identities: dict[str, str] = Field(
        default_factory=dict,
        description="Static user id -> identity map used when no Slack token is configured",
    )


class PersistenceConfig(BaseModel):
    """Conversation state persistence."""

    backend: Literal["memory", "sqlite"] = Field(default="memory", description="Checkpointer type")
    path: str = Field(default="timeoff.db", description="SQLite file path")


class MessagesConfig(BaseModel):
    """User-facing texts."""

    help: str = HELP_TEXT
    cancel: str = CANCEL_TEXT
    start_date_prompt: str = START_DATE_PROMPT
    end_date_prompt: str = END_DATE_PROMPT
    date_retry_prompt: str = RETRY_PROMPT
    not_understood: str = "Sorry, I didn't get that. Please try asking in a different way."


class TimeoffConfig(BaseModel):
    """Root configuration."""

    recognizer: RecognizerConfig = Field(default_factory=RecognizerConfig)
    approval: ApprovalConfig = Field(default_factory=ApprovalConfig)
    channels: ChannelsConfig = Field(default_factory=ChannelsConfig)
    persistence: PersistenceConfig = Field(default_factory=PersistenceConfig)
    messages: MessagesConfig = Field(default_factory=MessagesConfig)
    log_level: str = Field(default="INFO", description="Log level for the timeoff logger")
