"""
Configuration module for AI Issue Resolver.

Uses pydantic-settings for configuration management. Action inputs arrive as
``INPUT_<NAME>`` environment variables; plain environment variables
are read as well.
"""

import logging
from functools import lru_cache
from typing import Literal, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _action_input(name: str, *fallbacks: str) -> AliasChoices:
    """Build env aliases for an action input (hyphenated and underscored)."""
    upper = name.upper()
    return AliasChoices(
        f"INPUT_{upper}",
        f"INPUT_{upper.replace('-', '_')}",
        *fallbacks,
        name.replace("-", "_"),
    )


class Settings(BaseSettings):
    """
    Application settings loaded from action inputs and environment variables.

    No dotenv file is read: the working directory is the checked-out
    repository, whose files must not supply configuration.
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
        env_ignore_empty=True,
        protected_namespaces=(),
    )

    # Model Configuration
    model_api_key: str = Field(
        default="",
        validation_alias=_action_input("model-api-key", "MODEL_API_KEY", "OPENAI_API_KEY"),
        description="API key for the model provider",
    )
    model_provider: str = Field(
        default="openai",
        validation_alias=_action_input("model-provider", "MODEL_PROVIDER"),
        description="Model provider",
    )
    model_name: str = Field(
        default="gpt-4",
        validation_alias=_action_input("model-name", "MODEL_NAME"),
        description="Model used for analysis and generation",
    )
    model_temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        validation_alias=_action_input("model-temperature", "MODEL_TEMPERATURE"),
        description="Sampling temperature for model responses",
    )
    model_max_tokens: int = Field(
        default=4096,
        ge=100,
        le=128_000,
        validation_alias=_action_input("model-max-tokens", "MODEL_MAX_TOKENS"),
        description="Maximum tokens for model responses",
    )
    model_api_base: Optional[str] = Field(
        default=None,
        validation_alias=_action_input("model-api-base", "MODEL_API_BASE"),
        description="Override for the provider API base URL",
    )

    # GitHub Configuration
    github_token: str = Field(
        default="",
        validation_alias=_action_input("github-token", "GITHUB_TOKEN"),
        description="GitHub token used for REST calls",
    )
    github_api_url: str = Field(
        default="https://api.github.com",
        validation_alias=AliasChoices("GITHUB_API_URL", "github_api_url"),
        description="GitHub API base URL",
    )
    github_repository: str = Field(
        default="",
        validation_alias=AliasChoices("GITHUB_REPOSITORY", "github_repository"),
        description="Target repository in owner/repo form",
    )
    github_event_name: str = Field(
        default="",
        validation_alias=AliasChoices("GITHUB_EVENT_NAME", "github_event_name"),
        description="Name of the triggering event",
    )
    github_event_path: str = Field(
        default="",
        validation_alias=AliasChoices("GITHUB_EVENT_PATH", "github_event_path"),
        description="Path to the JSON event payload",
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0.0,
        validation_alias=AliasChoices("REQUEST_TIMEOUT", "request_timeout"),
        description="HTTP timeout in seconds for GitHub calls",
    )

    # Workflow Settings
    base_branch: str = Field(
        default="main",
        validation_alias=_action_input("base-branch", "BASE_BRANCH"),
        description="Branch generated pull requests are opened against",
    )
    branch_prefix: str = Field(
        default="ai-pr/",
        validation_alias=_action_input("branch-prefix", "BRANCH_PREFIX"),
        description="Prefix for branches created from issues",
    )
    trigger_label: str = Field(
        default="ai-issue-resolver-pr",
        min_length=1,
        validation_alias=_action_input("trigger-label", "TRIGGER_LABEL"),
        description="Issue label that starts pull request generation",
    )
    pr_label: str = Field(
        default="ai-issue-resolver-pr",
        validation_alias=_action_input("pr-label", "PR_LABEL"),
        description="Label added to generated pull requests",
    )
    change_command: str = Field(
        default="/ai-issue-resolver-change",
        min_length=1,
        validation_alias=_action_input("change-command", "CHANGE_COMMAND"),
        description="Comment prefix requesting changes on a pull request",
    )
    review_command: str = Field(
        default="/ai-issue-resolver-review",
        min_length=1,
        validation_alias=_action_input("review-command", "REVIEW_COMMAND"),
        description="Comment prefix requesting a code review",
    )

    # Application Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        validation_alias=_action_input("log-level", "LOG_LEVEL"),
        description="Logging level",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("model_provider", mode="before")
    @classmethod
    def normalize_provider(cls, v: str) -> str:
        """Normalize provider identifier."""
        if isinstance(v, str):
            return v.strip().lower() or "openai"
        return v

    @property
    def is_model_configured(self) -> bool:
        """Check if the model provider key is set."""
        return bool(self.model_api_key and self.model_api_key != "your_model_api_key_here")

    @property
    def is_github_configured(self) -> bool:
        """Check if GitHub is properly configured."""
        return bool(self.github_token and self.github_token != "your_github_token_here")

    @property
    def repo_owner(self) -> str:
        """Owner part of ``github_repository``."""
        return self.github_repository.partition("/")[0]

    @property
    def repo_name(self) -> str:
        """Name part of ``github_repository``."""
        return self.github_repository.partition("/")[2]


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()


def setup_logging(settings: Settings | None = None) -> logging.Logger:
    """
    Configure application logging.

    Args:
        settings: Optional settings instance. If not provided, uses cached settings.

    Returns:
        logging.Logger: Configured logger instance.
    """
    if settings is None:
        settings = get_settings()

    # Configure root logger
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logger = logging.getLogger("issue_resolver")
    logger.setLevel(getattr(logging, settings.log_level))

    return logger
