import os
from typing import Optional

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..errors import ConfigError

DEFAULT_CONFIG_FILE = "config.cfg"


class Settings(BaseSettings):
    # Repository
    REPO_PATH: str = ""
    MONITOR_TARGET: str = ""
    REMOTE_NAME: str = "origin"
    BRANCH_NAME: str = "main"

    # Polling
    POLL_INTERVAL: float = 5
    LOGFILE: str = "autopush.log"

    # Email notification (SendGrid)
    SENDER_EMAIL: str = ""
    COLLAB_EMAILS: str = ""
    EMAIL_SUBJECT: str = "Auto-commit notification"
    SENDGRID_API_KEY: str = ""
    SENDGRID_URL: str = "https://api.sendgrid.com/v3/mail/send"
    EMAIL_TIMEOUT: int = 30

    # Environment variables override values read from the config file
    model_config = SettingsConfigDict(
        env_file=DEFAULT_CONFIG_FILE,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )


REQUIRED_FIELDS = ["REPO_PATH", "MONITOR_TARGET"]


def load_settings(config_file: Optional[str] = None) -> Settings:
    """
    Load settings from a KEY=VALUE config file and validate required fields.

    Raises ConfigError when the file is missing, a value cannot be parsed
    or a required field is empty.
    """
    config_file = config_file or os.getenv("AUTOPUSH_CONFIG", DEFAULT_CONFIG_FILE)

    if not os.path.isfile(config_file):
        raise ConfigError(
            f"Missing {os.path.basename(config_file)} in {os.path.dirname(os.path.abspath(config_file))}. "
            "Create it and re-run."
        )

    try:
        settings = Settings(_env_file=config_file)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_file}: {e}") from e

    missing_fields = [field for field in REQUIRED_FIELDS if not getattr(settings, field)]
    if missing_fields:
        raise ConfigError(f"{' and '.join(missing_fields)} must be set in {config_file}")

    if settings.POLL_INTERVAL <= 0:
        raise ConfigError(f"POLL_INTERVAL must be positive, got {settings.POLL_INTERVAL}")

    return settings


def config_summary(settings: Settings) -> str:
    """
    Describe the current configuration without sensitive data
    """
    return (
        f"repo={settings.REPO_PATH} target={settings.MONITOR_TARGET} "
        f"remote={settings.REMOTE_NAME}/{settings.BRANCH_NAME} "
        f"interval={settings.POLL_INTERVAL}s recipients={settings.COLLAB_EMAILS or '-'} "
        f"api_key={'SET' if settings.SENDGRID_API_KEY else 'NOT SET'}"
    )
