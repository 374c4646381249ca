"""Configuration management for gptchat."""

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ENDPOINT = "https://api.openai.com/v1/chat/completions"


def get_config_dir() -> Path:
    """Get the configuration directory."""
    override = os.environ.get("GPTCHAT_CONFIG_DIR")
    if override:
        config_dir = Path(override)
    elif os.name == "nt":  # Windows
        config_dir = Path(os.environ.get("APPDATA", "~")).expanduser() / "gptchat"
    else:  # Unix-like
        config_dir = Path.home() / ".config" / "gptchat"

    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_env_file_path() -> Path:
    """Get the path to the env file."""
    return get_config_dir() / ".env"


class Config(BaseSettings):
    """gptchat configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GPTCHAT_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API
    api_key: str | None = Field(default=None, description="OpenAI API key")
    model: str = Field(default="gpt-3.5-turbo", description="Model to use")
    endpoint: str = Field(default=DEFAULT_ENDPOINT, description="Chat completions URL")
    timeout: float | None = Field(default=120.0, description="HTTP timeout in seconds")

    # Request defaults
    temperature: float | None = None
    max_tokens: int | None = None
    system_prompt: str | None = None

    # Logging
    log_level: str = Field(default="WARNING")

    @property
    def is_configured(self) -> bool:
        """Check if API key is configured."""
        return bool(self.api_key)


# Global config instance
_config: Config | None = None


def get_config(reload: bool = False) -> Config:
    """Get or create global config instance."""
    global _config
    if _config is None or reload:
        _config = Config(_env_file=str(get_env_file_path()))
    return _config


def reload_config() -> Config:
    """Reload configuration from disk."""
    return get_config(reload=True)


ENV_MAPPING = {
    "api_key": "GPTCHAT_API_KEY",
    "model": "GPTCHAT_MODEL",
    "endpoint": "GPTCHAT_ENDPOINT",
    "timeout": "GPTCHAT_TIMEOUT",
    "temperature": "GPTCHAT_TEMPERATURE",
    "max_tokens": "GPTCHAT_MAX_TOKENS",
    "system_prompt": "GPTCHAT_SYSTEM_PROMPT",
    "log_level": "GPTCHAT_LOG_LEVEL",
}


def update_config(**kwargs) -> Config:
    """Update configuration and save to env file."""
    env_file = get_env_file_path()

    existing_content = ""
    if env_file.exists():
        existing_content = env_file.read_text(encoding="utf-8")

    lines = [line for line in existing_content.split("\n") if line]

    for key, value in kwargs.items():
        if key not in ENV_MAPPING:
            raise ValueError(f"unknown config key: {key!r}")
        if value is None:
            continue
        env_var = ENV_MAPPING[key]
        new_line = f"{env_var}={value}"

        for i, line in enumerate(lines):
            if line.startswith(f"{env_var}="):
                lines[i] = new_line
                break
        else:
            lines.append(new_line)

    env_file.write_text("\n".join(lines) + "\n", encoding="utf-8")

    return reload_config()
