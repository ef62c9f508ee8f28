"""Configuration management using Pydantic Settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Completion service (messages + max_tokens in, content[0].text out)
    completion_url: str = "http://localhost:3000/api/claude"
    completion_api_key: str | None = Field(
        default=None,
        description="Sent as a Bearer token when set; the default proxy needs none"
    )
    completion_timeout: float = 120.0
    completion_max_concurrent: int = 8

    chat_max_tokens: int = Field(
        default=2000,
        description="max_tokens for conversation turns"
    )
    tooltip_max_tokens: int = Field(
        default=150,
        description="max_tokens for one-sentence tooltip explanations"
    )

    # Fixed replies used when the completion service fails
    chat_fallback_reply: str = "Sorry, I encountered an error processing your request."
    tooltip_fallback_reply: str = "Unable to fetch explanation."

    # Root node
    root_node_id: str = "root"
    root_label: str = "Start your learning journey"
    root_x: float = 100.0
    root_y: float = 300.0

    # Branch placement: siblings spread right, children drop down
    branch_horizontal_spacing: float = 120.0
    branch_vertical_drop: float = 150.0

    # Labels
    label_max_length: int = Field(
        default=40,
        description="Node labels keep this many leading characters"
    )
    display_label_max_length: int = Field(
        default=35,
        description="Graph projection truncates labels past this length"
    )
    deep_dive_preview_length: int = 20

    # Raise structural graph errors instead of logging and ignoring them
    debug: bool = False

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False


def get_test_settings() -> Settings:
    """Get test environment settings."""
    return Settings(
        completion_url="http://completion.test/api/claude",
        completion_timeout=5.0,
        debug=True,
    )


# Global settings instance
settings = Settings()
