"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_path: str = "fraud_scoring.db"

    # Service
    service_name: str = "fraud-scoring"
    log_level: str = "INFO"

    # Seed values for the auto-action thresholds, used only when none are stored yet
    default_auto_approve_below: int = 20
    default_auto_block_above: int = 80


settings = Settings()
