from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "FilterForge"
    debug: bool = False

    # Rule document override; None uses the packaged exclusion_rules.json
    exclusion_rules_path: Path | None = None

    # Round cap for the inference fixed-point loop
    # Well-formed rule sets settle in two rounds (one changing, one quiet)
    inference_max_iterations: int = 10


settings = Settings()
