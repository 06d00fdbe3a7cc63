from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from flashsched.domain.constants import DEFAULT_FORECAST_DAYS

DEFAULT_DECK_NAME = "deck.json"


def config_files() -> list[Path]:
    return [
        Path.home() / ".config/flashsched/config.toml",
        Path.home() / ".flashsched.toml",
    ]


class AppConfig(BaseSettings):
    """
    Configuration model for flashsched.
    Supports loading from:
    1. Environment variables (FLASHSCHED_*)
    2. Config file (~/.config/flashsched/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="FLASHSCHED_",
        extra="ignore",
    )

    # Paths
    deck_path: Path | None = None

    # Reporting
    forecast_days: int = Field(default=DEFAULT_FORECAST_DAYS, ge=1)

    # Logging: 0 = warnings only, 1 = info, 2+ = debug. The CLI -v flag adds to it.
    verbose: int = Field(default=1, ge=0)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # Find the first existing file; earlier sources win
        toml_file = next((f for f in config_files() if f.exists()), None)

        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("deck_path", mode="before")
    @classmethod
    def resolve_deck_path(cls, v: Any) -> Path | None:
        if v is None:
            return None
        return Path(v).expanduser().resolve()


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/flashsched/config.toml (if exists)
    3. Environment variables (FLASHSCHED_*)
    4. cli_overrides (passed from Typer)
    """
    # Typer passes None for options the user did not set; drop those so they
    # do not shadow lower layers.
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    config = AppConfig(**overrides)

    if config.deck_path is None:
        config.deck_path = (Path.cwd() / DEFAULT_DECK_NAME).resolve()

    return config
