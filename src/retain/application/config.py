from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from retain.domain.constants import RECENT_WINDOW_DAYS


class AppConfig(BaseSettings):
    """
    Configuration model for retain.
    Supports loading from:
    1. Environment variables (RETAIN_*)
    2. Config file (~/.config/retain/config.toml or ~/.retain.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="RETAIN_",
        extra="ignore",
    )

    # Paths
    store_path: Path = Field(
        default_factory=lambda: Path.home() / ".local/share/retain/items.json"
    )

    # Behaviour
    history_enabled: bool = True
    recent_window_days: int = Field(default=RECENT_WINDOW_DAYS, ge=1)
    verbose: int = Field(default=1, ge=0)  # 0 warnings only, 1 info, 2+ debug

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

        # Home may be redirected (tests), so resolve the candidates at call time
        candidates = [
            Path.home() / ".config/retain/config.toml",
            Path.home() / ".retain.toml",
        ]
        toml_file = next((f for f in candidates if f.exists()), None)

        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("store_path", mode="before")
    @classmethod
    def expand_path(cls, v: Any) -> Path:
        return Path(v).expanduser()


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/retain/config.toml (if exists)
    3. Environment variables (RETAIN_*)
    4. cli_overrides (passed from Typer)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
